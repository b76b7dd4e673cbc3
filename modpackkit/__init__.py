"""Building blocks for managing Minecraft modpacks sourced from CurseForge and Modrinth."""

__version__ = "0.1.0"

__all__ = [
    "cfupdate",
    "curseforge",
    "modrinth",
    "mrupdate",
    "murmur2",
    "packinterop",
    "versions",
]
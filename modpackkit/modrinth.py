"""Modrinth project placement, URL parsing, loader preference and pack index documents."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Sequence
from urllib.parse import unquote

from modpackkit.versions import flexver_less

_UINT32_MASK = 0xFFFFFFFF

UNIVERSAL_SIDE = "both"
SERVER_SIDE = "server"
CLIENT_SIDE = "client"

_LOADER_FOLDERS = {
    "quilt": "mods",
    "fabric": "mods",
    "forge": "mods",
    "neoforge": "mods",
    "liteloader": "mods",
    "modloader": "mods",
    "rift": "mods",
    "bukkit": "plugins",
    "spigot": "plugins",
    "paper": "plugins",
    "purpur": "plugins",
    "sponge": "plugins",
    "bungeecord": "plugins",
    "waterfall": "plugins",
    "velocity": "plugins",
    "canvas": "resourcepacks",
    "iris": "shaderpacks",
    "optifine": "shaderpacks",
    "vanilla": "resourcepacks",
}

# Loaders in order of preference when versions are otherwise equal; earlier is preferred.
_LOADER_PREFERENCE = (
    "quilt",
    "fabric",
    "neoforge",
    "forge",
    "liteloader",
    "modloader",
    "rift",
    "sponge",
    "purpur",
    "paper",
    "spigot",
    "bukkit",
    "velocity",
    "waterfall",
    "bungeecord",
    "canvas",
    "iris",
    "optifine",
    "vanilla",
    "datapack",
    "minecraft",
)

# Support for the key loader in both lists implies the group is treated alike.
_LOADER_COMPAT_GROUPS = {
    "fabric": ("quilt",),
    "forge": ("neoforge",),
    "bukkit": ("purpur", "paper", "spigot"),
    "bungeecord": ("waterfall",),
}

_SLUG_CHARS = r'[a-zA-Z0-9!@$()`.+,_"-]'

_URL_PATTERNS = (
    re.compile(
        r"^https?://(www.)?modrinth\.com/(?P<urlCategory>[^/]+)/(?P<slug>"
        + _SLUG_CHARS
        + r"{3,64})(?:/version/(?P<version>"
        + _SLUG_CHARS
        + r"{1,32}))?",
        re.ASCII,
    ),
    re.compile(
        r"^https?://cdn\.modrinth\.com/data/(?P<slug>[a-zA-Z0-9]+)/versions/"
        r"(?P<versionID>[a-zA-Z0-9]+)/(?P<filename>[^/]+)\Z",
        re.ASCII,
    ),
    re.compile(r"^(?P<slug>" + _SLUG_CHARS + r"{3,64})\Z", re.ASCII),
)

_SLUG_PATTERN_INDEX = 2

_URL_CATEGORIES = ("mod", "plugin", "datapack", "shader", "resourcepack", "modpack")

_BAD_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")

_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


class ModrinthError(Exception):
    """Raised when Modrinth input or project data cannot be used."""


def _best_preference_index(loaders: Iterable[str]) -> Optional[int]:
    indexes = [_LOADER_PREFERENCE.index(loader) for loader in loaders if loader in _LOADER_PREFERENCE]
    return min(indexes) if indexes else None


def get_project_type_folder(
    project_type: str,
    file_loaders: Sequence[str],
    pack_loaders: Sequence[str],
    datapack_folder: str = "",
) -> str:
    """The folder a project of the given type and loaders is stored in."""
    if project_type == "modpack":
        raise ModrinthError(
            "this command should not be used to add Modrinth modpacks, and importing of "
            "Modrinth modpacks is not yet supported"
        )
    if project_type == "resourcepack":
        return "resourcepacks"
    if project_type == "shader":
        best = _best_preference_index(file_loaders)
        if best is not None:
            return _LOADER_FOLDERS.get(_LOADER_PREFERENCE[best], "")
        return "shaderpacks"
    if project_type == "mod":
        best = _best_preference_index(loader for loader in file_loaders if loader in pack_loaders)
        if best is not None:
            return _LOADER_FOLDERS.get(_LOADER_PREFERENCE[best], "")
        if "datapack" in file_loaders:
            if datapack_folder:
                return datapack_folder
            raise ModrinthError("set the datapack-folder option to use datapacks")
        return "mods"
    raise ModrinthError(f"unknown project type {project_type}")


@dataclass(frozen=True)
class ParsedInput:
    """What could be read from a Modrinth URL or slug; empty fields were not present."""

    slug: str = ""
    version: str = ""
    version_id: str = ""
    filename: str = ""
    # True when the input was a bare slug rather than a URL.
    parsed_slug: bool = False


def _path_unescape(text: str) -> str:
    bad = _BAD_ESCAPE.search(text)
    if bad is not None:
        raise ModrinthError(f'invalid URL escape "{text[bad.start():bad.start() + 3]}"')
    return unquote(text, errors="surrogateescape")


def parse_slug_or_url(text: str) -> ParsedInput:
    """Read a slug, version, version ID and file name from a Modrinth URL or slug."""
    for index, pattern in enumerate(_URL_PATTERNS):
        match = pattern.search(text)
        if match is None:
            continue
        groups = match.groupdict()
        if "urlCategory" in groups and groups["urlCategory"] not in _URL_CATEGORIES:
            raise ModrinthError("unknown project type: " + groups["urlCategory"])
        filename = ""
        if groups.get("filename") is not None:
            filename = _path_unescape(groups["filename"])
        return ParsedInput(
            slug=groups.get("slug") or "",
            version=groups.get("version") or "",
            version_id=groups.get("versionID") or "",
            filename=filename,
            parsed_slug=index == _SLUG_PATTERN_INDEX,
        )
    return ParsedInput()


def compare_loader_lists(a: Sequence[str], b: Sequence[str]) -> int:
    """Compare loader lists: 1 when ``b`` is preferred, -1 when ``a`` is, else 0."""
    compat: set[str] = set()
    for key, group in _LOADER_COMPAT_GROUPS.items():
        if key in a and key in b:
            compat.update(group)

    def preference(loader: str) -> int:
        return _LOADER_PREFERENCE.index(loader) if loader in _LOADER_PREFERENCE else -1

    no_index = float("inf")
    min_a = no_index
    for loader in a:
        if loader in compat:
            continue
        idx = preference(loader)
        if idx != -1 and idx < min_a:
            min_a = idx
    min_b = no_index
    for loader in b:
        if loader in compat:
            continue
        idx = preference(loader)
        if idx < min_a:
            return 1
        if idx != -1 and idx < min_b:
            min_b = idx
    if min_a < min_b:
        return -1
    return 0


def should_download_on_side(side: str) -> bool:
    """Whether a project's support level for a side means it is installed there."""
    return side in ("required", "optional")


def get_side(server_side: str, client_side: str) -> str:
    """The side a project is installed on, or an empty string when neither."""
    server = should_download_on_side(server_side)
    client = should_download_on_side(client_side)
    if server and client:
        return UNIVERSAL_SIDE
    if server:
        return SERVER_SIDE
    if client:
        return CLIENT_SIDE
    return ""


def get_best_hash(hashes: Mapping[str, str]) -> tuple[str, str]:
    """The preferred (algorithm, hash) pair of a file, or ("", "") when it has none."""
    for algorithm in ("sha512", "sha256", "sha1", "murmur2"):
        if algorithm in hashes:
            return algorithm, hashes[algorithm]
    for algorithm, value in hashes.items():
        return algorithm, value
    return "", ""


def map_dep_override(dep_id: str, is_quilt: bool, mc_version: str) -> str:
    """Swap Fabric library dependencies for their Quilt equivalents on Quilt packs."""
    if is_quilt and dep_id in ("P7dR8mSH", "fabric-api"):
        return "qvIfYCYJ"
    if is_quilt and dep_id in ("Ha28R6CL", "fabric-language-kotlin"):
        if flexver_less("1.19.1", mc_version) and flexver_less(mc_version, "2.0.0"):
            return "lwVhp9o5"
    return dep_id


@dataclass
class PackFile:
    """A file entry of a Modrinth pack index."""

    path: str
    hashes: dict[str, str] = field(default_factory=dict)
    # (client, server) environment support, or None when unspecified.
    env: Optional[tuple[str, str]] = None
    downloads: list[str] = field(default_factory=list)
    file_size: int = 0

    def to_dict(self) -> dict[str, Any]:
        env = None
        if self.env is not None:
            env = {"client": self.env[0], "server": self.env[1]}
        return {
            "path": self.path,
            "hashes": dict(sorted(self.hashes.items())),
            "env": env,
            "downloads": list(self.downloads),
            "fileSize": self.file_size & _UINT32_MASK,
        }


@dataclass
class Pack:
    """A Modrinth pack index (modrinth.index.json)."""

    name: str = ""
    version_id: str = ""
    summary: str = ""
    files: list[PackFile] = field(default_factory=list)
    dependencies: dict[str, str] = field(default_factory=dict)
    format_version: int = 1
    game: str = "minecraft"

    def to_dict(self) -> dict[str, Any]:
        document: dict[str, Any] = {
            "formatVersion": self.format_version,
            "game": self.game,
            "versionId": self.version_id,
            "name": self.name,
        }
        if self.summary:
            document["summary"] = self.summary
        document["files"] = [entry.to_dict() for entry in self.files]
        document["dependencies"] = dict(sorted(self.dependencies.items()))
        return document

    def to_json(self) -> str:
        """The index as JSON indented by four spaces, ending with a newline."""
        text = json.dumps(self.to_dict(), indent=4, ensure_ascii=False)
        return "".join(_HTML_ESCAPES.get(ch, ch) for ch in text) + "\n"
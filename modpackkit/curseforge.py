"""CurseForge game-version naming, project reference parsing and mod list rendering."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional

_SNAPSHOT_VERSION = re.compile(r"(?:Snapshot )?(\d+)w0?(0|[1-9]\d*)([a-z])", re.ASCII)

_SNAPSHOT_NAMES = ("-pre", " Pre-Release ", " Pre-release ", "-rc")

_URL_PATTERNS = (
    re.compile(
        r"^https?://(?P<game>minecraft)\.curseforge\.com/projects/(?P<slug>[^/]+)"
        r"(?:/(?:files|download)/(?P<fileID>\d+))?",
        re.ASCII,
    ),
    re.compile(
        r"^https?://(?:www\.|beta\.|legacy\.)?curseforge\.com/(?P<game>[^/]+)/"
        r"(?P<category>[^/]+)/(?P<slug>[^/]+)(?:/(?:files|download)/(?P<fileID>\d+))?",
        re.ASCII,
    ),
    re.compile(r"^(?P<slug>[a-z][\da-z\-_]{0,127})\Z", re.ASCII),
)

_MAX_FILE_ID = 0xFFFFFFFF

_PROJECT_URL = "https://www.curseforge.com/projects/"


def _snapshot_version(year: int, week: int) -> Optional[str]:
    if year >= 22 and week >= 11:
        return "1.19-Snapshot"
    if (year == 21 and week >= 37) or year >= 22:
        return "1.18-Snapshot"
    if (year == 20 and week >= 45) or (year == 21 and week <= 20):
        return "1.17-Snapshot"
    if year == 20 and week >= 6:
        return "1.16-Snapshot"
    if year == 19 and week >= 34:
        return "1.15-Snapshot"
    if (year == 18 and week >= 43) or (year == 19 and week <= 14):
        return "1.14-Snapshot"
    if year == 18 and 30 <= week <= 33:
        return "1.13.1-Snapshot"
    if (year == 17 and week >= 43) or (year == 18 and week <= 22):
        return "1.13-Snapshot"
    if year == 17 and week == 31:
        return "1.12.1-Snapshot"
    if year == 17 and 6 <= week <= 18:
        return "1.12-Snapshot"
    if year == 16 and week == 50:
        return "1.11.1-Snapshot"
    if year == 16 and 32 <= week <= 44:
        return "1.11-Snapshot"
    if year == 16 and 20 <= week <= 21:
        return "1.10-Snapshot"
    if year == 16 and 14 <= week <= 15:
        return "1.9.3-Snapshot"
    if (year == 15 and week >= 31) or (year == 16 and week <= 7):
        return "1.9-Snapshot"
    if year == 14 and 2 <= week <= 34:
        return "1.8-Snapshot"
    if year == 13 and 47 <= week <= 49:
        return "1.7.4-Snapshot"
    if year == 13 and 36 <= week <= 43:
        return "1.7.2-Snapshot"
    if year == 13 and 16 <= week <= 26:
        return "1.6-Snapshot"
    if year == 13 and 11 <= week <= 12:
        return "1.5.1-Snapshot"
    if year == 13 and 1 <= week <= 10:
        return "1.5-Snapshot"
    if year == 12 and 49 <= week <= 50:
        return "1.4.6-Snapshot"
    if year == 12 and 32 <= week <= 42:
        return "1.4.2-Snapshot"
    if year == 12 and 15 <= week <= 30:
        return "1.3.1-Snapshot"
    if year == 12 and 3 <= week <= 8:
        return "1.2.1-Snapshot"
    if (year == 11 and week >= 47) or (year == 12 and week <= 1):
        return "1.1-Snapshot"
    return None


def get_curseforge_version(mc_version: str) -> str:
    """Map a Minecraft version to the name CurseForge files it under."""
    for name in _SNAPSHOT_NAMES:
        index = mc_version.find(name)
        if index > -1:
            return mc_version[:index] + "-Snapshot"

    match = _SNAPSHOT_VERSION.search(mc_version)
    if match is None:
        return mc_version
    mapped = _snapshot_version(int(match.group(1)), int(match.group(2)))
    return mc_version if mapped is None else mapped


def get_curseforge_versions(mc_versions: Iterable[str]) -> list[str]:
    """Map every Minecraft version to its CurseForge name."""
    return [get_curseforge_version(version) for version in mc_versions]


@dataclass(frozen=True)
class ParsedReference:
    """What could be read from a CurseForge URL or slug; empty fields were not present."""

    game: str = ""
    category: str = ""
    slug: str = ""
    file_id: int = 0


def parse_slug_or_url(url: str) -> ParsedReference:
    """Read the game, category, slug and file ID from a CurseForge URL or a bare slug.

    Returns an empty reference when the input matches no known form. Raises
    ValueError when the file ID does not fit in 32 bits.
    """
    for pattern in _URL_PATTERNS:
        match = pattern.search(url)
        if match is None:
            continue
        groups = match.groupdict()
        file_id = 0
        raw_file_id = groups.get("fileID")
        if raw_file_id:
            file_id = int(raw_file_id)
            if file_id > _MAX_FILE_ID:
                raise ValueError(f"file ID {raw_file_id} is out of range")
        return ParsedReference(
            game=groups.get("game") or "",
            category=groups.get("category") or "",
            slug=groups.get("slug") or "",
            file_id=file_id,
        )
    return ParsedReference()


@dataclass(frozen=True)
class ModlistEntry:
    """A mod shown in the exported mod list; ``project_id`` is None without CurseForge metadata."""

    name: str
    project_id: Optional[int] = None


def render_modlist(entries: Iterable[ModlistEntry]) -> str:
    """Render the HTML mod list stored in a CurseForge export."""
    lines = ["<ul>\r\n"]
    for entry in entries:
        if entry.project_id is None:
            lines.append(f"<li>{entry.name}</li>\r\n")
        else:
            lines.append(
                f'<li><a href="{_PROJECT_URL}{entry.project_id}">{entry.name}</a></li>\r\n'
            )
    lines.append("</ul>\r\n")
    return "".join(lines)
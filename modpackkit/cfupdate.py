"""CurseForge update metadata, export metadata, download metadata and file placement."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from modpackkit.versions import flexver_less

META_EXTENSION = ".pw.toml"

_UINT32_MAX = 0xFFFFFFFF

_MINECRAFT_GAME_ID = 432

# Folders for known class or category IDs, per game.
DEFAULT_FOLDERS: dict[int, dict[int, str]] = {
    _MINECRAFT_GAME_ID: {
        5: "plugins",
        12: "resourcepacks",
        6: "mods",
        17: "saves",
    },
}

_FABRIC_API = 306612
_QUILTED_FABRIC_API = 634179
_FABRIC_LANGUAGE_KOTLIN = 308769
_QUILT_KOTLIN_LIBRARIES = 720410


def _uint32_field(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"'{key}' expected type 'uint32', got {type(value).__name__}")
    if not 0 <= value <= _UINT32_MAX:
        raise ValueError(f"cannot parse '{key}', {value} overflows uint32")
    return value


@dataclass
class UpdateData:
    """The ``[update.curseforge]`` section of a metadata file."""

    project_id: int = 0
    file_id: int = 0

    def to_map(self) -> dict[str, int]:
        return {"project-id": self.project_id, "file-id": self.file_id}

    @classmethod
    def from_map(cls, data: Mapping[str, Any]) -> "UpdateData":
        return cls(
            project_id=_uint32_field(data, "project-id"),
            file_id=_uint32_field(data, "file-id"),
        )


@dataclass
class ExportData:
    """The ``[export.curseforge]`` section of a pack file."""

    project_id: int = 0

    def to_map(self) -> dict[str, int]:
        return {"project-id": self.project_id}

    @classmethod
    def from_map(cls, data: Mapping[str, Any]) -> "ExportData":
        return cls(project_id=_uint32_field(data, "project-id"))


@dataclass(frozen=True)
class ManualDownload:
    """A file that must be downloaded by hand from the project's website."""

    name: str
    file_name: str
    url: str


@dataclass
class DownloadMetadata:
    """How to obtain a CurseForge file: a direct URL, or a manual download page."""

    url: str = ""
    no_distribution: bool = False
    name: str = ""
    file_name: str = ""
    website_url: str = ""

    def get_manual_download(self) -> Optional[ManualDownload]:
        """The manual download details, or None when the file can be fetched directly."""
        if not self.no_distribution:
            return None
        return ManualDownload(name=self.name, file_name=self.file_name, url=self.website_url)


def _join(*parts: str) -> str:
    return os.path.normpath(os.path.join(*parts))


def get_path_for_file(
    game_id: int,
    class_id: int,
    category_id: int,
    slug: str,
    meta_folder: str = "",
    meta_folder_base: str = "",
) -> str:
    """Where the metadata file for a project is stored."""
    file_name = slug + META_EXTENSION
    if not meta_folder:
        folders = DEFAULT_FOLDERS.get(game_id)
        if folders is not None:
            if class_id in folders:
                return _join(meta_folder_base, folders[class_id], file_name)
            if category_id in folders:
                return _join(meta_folder_base, folders[category_id], file_name)
        meta_folder = "."
    return _join(meta_folder_base, meta_folder, file_name)


def map_dep_override(dep_id: int, is_quilt: bool, mc_version: str) -> int:
    """Swap Fabric library dependencies for their Quilt equivalents on Quilt packs."""
    if is_quilt and dep_id == _FABRIC_API:
        return _QUILTED_FABRIC_API
    if is_quilt and dep_id == _FABRIC_LANGUAGE_KOTLIN:
        if flexver_less("1.19.1", mc_version) and flexver_less(mc_version, "2.0.0"):
            return _QUILT_KOTLIN_LIBRARIES
    return dep_id
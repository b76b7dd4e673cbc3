"""Modrinth update metadata and selection of the file to install from a version."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence


def _string_field(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise TypeError(f"'{key}' expected type 'string', got {type(value).__name__}")
    return value


@dataclass
class UpdateData:
    """The ``[update.modrinth]`` section of a metadata file."""

    project_id: str = ""
    installed_version: str = ""

    def to_map(self) -> dict[str, str]:
        return {"mod-id": self.project_id, "version": self.installed_version}

    @classmethod
    def from_map(cls, data: Mapping[str, Any]) -> "UpdateData":
        return cls(
            project_id=_string_field(data, "mod-id"),
            installed_version=_string_field(data, "version"),
        )


@dataclass
class VersionFile:
    """A file attached to a Modrinth version."""

    filename: str
    url: str = ""
    primary: bool = False
    hashes: dict[str, str] = field(default_factory=dict)


def primary_file(files: Sequence[VersionFile]) -> VersionFile:
    """Pick the primary file of a version, falling back to the first one."""
    if not files:
        raise ValueError("new version doesn't have any files")
    chosen = files[0]
    for candidate in files:
        if candidate.primary:
            chosen = candidate
    return chosen


def update_string(current_file_name: str, files: Sequence[VersionFile]) -> str:
    """Describe an update from the installed file to the new primary file."""
    return f"{current_file_name} -> {primary_file(files).filename}"
"""Reading CurseForge pack manifests and launcher instance files, and writing manifests."""

from __future__ import annotations

import io
import json
import os
import zipfile
from dataclasses import dataclass, field, replace
from typing import IO, Any, Iterator, Mapping, Optional, Protocol, Sequence, TextIO, Union

_UINT32_MAX = 0xFFFFFFFF

_MANIFEST_TYPE = "minecraftModpack"


class PackImportError(Exception):
    """Raised when a pack's metadata or files cannot be read."""


class _PackFile(Protocol):
    name: str

    def open(self) -> IO[bytes]: ...


class _PackSource(Protocol):
    def get_file(self, path: str) -> _PackFile: ...

    def get_file_list(self) -> list[_PackFile]: ...

    def get_pack_file(self) -> _PackFile: ...


@dataclass(frozen=True)
class AddonFileReference:
    """A reference to a single CurseForge file."""

    project_id: int
    file_id: int
    # True when the file is optional and turned off in the launcher.
    optional_disabled: bool = False


class _Unclosable(io.RawIOBase):
    """Reads from a stream without closing it when this view is closed."""

    def __init__(self, inner: IO[bytes]) -> None:
        self._inner = inner

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        data = self._inner.read(len(buffer))
        count = len(data)
        buffer[:count] = data
        return count


@dataclass(frozen=True)
class DiskFile:
    """A file of a pack stored on disk."""

    name: str
    path: str

    def open(self) -> IO[bytes]:
        return open(self.path, "rb")


@dataclass(frozen=True)
class ReaderFile:
    """A pack file backed by an already opened stream."""

    name: str
    reader: IO[bytes]

    def open(self) -> IO[bytes]:
        return _Unclosable(self.reader)


@dataclass(frozen=True)
class ZipFileEntry:
    """A file inside a pack archive."""

    name: str
    archive: zipfile.ZipFile
    info: zipfile.ZipInfo

    def open(self) -> IO[bytes]:
        return self.archive.open(self.info)


def _walk_files(directory: str) -> Iterator[str]:
    """Yield the paths of all non-directory entries under ``directory`` in lexical order."""
    with os.scandir(directory) as entries:
        ordered = sorted(entries, key=lambda entry: entry.name)
    for entry in ordered:
        if entry.is_dir(follow_symlinks=False):
            yield from _walk_files(entry.path)
        else:
            yield entry.path


@dataclass(frozen=True)
class DiskPackSource:
    """A pack whose metadata file was opened from disk, with its files beside it."""

    meta_source: IO[bytes]
    meta_name: str
    base_path: str

    def get_file(self, path: str) -> DiskFile:
        return DiskFile(path, os.path.join(self.base_path, *path.split("/")))

    def get_file_list(self) -> list[DiskFile]:
        return [
            DiskFile(os.path.relpath(path, self.base_path).replace(os.sep, "/"), path)
            for path in _walk_files(self.base_path)
        ]

    def get_pack_file(self) -> ReaderFile:
        return ReaderFile(self.meta_name, self.meta_source)


@dataclass
class ZipPackSource:
    """A pack stored in a zip archive."""

    meta_file: zipfile.ZipInfo
    archive: zipfile.ZipFile
    _files: list[ZipFileEntry] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._files = [
            ZipFileEntry(info.filename, self.archive, info)
            for info in self.archive.infolist()
            if not info.is_dir()
        ]

    def get_file(self, path: str) -> ZipFileEntry:
        for entry in self._files:
            if entry.name == path:
                return entry
        raise PackImportError("file not found in zip")

    def get_file_list(self) -> list[ZipFileEntry]:
        return list(self._files)

    def get_pack_file(self) -> ZipFileEntry:
        return ZipFileEntry(self.meta_file.filename, self.archive, self.meta_file)


@dataclass(frozen=True)
class _ModLoaderDef:
    id: str
    primary: bool = False


@dataclass(frozen=True)
class _ManifestFile:
    project_id: int
    file_id: int
    required: bool


@dataclass
class CursePackMeta:
    """A CurseForge pack manifest (manifest.json)."""

    name: str = ""
    version: str = ""
    author: str = ""
    project_id: int = 0
    minecraft_version: str = ""
    mod_loaders: list[_ModLoaderDef] = field(default_factory=list)
    manifest_type: str = ""
    manifest_version: int = 0
    files: list[_ManifestFile] = field(default_factory=list)
    overrides: str = ""
    source: Optional[_PackSource] = None

    def versions(self) -> dict[str, str]:
        result = {"minecraft": self.minecraft_version}
        for loader in self.mod_loaders:
            component, sep, version = loader.id.partition("-")
            if sep:
                result[component] = version
        if "forge" in result:
            result["forge"] = result["forge"].removeprefix(self.minecraft_version + "-")
        return result

    def mods(self) -> list[AddonFileReference]:
        return [
            AddonFileReference(entry.project_id, entry.file_id, not entry.required)
            for entry in self.files
        ]

    def get_files(self) -> list[_PackFile]:
        """The files in the overrides folder, named relative to it."""
        if not self.overrides or self.source is None:
            return []
        prefix = self.overrides if self.overrides.endswith("/") else self.overrides + "/"
        return [
            replace(entry, name=entry.name.removeprefix(prefix))
            for entry in self.source.get_file_list()
            if entry.name.startswith(prefix)
        ]


@dataclass(frozen=True)
class _InstalledAddon:
    project_id: int
    file_id: int
    file_name_on_disk: str


@dataclass
class TwitchInstalledPackMeta:
    """An installed launcher instance (minecraftinstance.json)."""

    name: str = ""
    install_path: str = ""
    mc_version: str = ""
    modloader_name: str = ""
    modloader_maven_version: str = ""
    modpack_overrides: list[str] = field(default_factory=list)
    installed_addons: list[_InstalledAddon] = field(default_factory=list)
    is_unlocked: bool = False
    source: Optional[_PackSource] = None

    @property
    def author(self) -> str:
        return ""

    @property
    def version(self) -> str:
        return ""

    def versions(self) -> dict[str, str]:
        result = {"minecraft": self.mc_version}
        loader = self.modloader_name
        maven = self.modloader_maven_version
        if loader.startswith("forge"):
            if maven:
                forge = maven.removeprefix("net.minecraftforge:forge:")
            else:
                forge = loader.removeprefix("forge-")
            result["forge"] = forge.removeprefix(self.mc_version + "-")
        elif loader.startswith("fabric"):
            if maven:
                fabric = maven.removeprefix("net.fabricmc:fabric-loader:")
            else:
                fabric = loader.removeprefix("fabric-")
            result["fabric"] = fabric.removesuffix(self.mc_version + "-")
        return result

    def mods(self) -> list[AddonFileReference]:
        return [
            AddonFileReference(
                addon.project_id,
                addon.file_id,
                addon.file_name_on_disk.endswith(".disabled"),
            )
            for addon in self.installed_addons
        ]

    def get_files(self) -> list[_PackFile]:
        """All files for an unlocked instance, otherwise only the listed overrides."""
        if self.source is None:
            return []
        if self.is_unlocked:
            return self.source.get_file_list()
        return [
            self.source.get_file(path.replace(os.sep, "/")) for path in self.modpack_overrides
        ]


def _lookup(obj: Mapping[str, Any], key: str) -> Any:
    if key in obj:
        return obj[key]
    lowered = key.lower()
    for candidate, value in obj.items():
        if candidate.lower() == lowered:
            return value
    return None


def _type_error(key: str, expected: str, value: Any) -> PackImportError:
    return PackImportError(
        f"Error parsing JSON: cannot unmarshal {type(value).__name__} "
        f"into field {key} of type {expected}"
    )


def _str(obj: Mapping[str, Any], key: str) -> str:
    value = _lookup(obj, key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise _type_error(key, "string", value)
    return value


def _bool(obj: Mapping[str, Any], key: str) -> bool:
    value = _lookup(obj, key)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise _type_error(key, "bool", value)
    return value


def _uint32(obj: Mapping[str, Any], key: str) -> int:
    value = _lookup(obj, key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _UINT32_MAX:
        raise _type_error(key, "uint32", value)
    return value


def _object(obj: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = _lookup(obj, key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _type_error(key, "object", value)
    return value


def _array(obj: Mapping[str, Any], key: str) -> list[Any]:
    value = _lookup(obj, key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise _type_error(key, "array", value)
    return value


def _element_object(value: Any, key: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise _type_error(key, "object", value)
    return value


def _parse_curse(data: Mapping[str, Any], source: _PackSource) -> CursePackMeta:
    minecraft = _object(data, "minecraft")
    loaders = [
        _ModLoaderDef(_str(loader, "id"), _bool(loader, "primary"))
        for loader in (
            _element_object(item, "modLoaders") for item in _array(minecraft, "modLoaders")
        )
    ]
    files = [
        _ManifestFile(_uint32(entry, "projectID"), _uint32(entry, "fileID"), _bool(entry, "required"))
        for entry in (_element_object(item, "files") for item in _array(data, "files"))
    ]
    return CursePackMeta(
        name=_str(data, "name"),
        version=_str(data, "version"),
        author=_str(data, "author"),
        project_id=_uint32(data, "projectID"),
        minecraft_version=_str(minecraft, "version"),
        mod_loaders=loaders,
        manifest_type=_str(data, "manifestType"),
        manifest_version=_uint32(data, "manifestVersion"),
        files=files,
        overrides=_str(data, "overrides"),
        source=source,
    )


def _parse_twitch(data: Mapping[str, Any], source: _PackSource) -> TwitchInstalledPackMeta:
    loader = _object(data, "baseModLoader")
    overrides = _array(data, "modpackOverrides")
    for item in overrides:
        if not isinstance(item, str):
            raise _type_error("modpackOverrides", "string", item)
    addons = []
    for item in _array(data, "installedAddons"):
        addon = _element_object(item, "installedAddons")
        installed = _object(addon, "installedFile")
        addons.append(
            _InstalledAddon(
                project_id=_uint32(addon, "addonID"),
                file_id=_uint32(installed, "id"),
                file_name_on_disk=_str(installed, "FileNameOnDisk"),
            )
        )
    return TwitchInstalledPackMeta(
        name=_str(data, "name"),
        install_path=_str(data, "installPath"),
        mc_version=_str(data, "gameVersion"),
        modloader_name=_str(loader, "name"),
        modloader_maven_version=_str(loader, "mavenVersionString"),
        modpack_overrides=list(overrides),
        installed_addons=addons,
        is_unlocked=_bool(data, "isUnlocked"),
        source=source,
    )


def _parse_json(raw: bytes) -> Any:
    try:
        return json.loads(raw)
    except ValueError as exc:
        raise PackImportError(f"Error parsing JSON: {exc}") from exc


def read_metadata(source: _PackSource) -> Union[CursePackMeta, TwitchInstalledPackMeta]:
    """Read a pack's metadata file, detecting whether it is a manifest or an instance file."""
    pack_file = source.get_pack_file()
    try:
        with pack_file.open() as stream:
            raw = stream.read()
    except OSError as exc:
        raise PackImportError(f"Error reading file: {exc}") from exc

    document = _parse_json(raw)
    if document is None:
        document = {}
    if not isinstance(document, dict):
        raise PackImportError("Error parsing JSON: metadata is not a JSON object")

    is_manifest = False
    if "manifestType" in document:
        manifest_type = document["manifestType"]
        if not isinstance(manifest_type, str):
            raise PackImportError("Error parsing JSON: manifestType is not a string")
        is_manifest = manifest_type == _MANIFEST_TYPE

    if is_manifest:
        return _parse_curse(document, source)

    instance = _parse_json(raw.replace(b"FileNameOnDisk", b"fileNameOnDisk"))
    if instance is None:
        instance = {}
    return _parse_twitch(instance, source)


_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def write_manifest(
    versions: Mapping[str, str],
    name: str,
    version: str,
    author: str,
    file_refs: Sequence[AddonFileReference],
    project_id: int,
    out: TextIO,
) -> None:
    """Write a CurseForge manifest.json describing a pack to ``out``."""
    mod_loaders = []
    for loader in ("fabric", "forge", "quilt"):
        if loader in versions:
            mod_loaders.append({"id": f"{loader}-{versions[loader]}", "primary": True})
            break

    manifest = {
        "minecraft": {
            "version": versions.get("minecraft", ""),
            "modLoaders": mod_loaders,
        },
        "manifestType": _MANIFEST_TYPE,
        "manifestVersion": 1,
        "name": name,
        "version": version,
        "author": author,
        "projectID": project_id,
        "files": [
            {
                "projectID": ref.project_id,
                "fileID": ref.file_id,
                "required": not ref.optional_disabled,
            }
            for ref in file_refs
        ],
        "overrides": "overrides",
    }
    text = json.dumps(manifest, indent=2, ensure_ascii=False)
    text = "".join(_HTML_ESCAPES.get(ch, ch) for ch in text)
    out.write(text + "\n")
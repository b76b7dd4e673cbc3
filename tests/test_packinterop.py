import io
import json
import zipfile

import pytest

from modpackkit.packinterop import (
    AddonFileReference,
    CursePackMeta,
    DiskFile,
    DiskPackSource,
    PackImportError,
    ReaderFile,
    TwitchInstalledPackMeta,
    ZipFileEntry,
    ZipPackSource,
    read_metadata,
    write_manifest,
)


def _disk_source(tmp_path, document, name="manifest.json"):
    raw = json.dumps(document).encode() if not isinstance(document, bytes) else document
    return DiskPackSource(io.BytesIO(raw), name, str(tmp_path))


def _zip_source(entries, meta_name):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for entry_name, content in entries.items():
            archive.writestr(entry_name, content)
    archive = zipfile.ZipFile(io.BytesIO(buffer.getvalue()))
    return ZipPackSource(archive.getinfo(meta_name), archive)


CURSE_MANIFEST = {
    "minecraft": {
        "version": "1.16.5",
        "modLoaders": [{"id": "forge-1.16.5-36.2.0", "primary": True}],
    },
    "manifestType": "minecraftModpack",
    "manifestVersion": 1,
    "name": "Example Pack",
    "version": "1.0.0",
    "author": "someone",
    "projectID": 1234,
    "files": [
        {"projectID": 10, "fileID": 100, "required": True},
        {"projectID": 20, "fileID": 200, "required": False},
    ],
    "overrides": "overrides",
}


def test_read_manifest_fields(tmp_path):
    meta = read_metadata(_disk_source(tmp_path, CURSE_MANIFEST))
    assert isinstance(meta, CursePackMeta)
    assert meta.name == "Example Pack"
    assert meta.author == "someone"
    assert meta.version == "1.0.0"
    assert meta.project_id == 1234


def test_manifest_versions_strip_minecraft_prefix_from_forge(tmp_path):
    meta = read_metadata(_disk_source(tmp_path, CURSE_MANIFEST))
    assert meta.versions() == {"minecraft": "1.16.5", "forge": "36.2.0"}


def test_manifest_mods_optional_from_required(tmp_path):
    meta = read_metadata(_disk_source(tmp_path, CURSE_MANIFEST))
    assert meta.mods() == [
        AddonFileReference(10, 100, False),
        AddonFileReference(20, 200, True),
    ]


def test_manifest_loader_without_dash_ignored(tmp_path):
    document = dict(CURSE_MANIFEST)
    document["minecraft"] = {"version": "1.20.1", "modLoaders": [{"id": "vanilla"}]}
    meta = read_metadata(_disk_source(tmp_path, document))
    assert meta.versions() == {"minecraft": "1.20.1"}


def test_manifest_overrides_from_zip():
    source = _zip_source(
        {
            "manifest.json": json.dumps(CURSE_MANIFEST),
            "overrides/config/a.cfg": "a",
            "overrides/options.txt": "b",
            "other/file.txt": "c",
        },
        "manifest.json",
    )
    meta = read_metadata(source)
    files = meta.get_files()
    assert sorted(f.name for f in files) == ["config/a.cfg", "options.txt"]
    renamed = next(f for f in files if f.name == "config/a.cfg")
    with renamed.open() as stream:
        assert stream.read() == b"a"


def test_manifest_without_overrides_has_no_files(tmp_path):
    document = dict(CURSE_MANIFEST)
    document["overrides"] = ""
    (tmp_path / "x.txt").write_text("x")
    meta = read_metadata(_disk_source(tmp_path, document))
    assert meta.get_files() == []


TWITCH_INSTANCE = {
    "name": "Instance",
    "installPath": "C:/somewhere",
    "gameVersion": "1.12.2",
    "baseModLoader": {
        "name": "forge-14.23.5.2855",
        "mavenVersionString": "net.minecraftforge:forge:1.12.2-14.23.5.2855",
    },
    "modpackOverrides": ["config/a.cfg"],
    "installedAddons": [
        {"addonID": 1, "installedFile": {"id": 11, "FileNameOnDisk": "a.jar"}},
        {"addonID": 2, "installedFile": {"id": 22, "FileNameOnDisk": "b.jar.disabled"}},
    ],
    "isUnlocked": False,
}


def test_read_instance_versions_and_mods(tmp_path):
    meta = read_metadata(_disk_source(tmp_path, TWITCH_INSTANCE, "minecraftinstance.json"))
    assert isinstance(meta, TwitchInstalledPackMeta)
    assert meta.name == "Instance"
    assert meta.author == ""
    assert meta.versions() == {"minecraft": "1.12.2", "forge": "14.23.5.2855"}
    assert meta.mods() == [
        AddonFileReference(1, 11, False),
        AddonFileReference(2, 22, True),
    ]


def test_instance_forge_from_name_without_maven(tmp_path):
    document = dict(TWITCH_INSTANCE)
    document["baseModLoader"] = {"name": "forge-14.23.5.2855"}
    meta = read_metadata(_disk_source(tmp_path, document))
    assert meta.versions()["forge"] == "14.23.5.2855"


def test_instance_fabric_from_maven(tmp_path):
    document = dict(TWITCH_INSTANCE)
    document["gameVersion"] = "1.16.5"
    document["baseModLoader"] = {
        "name": "fabric-0.11.3-1.16.5",
        "mavenVersionString": "net.fabricmc:fabric-loader:0.11.3",
    }
    meta = read_metadata(_disk_source(tmp_path, document))
    assert meta.versions() == {"minecraft": "1.16.5", "fabric": "0.11.3"}


def test_locked_instance_returns_listed_overrides(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "a.cfg").write_bytes(b"cfg")
    (tmp_path / "extra.txt").write_bytes(b"extra")
    meta = read_metadata(_disk_source(tmp_path, TWITCH_INSTANCE))
    files = meta.get_files()
    assert [f.name for f in files] == ["config/a.cfg"]
    with files[0].open() as stream:
        assert stream.read() == b"cfg"


def test_unlocked_instance_returns_all_files(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "a.cfg").write_bytes(b"cfg")
    (tmp_path / "extra.txt").write_bytes(b"extra")
    document = dict(TWITCH_INSTANCE)
    document["isUnlocked"] = True
    meta = read_metadata(_disk_source(tmp_path, document))
    assert [f.name for f in meta.get_files()] == ["config/a.cfg", "extra.txt"]


def test_locked_instance_missing_zip_override_raises():
    source = _zip_source({"minecraftinstance.json": json.dumps(TWITCH_INSTANCE)}, "minecraftinstance.json")
    meta = read_metadata(source)
    with pytest.raises(PackImportError):
        meta.get_files()


def test_invalid_json_raises(tmp_path):
    with pytest.raises(PackImportError):
        read_metadata(_disk_source(tmp_path, b"{not json"))


def test_non_string_manifest_type_raises(tmp_path):
    with pytest.raises(PackImportError):
        read_metadata(_disk_source(tmp_path, {"manifestType": 5}))


def test_wrong_field_type_raises(tmp_path):
    document = dict(CURSE_MANIFEST)
    document["projectID"] = "abc"
    with pytest.raises(PackImportError):
        read_metadata(_disk_source(tmp_path, document))


def test_disk_source_file_list_skips_directories(tmp_path):
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "inner.txt").write_text("i")
    (tmp_path / "a.txt").write_text("a")
    (tmp_path / "c.txt").write_text("c")
    source = DiskPackSource(io.BytesIO(b"{}"), "manifest.json", str(tmp_path))
    assert [f.name for f in source.get_file_list()] == ["a.txt", "b/inner.txt", "c.txt"]


def test_disk_source_get_file_joins_path(tmp_path):
    (tmp_path / "config").mkdir()
    (tmp_path / "config" / "x.cfg").write_bytes(b"data")
    source = DiskPackSource(io.BytesIO(b"{}"), "manifest.json", str(tmp_path))
    entry = source.get_file("config/x.cfg")
    assert isinstance(entry, DiskFile)
    with entry.open() as stream:
        assert stream.read() == b"data"


def test_reader_file_open_does_not_close_underlying_stream():
    raw = io.BytesIO(b"payload")
    entry = ReaderFile("meta.json", raw)
    with entry.open() as stream:
        assert stream.read() == b"payload"
    assert raw.closed is False


def test_zip_source_excludes_directories():
    source = _zip_source(
        {"manifest.json": "{}", "dir/": "", "dir/file.txt": "f"},
        "manifest.json",
    )
    names = [f.name for f in source.get_file_list()]
    assert names == ["manifest.json", "dir/file.txt"]
    pack_file = source.get_pack_file()
    assert isinstance(pack_file, ZipFileEntry)
    assert pack_file.name == "manifest.json"


def test_write_manifest_round_trip(tmp_path):
    refs = [AddonFileReference(10, 100, False), AddonFileReference(20, 200, True)]
    out = io.StringIO()
    write_manifest({"minecraft": "1.16.5", "forge": "36.2.0"}, "Pack", "2.0", "me", refs, 77, out)
    meta = read_metadata(_disk_source(tmp_path, out.getvalue().encode()))
    assert isinstance(meta, CursePackMeta)
    assert meta.mods() == refs
    assert meta.versions() == {"minecraft": "1.16.5", "forge": "36.2.0"}
    assert meta.name == "Pack"
    assert meta.project_id == 77
    assert meta.overrides == "overrides"


def test_write_manifest_layout():
    out = io.StringIO()
    write_manifest({"minecraft": "1.18.2"}, "Pack", "1", "me", [], 0, out)
    text = out.getvalue()
    assert text.endswith("}\n")
    assert text.startswith('{\n  "minecraft": {\n    "version": "1.18.2",')
    document = json.loads(text)
    assert document["manifestType"] == "minecraftModpack"
    assert document["manifestVersion"] == 1
    assert document["files"] == []
    assert document["minecraft"]["modLoaders"] == []


def test_write_manifest_prefers_fabric_loader():
    out = io.StringIO()
    write_manifest(
        {"minecraft": "1.19.2", "forge": "43.1.1", "fabric": "0.14.0", "quilt": "0.17.0"},
        "Pack", "1", "me", [], 0, out,
    )
    loaders = json.loads(out.getvalue())["minecraft"]["modLoaders"]
    assert loaders == [{"id": "fabric-0.14.0", "primary": True}]


def test_write_manifest_escapes_html_characters():
    out = io.StringIO()
    write_manifest({"minecraft": "1.19.2"}, "A & B", "1", "me", [], 0, out)
    text = out.getvalue()
    assert "&" not in text
    assert "\\u0026" in text
    assert json.loads(text)["name"] == "A & B"
# modpackkit

A pure-Python library of building blocks for managing Minecraft modpacks whose
files come from CurseForge and Modrinth. It has no runtime dependencies beyond
the standard library.

## Installation

```
pip install modpackkit
```

For running the test suite:

```
pip install "modpackkit[test]"
pytest
```

## Modules

- `modpackkit.versions`: FlexVer-style version ordering (`flexver_compare`,
  `flexver_less`, `flexver_sorted`) and helpers for a pack's list of
  acceptable game versions: `parse_acceptable_versions` splits a comma
  separated list, `dedupe_versions` keeps the last occurrence of each entry,
  `is_out_of_order` reports whether a version is followed by a lower one,
  `add_acceptable_version` and `remove_acceptable_version` return a new
  sorted list (raising `VersionListError` when the version is already present
  or missing), and `format_version_list` renders the list followed by the
  pack's main game version.
- `modpackkit.murmur2`: the whitespace-stripping MurmurHash2 fingerprint used
  by CurseForge. `murmur2(data, seed)` is the plain hash, `normalize` drops
  tab, newline, carriage return and space bytes, `fingerprint` combines the
  two with seed 1, and `Murmur2CF` is a hashlib-style object with `update`,
  `digest` (4 bytes, big endian), `hexdigest`, `sum32` and `reset`.
- `modpackkit.curseforge`: `get_curseforge_version` and
  `get_curseforge_versions` map Minecraft versions (including pre-releases,
  release candidates and weekly snapshots) to the names CurseForge files them
  under; `parse_slug_or_url` reads a `ParsedReference` (game, category, slug,
  file ID) from a CurseForge URL or a bare slug; `render_modlist` writes the
  `modlist.html` list from `ModlistEntry` items.
- `modpackkit.cfupdate`: the `UpdateData` and `ExportData` metadata sections
  with `to_map` / `from_map`, `DownloadMetadata` and its `ManualDownload`
  details for files that cannot be fetched directly, `get_path_for_file` for
  where a project's metadata file goes, and `map_dep_override` which swaps
  Fabric library dependencies for their Quilt equivalents.
- `modpackkit.packinterop`: reading CurseForge pack metadata. `DiskPackSource`
  and `ZipPackSource` expose a pack's files; `read_metadata` detects whether
  the metadata file is a `manifest.json` (`CursePackMeta`) or a
  `minecraftinstance.json` (`TwitchInstalledPackMeta`), each offering
  `versions`, `mods` (as `AddonFileReference` items) and `get_files`.
  `write_manifest` writes a `manifest.json` for export. Unreadable or
  malformed metadata raises `PackImportError`.
- `modpackkit.modrinth`: `parse_slug_or_url` returns a `ParsedInput` from a
  Modrinth project, version or CDN URL or a slug; `get_project_type_folder`,
  `compare_loader_lists`, `get_side`, `should_download_on_side`,
  `get_best_hash` and `map_dep_override` cover placement and selection rules;
  `Pack` and `PackFile` build a `modrinth.index.json` document
  (`Pack.to_json` indents by four spaces). Invalid input raises
  `ModrinthError`.
- `modpackkit.mrupdate`: the Modrinth `UpdateData` section, `VersionFile`,
  and `primary_file` / `update_string` for choosing the file of a version.

## Example

```python
from modpackkit.curseforge import get_curseforge_version, parse_slug_or_url
from modpackkit.murmur2 import fingerprint
from modpackkit.versions import flexver_sorted

get_curseforge_version("1.19 Pre-release 1")      # "1.19-Snapshot"
parse_slug_or_url("https://www.curseforge.com/minecraft/mc-mods/jei")
# ParsedReference(game="minecraft", category="mc-mods", slug="jei", file_id=0)
fingerprint(b"some file contents")
flexver_sorted(["1.16.5", "1.16.10", "1.16.3"])   # ["1.16.3", "1.16.5", "1.16.10"]
```

## What this package does not do

- It has no command-line tool; it is a library only.
- It makes no network requests: it does not talk to the CurseForge, Modrinth
  or GitHub APIs, search for projects, resolve dependencies or download files.
- It does not read or write pack or index files of its own, and it does not
  assemble export archives; callers supply the data and handle storage.
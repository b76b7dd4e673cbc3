import pytest

from modpackkit.curseforge import (
    ModlistEntry,
    ParsedReference,
    get_curseforge_version,
    get_curseforge_versions,
    parse_slug_or_url,
    render_modlist,
)


@pytest.mark.parametrize(
    "mc_version, expected",
    [
        ("1.18-pre1", "1.18-Snapshot"),
        ("1.14 Pre-Release 2", "1.14-Snapshot"),
        ("1.16-rc1", "1.16-Snapshot"),
        ("22w11a", "1.19-Snapshot"),
        ("21w37a", "1.18-Snapshot"),
        ("20w45a", "1.17-Snapshot"),
        ("20w06a", "1.16-Snapshot"),
        ("19w34a", "1.15-Snapshot"),
        ("18w43a", "1.14-Snapshot"),
        ("17w31a", "1.12.1-Snapshot"),
        ("16w50a", "1.11.1-Snapshot"),
        ("13w01a", "1.5-Snapshot"),
        ("11w47a", "1.1-Snapshot"),
        ("Snapshot 22w11a", "1.19-Snapshot"),
    ],
)
def test_snapshot_mapping(mc_version, expected):
    assert get_curseforge_version(mc_version) == expected


@pytest.mark.parametrize("mc_version", ["1.16.5", "1.20.1", "10w01a", ""])
def test_release_versions_unchanged(mc_version):
    assert get_curseforge_version(mc_version) == mc_version


def test_versions_list_mapping_preserves_order():
    inputs = ["1.16.5", "1.18-pre1", "1.16.4"]
    result = get_curseforge_versions(inputs)
    assert result == [get_curseforge_version(v) for v in inputs]
    assert len(result) == len(inputs)


def test_parse_full_url_with_file():
    ref = parse_slug_or_url("https://www.curseforge.com/minecraft/mc-mods/jei/files/12345")
    assert ref == ParsedReference(game="minecraft", category="mc-mods", slug="jei", file_id=12345)


def test_parse_download_url():
    ref = parse_slug_or_url("https://curseforge.com/minecraft/texture-packs/faithful/download/42")
    assert ref.category == "texture-packs"
    assert ref.slug == "faithful"
    assert ref.file_id == 42


def test_parse_legacy_project_url():
    ref = parse_slug_or_url("https://minecraft.curseforge.com/projects/jei")
    assert ref == ParsedReference(game="minecraft", slug="jei")


def test_parse_bare_slug():
    assert parse_slug_or_url("just-enough_items") == ParsedReference(slug="just-enough_items")


@pytest.mark.parametrize("text", ["Not A Slug", "jei\n", "1jei", "jei items"])
def test_parse_unrecognised_returns_empty(text):
    assert parse_slug_or_url(text) == ParsedReference()


def test_parse_file_id_out_of_range():
    with pytest.raises(ValueError):
        parse_slug_or_url("https://www.curseforge.com/minecraft/mc-mods/jei/files/99999999999")


def test_render_modlist():
    html = render_modlist([ModlistEntry("JEI", 238222), ModlistEntry("Local")])
    assert html == (
        "<ul>\r\n"
        '<li><a href="https://www.curseforge.com/projects/238222">JEI</a></li>\r\n'
        "<li>Local</li>\r\n"
        "</ul>\r\n"
    )


def test_render_empty_modlist():
    assert render_modlist([]) == "<ul>\r\n</ul>\r\n"
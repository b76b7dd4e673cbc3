"""FlexVer version ordering and management of a pack's acceptable game versions."""

from __future__ import annotations

import functools
from dataclasses import dataclass
from enum import Enum
from itertools import pairwise, zip_longest
from typing import Iterable


class VersionListError(ValueError):
    """Raised when an acceptable-versions list cannot be changed as requested."""


class _Kind(Enum):
    TEXT = "text"
    NUMERIC = "numeric"
    PRERELEASE = "prerelease"


@dataclass(frozen=True)
class _Component:
    kind: _Kind
    text: str


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _make_component(numeric: bool, text: str) -> _Component:
    if numeric:
        return _Component(_Kind.NUMERIC, text)
    if len(text) > 1 and text.startswith("-"):
        return _Component(_Kind.PRERELEASE, text)
    return _Component(_Kind.TEXT, text)


def _decompose(version: str) -> list[_Component]:
    """Split a version into runs of digits and non-digits, dropping any '+' appendix."""
    if not version:
        return []
    components: list[_Component] = []
    current: list[str] = []
    last_numeric = _is_digit(version[0])
    for ch in version:
        if ch == "+":
            break
        numeric = _is_digit(ch)
        if numeric != last_numeric or (ch == "-" and current and current[0] != "-"):
            components.append(_make_component(last_numeric, "".join(current)))
            current = []
            last_numeric = numeric
        current.append(ch)
    components.append(_make_component(last_numeric, "".join(current)))
    return components


def _sign(a, b) -> int:
    return (a > b) - (a < b)


def _compare_components(a: _Component | None, b: _Component | None) -> int:
    if a is None and b is None:
        return 0
    if a is None:
        return -_compare_components(b, None)
    if b is None:
        # A pre-release suffix sorts before the version without it.
        return -1 if a.kind is _Kind.PRERELEASE else 1
    if a.kind is _Kind.NUMERIC and b.kind is _Kind.NUMERIC:
        return _sign(int(a.text), int(b.text))
    return _sign(a.text, b.text)


def flexver_compare(a: str, b: str) -> int:
    """Compare two versions with FlexVer rules; returns -1, 0 or 1."""
    for left, right in zip_longest(_decompose(a), _decompose(b)):
        result = _compare_components(left, right)
        if result:
            return result
    return 0


def flexver_less(a: str, b: str) -> bool:
    """Whether version ``a`` sorts before version ``b``."""
    return flexver_compare(a, b) < 0


def flexver_sorted(versions: Iterable[str]) -> list[str]:
    """Return the versions sorted from lowest to highest."""
    return sorted(versions, key=functools.cmp_to_key(flexver_compare))


def parse_acceptable_versions(text: str) -> list[str]:
    """Split a comma separated list of versions."""
    return text.split(",")


def dedupe_versions(versions: Iterable[str]) -> list[str]:
    """Remove duplicates, keeping the last occurrence of each version."""
    seen: set[str] = set()
    kept: list[str] = []
    for version in reversed(list(versions)):
        if version not in seen:
            seen.add(version)
            kept.append(version)
    kept.reverse()
    return kept


def is_out_of_order(versions: Iterable[str]) -> bool:
    """Whether any version is followed by a lower one."""
    return any(flexver_less(following, current) for current, following in pairwise(versions))


def add_acceptable_version(current: Iterable[str], version: str) -> list[str]:
    """Add a version to the list and return it sorted."""
    versions = list(current)
    if version in versions:
        raise VersionListError(f"Version {version} is already in your acceptable versions list!")
    versions.append(version)
    return flexver_sorted(versions)


def remove_acceptable_version(current: Iterable[str], version: str) -> list[str]:
    """Remove a version from the list and return it sorted."""
    versions = list(current)
    if version not in versions:
        raise VersionListError(f"Version {version} is not in your acceptable versions list!")
    versions.remove(version)
    return flexver_sorted(versions)


def format_version_list(versions: Iterable[str], minecraft_version: str) -> str:
    """Render the acceptable versions followed by the pack's main game version."""
    return ", ".join(versions) + ", " + minecraft_version
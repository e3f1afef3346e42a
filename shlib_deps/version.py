"""Debian package version parsing and ordering.

Version strings have the form ``[epoch:]upstream_version[-debian_revision]``
and are ordered by epoch, then upstream version, then revision. See
https://www.debian.org/doc/debian-policy/ch-controlfields.html#version
"""

from __future__ import annotations

import functools
import re

# Maximal runs of digits, letters, a single tilde, or anything else
_TOKEN_RE = re.compile(r"\d+|[a-zA-Z]+|~|[^\da-zA-Z~]+")


def split_version(version: str) -> list[str]:
    """Split a version fragment into comparison tokens.

    >>> split_version("1.2~rc1")
    ['1', '.', '2', '~', 'rc', '1']
    """
    return _TOKEN_RE.findall(version)


def _compare_tokens(left: str, right: str) -> int:
    if left.isdigit() and right.isdigit():
        a, b = int(left), int(right)
    else:
        # '~' sorts before everything, even the end of the string
        if left == "~" and right != "~":
            return -1
        if left != "~" and right == "~":
            return 1
        a, b = left, right
    return (a > b) - (a < b)


def compare_version_parts(left: list[str], right: list[str]) -> int:
    """Compare two token lists, padding the shorter one with empty tokens."""
    for i in range(max(len(left), len(right))):
        part1 = left[i] if i < len(left) else ""
        part2 = right[i] if i < len(right) else ""
        result = _compare_tokens(part1, part2)
        if result != 0:
            return result
    return 0


@functools.total_ordering
class PackageVersion:
    """A parsed Debian package version."""

    __slots__ = ("epoch", "upstream_version", "debian_revision", "_version_string")

    def __init__(self, version_string: str) -> None:
        self._version_string = version_string
        self.epoch, rest = self._parse_epoch(version_string)
        self.upstream_version, self.debian_revision = self._parse_upstream_and_revision(rest)

    @staticmethod
    def _parse_epoch(version: str) -> tuple[int, str]:
        if ":" in version:
            epoch, rest = version.split(":", 1)
            return int(epoch or 0), rest
        return 0, version

    @staticmethod
    def _parse_upstream_and_revision(version: str) -> tuple[str, str]:
        if "-" in version:
            upstream, _, revision = version.rpartition("-")
            return upstream, revision
        return version, ""

    def compare(self, other: PackageVersion) -> int:
        if self.epoch != other.epoch:
            return -1 if self.epoch < other.epoch else 1

        result = compare_version_parts(
            split_version(self.upstream_version), split_version(other.upstream_version)
        )
        if result != 0:
            return result

        # An absent revision compares equal to "0"
        return compare_version_parts(
            split_version(self.debian_revision or "0"),
            split_version(other.debian_revision or "0"),
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self.compare(other) == 0

    def __lt__(self, other: PackageVersion) -> bool:
        if not isinstance(other, PackageVersion):
            return NotImplemented
        return self.compare(other) < 0

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self._version_string

    def __repr__(self) -> str:
        return f"PackageVersion({self._version_string!r})"


def compare_versions(a: str, b: str) -> int:
    """Return <0, 0 or >0 as version string *a* sorts before, equal to or after *b*."""
    return PackageVersion(a).compare(PackageVersion(b))

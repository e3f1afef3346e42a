"""Test doubles for shlib_deps — in-memory introspector and package database.

Usage::

    from shlib_deps.testing import FakeIntrospector, FakePackageDatabase

    introspector = FakeIntrospector()
    introspector.add("/pkg/usr/bin/app", needed=["libfoo.so.1"], symbols=["foo_open"])

    database = FakePackageDatabase(architecture="amd64")
    database.add_provider("libfoo.so.1", "libfoo1", arch="amd64")

    analyzer = DependencyAnalyzer(settings, introspector=introspector, database=database)
"""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass, field

from shlib_deps.exceptions import IntrospectionError


@dataclass
class FakeElfFile:
    soname: str | None = None
    needed: list[str] = field(default_factory=list)
    symbols: frozenset[str] = frozenset()


class FakeIntrospector:
    """Answer introspection queries from a dict keyed by path.

    Unknown paths raise :class:`IntrospectionError`, like a failing objdump.
    Every call is recorded for assertions.
    """

    def __init__(self) -> None:
        self.files: dict[str, FakeElfFile] = {}
        self.link_calls: list[str] = []
        self.symbol_calls: list[str] = []

    def add(
        self,
        path: str,
        *,
        soname: str | None = None,
        needed: Iterable[str] = (),
        symbols: Iterable[str] = (),
    ) -> None:
        self.files[str(path)] = FakeElfFile(soname, list(needed), frozenset(symbols))

    def read_links(self, path: str) -> tuple[str | None, list[str]]:
        self.link_calls.append(path)
        elf = self._lookup(path, "scanning ELF file dependencies")
        return elf.soname, list(elf.needed)

    def read_symbols(self, path: str) -> frozenset[str]:
        self.symbol_calls.append(path)
        return self._lookup(path, "extracting dynamic symbols").symbols

    def _lookup(self, path: str, operation: str) -> FakeElfFile:
        try:
            return self.files[path]
        except KeyError:
            raise IntrospectionError(operation, path, "no such fake ELF file") from None


class FakePackageDatabase:
    """Answer dpkg-query -S lookups from registered providers."""

    def __init__(self, architecture: str = "amd64") -> None:
        self.architecture = architecture
        self.providers: dict[str, list[str]] = {}
        self.searches: list[str] = []

    def add_provider(
        self,
        soname: str,
        package: str,
        *,
        arch: str | None = None,
        path: str | None = None,
    ) -> None:
        prefix = f"{package}:{arch}" if arch else package
        file_path = path or f"/usr/lib/{soname}"
        self.providers.setdefault(soname, []).append(f"{prefix}: {file_path}")

    def search(self, pattern: str) -> str | None:
        self.searches.append(pattern)
        soname = pattern.rsplit("/", 1)[-1]
        lines = self.providers.get(soname)
        if not lines:
            return None
        return "\n".join(lines) + "\n"

    def native_architecture(self) -> str:
        return self.architecture


def write_symbols_file(
    symbols_dir: str,
    package: str,
    architecture: str,
    sections: dict[str, Iterable[tuple[str, str]]],
) -> str:
    """Append dpkg symbols sections to ``<symbols_dir>/<package>:<arch>.symbols``."""
    path = os.path.join(symbols_dir, f"{package}:{architecture}.symbols")
    with open(path, "a", encoding="utf-8") as fh:
        for soname, entries in sections.items():
            fh.write(f"{soname} {package} #MINVER#\n")
            for symbol, version in entries:
                fh.write(f" {symbol} {version}\n")
    return path


def write_elf_stub(path: str | os.PathLike, *, executable: bool = True) -> str:
    """Create a file that passes the ELF magic check (contents are otherwise junk)."""
    path = os.fspath(path)
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "wb") as fh:
        fh.write(b"\x7fELF\x02\x01\x01" + b"\x00" * 57)
    os.chmod(path, 0o755 if executable else 0o644)
    return path

"""ELF introspection — sonames, NEEDED entries and dynamic symbols.

The default backend shells out to binutils (``objdump -p`` and ``nm -D``);
anything implementing :class:`Introspector` can be injected instead.
"""

from __future__ import annotations

import logging
import os
import re
import subprocess
import threading
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from shlib_deps.exceptions import IntrospectionError

logger = logging.getLogger(__name__)

ELF_MAGIC = b"\x7fELF"

# libfoo.so, libfoo.so.1, libfoo.so.1.2.3
_LIBRARY_NAME_RE = re.compile(r"\.so($|\.\d+)")

# objdump -p "Dynamic Section" entries
_SONAME_RE = re.compile(r"^\s*SONAME\s+(.+)$")
_NEEDED_RE = re.compile(r"^\s*NEEDED\s+(.+)$")

# nm -D lines look like:
#                  U waitpid
# 0000000000126190 B want_pending_command
_NM_SYMBOL_RE = re.compile(r"^\S*\s+[A-Za-z]\s+(.+)")

_READ_LINKS = "scanning ELF file dependencies"
_READ_SYMBOLS = "extracting dynamic symbols"


def is_elf_file(path: str) -> bool:
    """Check the 4-byte ELF magic. Unreadable files are not ELF."""
    try:
        with open(path, "rb") as fh:
            return fh.read(4) == ELF_MAGIC
    except OSError:
        return False


def path_resembles_library(path: str) -> bool:
    """Whether the file name looks like a shared library (``*.so`` / ``*.so.N``)."""
    return _LIBRARY_NAME_RE.search(os.path.basename(path)) is not None


@runtime_checkable
class Introspector(Protocol):
    """Interface that every ELF introspection backend must satisfy."""

    def read_links(self, path: str) -> tuple[str | None, list[str]]:
        """Return ``(soname, needed_sonames)`` for an ELF file."""
        ...

    def read_symbols(self, path: str) -> frozenset[str]:
        """Return the dynamic symbol names referenced or defined by an ELF file."""
        ...


class BinutilsIntrospector:
    """Introspect ELF files with objdump and nm."""

    def __init__(self, objdump: str = "objdump", nm: str = "nm") -> None:
        self.objdump = objdump
        self.nm = nm

    def read_links(self, path: str) -> tuple[str | None, list[str]]:
        output = self._run([self.objdump, "-p", path], _READ_LINKS, path)

        soname: str | None = None
        needed: list[str] = []
        for line in output.splitlines():
            m = _SONAME_RE.match(line)
            if m:
                soname = m.group(1).strip()
                continue
            m = _NEEDED_RE.match(line)
            if m:
                dep = m.group(1).strip()
                if dep not in needed:
                    needed.append(dep)
        return soname, needed

    def read_symbols(self, path: str) -> frozenset[str]:
        output = self._run([self.nm, "-D", path], _READ_SYMBOLS, path)

        symbols = set()
        for line in output.splitlines():
            m = _NM_SYMBOL_RE.match(line)
            if m:
                symbols.add(m.group(1))
        return frozenset(symbols)

    @staticmethod
    def _run(cmd: list[str], operation: str, path: str) -> str:
        tool = os.path.basename(cmd[0])
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise IntrospectionError(operation, path, f"cannot spawn '{tool}': {e}") from e

        if result.returncode != 0:
            raise IntrospectionError(
                operation,
                path,
                f"'{tool}' failed (exit {result.returncode}): {result.stderr.strip()}",
            )
        return result.stdout


class SymbolExtractor:
    """Collect dynamic symbols for sets of files, memoised per path.

    The cache is an explicit, caller-owned map (normally
    ``ScanState.symbol_cache``) so it can be inspected or pre-seeded.
    """

    def __init__(self, introspector: Introspector, cache: dict[str, frozenset[str]]) -> None:
        self.introspector = introspector
        self.cache = cache
        self._lock = threading.Lock()

    def symbols_for(self, path: str) -> frozenset[str]:
        with self._lock:
            cached = self.cache.get(path)
        if cached is not None:
            return cached

        symbols = self.introspector.read_symbols(path)
        with self._lock:
            return self.cache.setdefault(path, symbols)

    def union(self, paths: Iterable[str]) -> set[str]:
        result: set[str] = set()
        for path in paths:
            result.update(self.symbols_for(path))
        return result

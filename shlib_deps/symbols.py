"""Parser for dpkg symbols files (deb-symbols(5)).

A symbols file holds one section per library, introduced by an unindented
header line and followed by indented ``symbol version`` entries::

    libfoo.so.1 libfoo1 #MINVER#
    | libfoo1-alt #MINVER#
    * Build-Depends-Package: libfoo-dev
     foo_open@Base 1.0
     foo_close@FOO_1.2 1.2
    libfoo.so.10 libfoo10 #MINVER#
     ...
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from typing import IO, Union

SymbolsResource = Union[str, os.PathLike, IO[str]]

# Alternative package specifiers ("| pkg ...") and metadata fields ("* Field: ...")
_IGNORED_LINE_RE = re.compile(r"^\s*[|*]")

# Indented "symbol version" entry; anything else ends the section
_SYMBOL_LINE_RE = re.compile(r"^\s+(\S+)\s+(\S+)")

_BASE_SUFFIX = "@Base"


@contextmanager
def _open_lines(resource: SymbolsResource) -> Iterator[Iterable[str]]:
    if hasattr(resource, "read"):
        yield resource  # type: ignore[misc]
    else:
        with open(resource, encoding="utf-8") as fh:  # type: ignore[arg-type]
            yield fh


def list_symbols(resource: SymbolsResource, soname: str) -> Iterator[tuple[str, str]]:
    """Lazily yield ``(symbol, package_version)`` pairs for *soname*.

    Only the section whose header starts with ``"<soname> "`` is read; the
    trailing space keeps ``libfoo.so.1`` from matching ``libfoo.so.10``.
    A trailing ``@Base`` is stripped from symbol names.

    Args:
        resource: Path to a symbols file, or an open text stream.
        soname: Library soname whose section to read.
    """
    header = f"{soname} "
    with _open_lines(resource) as lines:
        lines = iter(lines)
        for line in lines:
            if line.startswith(header):
                break
        else:
            return

        for line in lines:
            if _IGNORED_LINE_RE.match(line):
                continue
            m = _SYMBOL_LINE_RE.match(line)
            if not m:
                break
            symbol, package_version = m.group(1), m.group(2)
            if symbol.endswith(_BASE_SUFFIX):
                symbol = symbol[: -len(_BASE_SUFFIX)]
            yield symbol, package_version

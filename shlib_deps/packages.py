"""Package lookup — map sonames to installed Debian packages and symbols files."""

from __future__ import annotations

import logging
import os
import re
import subprocess
import threading
from typing import Protocol, runtime_checkable

from shlib_deps.core.config import DEFAULT_SYMBOLS_DIR, read_string_envvar
from shlib_deps.exceptions import PackageDatabaseError

logger = logging.getLogger(__name__)

# dpkg-query -S output lines:
#   libfoo1:amd64: /usr/lib/x86_64-linux-gnu/libfoo.so.1
#   libfoo1: /usr/lib/x86_64-linux-gnu/libfoo.so.1
_PROVIDER_LINE_RE = re.compile(r"^(\S+?):(?:(\S+?):)? ")

_NO_MATCH_MARKER = "no path found matching pattern"

# Checked in order before asking dpkg
_ARCH_ENV_VARS = ("DEB_HOST_ARCH", "DEB_BUILD_ARCH")


@runtime_checkable
class PackageDatabase(Protocol):
    """Interface to the system package database."""

    def search(self, pattern: str) -> str | None:
        """Return ``dpkg-query -S``-style output for *pattern*, or None if nothing matches."""
        ...

    def native_architecture(self) -> str:
        """Return the native package architecture, e.g. ``amd64``."""
        ...


class DpkgDatabase:
    """Query the dpkg database with dpkg-query and dpkg."""

    def __init__(self, dpkg_query: str = "dpkg-query", dpkg: str = "dpkg") -> None:
        self.dpkg_query = dpkg_query
        self.dpkg = dpkg

    def search(self, pattern: str) -> str | None:
        try:
            result = subprocess.run(
                [self.dpkg_query, "-S", pattern],
                capture_output=True,
                text=True,
                errors="replace",
            )
        except OSError as e:
            raise PackageDatabaseError(
                f"Error finding packages matching {pattern}: cannot spawn 'dpkg-query': {e}"
            ) from e

        if result.returncode != 0:
            # A negative return code means the process was killed by a signal
            if result.returncode > 0 and _NO_MATCH_MARKER in result.stderr:
                return None
            raise PackageDatabaseError(
                f"Error finding packages matching {pattern}: 'dpkg-query' failed "
                f"(exit {result.returncode}): {result.stderr.strip()}"
            )
        return result.stdout

    def native_architecture(self) -> str:
        cmd = [self.dpkg, "--print-architecture"]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise PackageDatabaseError(
                f"Error getting dpkg architecture: cannot spawn 'dpkg': {e}"
            ) from e
        if result.returncode != 0:
            raise PackageDatabaseError(
                "Error getting dpkg architecture: 'dpkg --print-architecture' failed "
                f"(exit {result.returncode}): {result.stderr.strip()}"
            )
        return result.stdout.strip()


def parse_provider_entries(output: str) -> list[tuple[str, str | None]]:
    """Split dpkg-query -S output into ``(package, architecture)`` pairs.

    The architecture is None when dpkg omits it. Unparseable lines
    (e.g. diversion notices) are dropped.
    """
    entries = []
    for line in output.splitlines():
        m = _PROVIDER_LINE_RE.match(line)
        if m:
            entries.append((m.group(1), m.group(2)))
    return entries


class PackageLocator:
    """Find which package provides a soname and where its symbols file lives.

    The target architecture is resolved once per locator (i.e. per
    resolution session) and reused afterwards.
    """

    def __init__(
        self,
        database: PackageDatabase,
        symbols_dir: str = DEFAULT_SYMBOLS_DIR,
        architecture: str | None = None,
    ) -> None:
        self.database = database
        self.symbols_dir = symbols_dir
        self._architecture = architecture
        self._providers: dict[tuple[str, str], str | None] = {}
        self._lock = threading.Lock()

    @property
    def architecture(self) -> str:
        """Target architecture: DEB_HOST_ARCH, DEB_BUILD_ARCH, then dpkg."""
        if self._architecture is None:
            for name in _ARCH_ENV_VARS:
                value = read_string_envvar(name)
                if value:
                    logger.debug("Using architecture %s from %s", value, name)
                    self._architecture = value
                    break
            else:
                self._architecture = self.database.native_architecture()
                logger.debug("Using native dpkg architecture %s", self._architecture)
        return self._architecture

    def provider_for(self, soname: str, architecture: str | None = None) -> str | None:
        """Return the package providing *soname*, or None if no package does.

        An entry whose architecture matches exactly is preferred; otherwise
        the first entry listed wins. Alternatives are not supported.
        """
        arch = architecture or self.architecture
        key = (soname, arch)
        with self._lock:
            if key in self._providers:
                return self._providers[key]

        output = self.database.search(f"*/{soname}")
        package = None
        if output:
            entries = parse_provider_entries(output)
            match = next((e for e in entries if e[1] == arch), None)
            if match is not None:
                package = match[0]
            elif entries:
                package = entries[0][0]

        with self._lock:
            self._providers[key] = package
        return package

    def symbol_table_for(self, package: str, architecture: str | None = None) -> str | None:
        """Return the path of ``<package>:<arch>.symbols`` if it exists."""
        arch = architecture or self.architecture
        path = os.path.join(self.symbols_dir, f"{package}:{arch}.symbols")
        if os.path.exists(path):
            return path
        return None

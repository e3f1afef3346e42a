"""Scan engine — walk ELF files and build the shared library dependency graph."""

from __future__ import annotations

import os
from collections.abc import Iterable

import structlog

from shlib_deps.introspect import Introspector, is_elf_file, path_resembles_library
from shlib_deps.models.scan import ScanState

log = structlog.get_logger("shlib_deps.scanner")


class ScanEngine:
    """Populate a :class:`ScanState` from files and directories."""

    def __init__(self, introspector: Introspector, state: ScanState | None = None) -> None:
        self.introspector = introspector
        self.state = state if state is not None else ScanState()

    def scan(self, paths: Iterable[str]) -> ScanState:
        """Scan each path; directories are walked recursively.

        Introspection errors propagate and abort the whole scan.
        """
        for path in paths:
            path = os.fspath(path)
            if not os.path.lexists(path):
                raise FileNotFoundError(f"Path not found: {path}")
            if os.path.isdir(path):
                self._scan_directory(path)
            else:
                self._scan_file(path)
        return self.state

    def _scan_directory(self, root: str) -> None:
        for dirpath, dirnames, filenames in os.walk(root):
            dirnames.sort()
            for name in list(dirnames):
                entry = os.path.join(dirpath, name)
                if os.path.islink(entry):
                    log.warning("scan.symlink_skipped", path=entry)
                    dirnames.remove(name)

            for name in sorted(filenames):
                entry = os.path.join(dirpath, name)
                # Libraries usually come with a symlink chain
                # (libfoo.so -> libfoo.so.1 -> libfoo.so.1.2.3); only the real file is scanned.
                if os.path.islink(entry):
                    log.warning("scan.symlink_skipped", path=entry)
                    continue
                if os.path.isfile(entry) and os.access(entry, os.X_OK):
                    self._scan_file(entry)

    def _scan_file(self, path: str) -> None:
        key = os.path.realpath(path)
        if key in self.state.scanned_paths:
            log.debug("scan.already_scanned", path=path)
            return
        self.state.scanned_paths.add(key)

        log.info("scan.file", path=path)
        if not is_elf_file(path):
            log.warning("scan.non_elf_skipped", path=path)
            return

        soname, needed = self.introspector.read_links(path)
        log.info("scan.links_detected", path=path, soname=soname, needed=needed)

        # Best effort: a library without DT_SONAME is known by its file name
        if soname is None and path_resembles_library(path):
            soname = os.path.basename(path)
            log.info("scan.soname_from_basename", path=path, soname=soname)

        if soname:
            self.state.scanned_sonames.add(soname)
        for dependency_soname in needed:
            self.state.add_dependency(dependency_soname, path)

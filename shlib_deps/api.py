"""DependencyAnalyzer facade — one scan/resolve session.

Usage::

    analyzer = DependencyAnalyzer()
    analyzer.scan("debian/tmp/usr/bin", "debian/tmp/usr/lib")
    for dep in analyzer.resolve():
        print(dep)
"""

from __future__ import annotations

import os

from shlib_deps.core.config import Settings
from shlib_deps.introspect import BinutilsIntrospector, Introspector
from shlib_deps.models.dependency import PackageDependency
from shlib_deps.models.scan import ScanState
from shlib_deps.packages import DpkgDatabase, PackageDatabase, PackageLocator
from shlib_deps.resolver import Resolver
from shlib_deps.scanner import ScanEngine


class DependencyAnalyzer:
    """Wire the introspector, package locator, scan engine and resolver together.

    Each instance owns a single :class:`ScanState`; create a new analyzer
    for an independent session. Collaborators default to the binutils and
    dpkg backends and can be replaced (see :mod:`shlib_deps.testing`).
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        introspector: Introspector | None = None,
        database: PackageDatabase | None = None,
    ) -> None:
        self.settings = settings or Settings.from_env()
        self.introspector = introspector or BinutilsIntrospector(
            objdump=self.settings.objdump, nm=self.settings.nm
        )
        self.database = database or DpkgDatabase(
            dpkg_query=self.settings.dpkg_query, dpkg=self.settings.dpkg
        )
        self.locator = PackageLocator(
            self.database,
            symbols_dir=self.settings.symbols_dir,
            architecture=self.settings.architecture,
        )
        self.state = ScanState()
        self._engine = ScanEngine(self.introspector, self.state)
        self._resolver = Resolver(self.locator, self.introspector)

    def scan(self, *paths: str | os.PathLike) -> ScanState:
        return self._engine.scan(paths)

    def resolve(self) -> list[PackageDependency]:
        return self._resolver.resolve(self.state)

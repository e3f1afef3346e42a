"""Resolver — turn a scanned dependency graph into Debian package dependencies."""

from __future__ import annotations

import structlog

from shlib_deps.exceptions import UnresolvableDependencyError
from shlib_deps.introspect import Introspector, SymbolExtractor
from shlib_deps.models.dependency import PackageDependency, VersionConstraint
from shlib_deps.models.scan import ScanState
from shlib_deps.packages import PackageLocator
from shlib_deps.symbols import list_symbols
from shlib_deps.version import PackageVersion

log = structlog.get_logger("shlib_deps.resolver")


class Resolver:
    """Resolve each needed soname to a package and a minimum version."""

    def __init__(self, locator: PackageLocator, introspector: Introspector) -> None:
        self.locator = locator
        self.introspector = introspector

    def resolve(self, state: ScanState) -> list[PackageDependency]:
        """Return package dependencies in first-needed order, without duplicates.

        Raises:
            UnresolvableDependencyError: a needed soname is neither scanned
                nor provided by any installed package.
        """
        extractor = SymbolExtractor(self.introspector, state.symbol_cache)
        result: list[PackageDependency] = []

        for soname, dependents in state.dependency_edges.items():
            # Satisfied by a file in the same scan, e.g. a library shipped
            # in the same package as the executable needing it.
            if soname in state.scanned_sonames:
                log.info("resolve.scanned_library_skipped", soname=soname)
                continue

            package = self.locator.provider_for(soname)
            if package is None:
                raise UnresolvableDependencyError(soname)
            log.info("resolve.provider_found", soname=soname, package=package)

            constraints = self.version_constraints(package, soname, dependents, extractor)
            log.info(
                "resolve.version_constraints",
                package=package,
                constraints=[vc.as_json() for vc in constraints] if constraints else None,
            )
            result.append(PackageDependency(package, constraints))

        # Two sonames may resolve to the same package and constraint
        return list(dict.fromkeys(result))

    def version_constraints(
        self,
        package: str,
        soname: str,
        dependents: list[str],
        extractor: SymbolExtractor,
    ) -> tuple[VersionConstraint, ...] | None:
        symbols_path = self.locator.symbol_table_for(package)
        if symbols_path is None:
            log.warning("resolve.no_symbols_file", package=package)
            return None
        log.info("resolve.symbols_file_found", package=package, path=symbols_path)

        min_version = self.find_min_package_version(soname, symbols_path, dependents, extractor)
        if min_version is None:
            return None
        return (VersionConstraint(">=", str(min_version)),)

    def find_min_package_version(
        self,
        soname: str,
        symbols_path: str,
        dependents: list[str],
        extractor: SymbolExtractor,
    ) -> PackageVersion | None:
        """Highest version among the symbols of *soname* that *dependents* use.

        That version is the oldest package release providing every symbol
        the dependents need.
        """
        used_symbols = extractor.union(dependents)
        if not used_symbols:
            return None

        max_version: PackageVersion | None = None
        for symbol, version_string in list_symbols(symbols_path, soname):
            if symbol not in used_symbols:
                continue
            version = PackageVersion(version_string)
            log.debug("resolve.symbol_in_use", symbol=symbol, version=version_string)
            if max_version is None or version > max_version:
                max_version = version
        return max_version

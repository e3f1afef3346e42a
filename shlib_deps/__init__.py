"""shlib-deps: Debian package dependencies from the shared libraries ELF files use."""

__version__ = "0.1.0"

from shlib_deps.api import DependencyAnalyzer
from shlib_deps.exceptions import (
    IntrospectionError,
    PackageDatabaseError,
    ShlibDepsError,
    UnresolvableDependencyError,
)
from shlib_deps.models import PackageDependency, ScanState, VersionConstraint
from shlib_deps.version import PackageVersion, compare_versions

__all__ = [
    "DependencyAnalyzer",
    "IntrospectionError",
    "PackageDatabaseError",
    "PackageDependency",
    "PackageVersion",
    "ScanState",
    "ShlibDepsError",
    "UnresolvableDependencyError",
    "VersionConstraint",
    "compare_versions",
]

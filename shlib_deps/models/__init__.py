"""Data models for dependency scanning and resolution."""

from shlib_deps.models.dependency import PackageDependency, VersionConstraint
from shlib_deps.models.scan import ScanState

__all__ = ["PackageDependency", "ScanState", "VersionConstraint"]

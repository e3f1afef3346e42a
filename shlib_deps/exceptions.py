"""Custom exceptions for shlib-deps."""


class ShlibDepsError(Exception):
    """Base exception for all dependency resolution errors."""


class IntrospectionError(ShlibDepsError):
    """Raised when objdump/nm cannot be spawned or exits abnormally."""

    def __init__(self, operation: str, path: str, detail: str):
        self.operation = operation
        self.path = path
        self.detail = detail
        super().__init__(f"Error {operation} for {path}: {detail}")


class PackageDatabaseError(ShlibDepsError):
    """Raised when a dpkg query fails for a reason other than 'no match'."""


class UnresolvableDependencyError(ShlibDepsError):
    """Raised when no installed package provides a needed soname."""

    def __init__(self, soname: str):
        self.soname = soname
        super().__init__(
            f"Error resolving package dependencies: no package provides {soname}"
        )

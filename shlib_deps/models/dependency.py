"""Resolved package dependency records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class VersionConstraint:
    """A version constraint such as ``>= 2.28``."""

    operator: str  # only ">=" is produced today
    version: str

    def as_json(self) -> dict[str, str]:
        return {"operator": self.operator, "version": self.version}

    def __str__(self) -> str:
        return f"{self.operator} {self.version}"


@dataclass(frozen=True)
class PackageDependency:
    """A dependency on a Debian package, optionally version-constrained.

    ``version_constraints`` is ``None`` when any version is acceptable,
    otherwise a non-empty tuple.
    """

    name: str
    version_constraints: tuple[VersionConstraint, ...] | None = None

    def __post_init__(self) -> None:
        if self.version_constraints is not None:
            constraints = tuple(self.version_constraints)
            if not constraints:
                raise ValueError("version_constraints must be None or non-empty")
            object.__setattr__(self, "version_constraints", constraints)

    def as_json(self) -> dict[str, Any]:
        result: dict[str, Any] = {"name": self.name}
        if self.version_constraints is not None:
            result["version_constraints"] = [vc.as_json() for vc in self.version_constraints]
        return result

    def __str__(self) -> str:
        if self.version_constraints is None:
            return self.name
        return f"{self.name} ({', '.join(str(vc) for vc in self.version_constraints)})"

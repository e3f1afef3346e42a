"""Mutable state accumulated while scanning ELF files."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ScanState:
    """Dependency graph built by one scan/resolve session.

    Mutated only while scanning; read-only once resolution starts.
    """

    # Sonames provided by the scanned files themselves
    scanned_sonames: set[str] = field(default_factory=set)
    # Needed soname -> dependent file paths, in first-seen order
    dependency_edges: dict[str, list[str]] = field(default_factory=dict)
    # File path -> dynamic symbols, filled lazily by the introspector
    symbol_cache: dict[str, frozenset[str]] = field(default_factory=dict)
    # Paths already scanned
    scanned_paths: set[str] = field(default_factory=set)

    def add_dependency(self, soname: str, path: str) -> None:
        dependents = self.dependency_edges.setdefault(soname, [])
        if path not in dependents:
            dependents.append(path)

"""Runtime settings, read from environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_SYMBOLS_DIR = "/var/lib/dpkg/info"


def read_string_envvar(name: str) -> str | None:
    """Return the value of env var *name*, treating empty values as unset."""
    value = os.environ.get(name)
    return value if value else None


@dataclass
class Settings:
    """Where to find dpkg metadata and which external tools to run.

    Environment variables:
        SHLIB_DEPS_SYMBOLS_DIR  — symbols file directory (default: /var/lib/dpkg/info)
        SHLIB_DEPS_OBJDUMP      — objdump executable (default: objdump)
        SHLIB_DEPS_NM           — nm executable (default: nm)
        SHLIB_DEPS_DPKG_QUERY   — dpkg-query executable (default: dpkg-query)
        SHLIB_DEPS_DPKG         — dpkg executable (default: dpkg)
    """

    symbols_dir: str = DEFAULT_SYMBOLS_DIR
    objdump: str = "objdump"
    nm: str = "nm"
    dpkg_query: str = "dpkg-query"
    dpkg: str = "dpkg"
    architecture: str | None = None  # None = resolve from env / dpkg

    @classmethod
    def from_env(cls, **overrides: str | None) -> Settings:
        settings = cls(
            symbols_dir=read_string_envvar("SHLIB_DEPS_SYMBOLS_DIR") or DEFAULT_SYMBOLS_DIR,
            objdump=read_string_envvar("SHLIB_DEPS_OBJDUMP") or "objdump",
            nm=read_string_envvar("SHLIB_DEPS_NM") or "nm",
            dpkg_query=read_string_envvar("SHLIB_DEPS_DPKG_QUERY") or "dpkg-query",
            dpkg=read_string_envvar("SHLIB_DEPS_DPKG") or "dpkg",
        )
        for key, value in overrides.items():
            if value is not None:
                setattr(settings, key, value)
        return settings

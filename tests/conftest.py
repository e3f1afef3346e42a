"""Shared pytest fixtures for shlib-deps tests."""

from __future__ import annotations

from pathlib import Path

import pytest
import structlog

from shlib_deps.api import DependencyAnalyzer
from shlib_deps.core.config import Settings
from shlib_deps.testing import FakeIntrospector, FakePackageDatabase

ARCH = "amd64"


@pytest.fixture(autouse=True)
def _structlog_to_stdlib():
    """Route structlog events through stdlib logging so caplog sees them."""
    structlog.configure(
        processors=[structlog.processors.KeyValueRenderer(key_order=["event"])],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def symbols_dir(tmp_path: Path) -> Path:
    d = tmp_path / "dpkg-info"
    d.mkdir()
    return d


@pytest.fixture
def tree(tmp_path: Path) -> Path:
    d = tmp_path / "tree"
    d.mkdir()
    return d


@pytest.fixture
def introspector() -> FakeIntrospector:
    return FakeIntrospector()


@pytest.fixture
def database() -> FakePackageDatabase:
    return FakePackageDatabase(architecture=ARCH)


@pytest.fixture
def settings(symbols_dir: Path) -> Settings:
    return Settings(symbols_dir=str(symbols_dir), architecture=ARCH)


@pytest.fixture
def analyzer(settings, introspector, database) -> DependencyAnalyzer:
    return DependencyAnalyzer(settings, introspector=introspector, database=database)

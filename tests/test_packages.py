"""Tests for package lookup — dpkg is mocked."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from shlib_deps.exceptions import PackageDatabaseError
from shlib_deps.packages import (
    DpkgDatabase,
    PackageDatabase,
    PackageLocator,
    parse_provider_entries,
)
from shlib_deps.testing import FakePackageDatabase


def _completed(stdout: str = "", stderr: str = "", returncode: int = 0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def no_arch_env():
    with patch.dict(os.environ, {}, clear=False):
        os.environ.pop("DEB_HOST_ARCH", None)
        os.environ.pop("DEB_BUILD_ARCH", None)
        yield


class TestParseProviderEntries:
    def test_with_and_without_arch(self):
        output = (
            "libfoo1:amd64: /usr/lib/x86_64-linux-gnu/libfoo.so.1\n"
            "libfoo1: /usr/lib/libfoo.so.1\n"
            "diversion by dash from: /bin/sh\n"
        )
        assert parse_provider_entries(output) == [
            ("libfoo1", "amd64"),
            ("libfoo1", None),
        ]

    def test_empty(self):
        assert parse_provider_entries("") == []


class TestDpkgDatabase:
    def test_satisfies_protocol(self):
        assert isinstance(DpkgDatabase(), PackageDatabase)
        assert isinstance(FakePackageDatabase(), PackageDatabase)

    def test_search(self):
        output = "libc6:amd64: /lib/x86_64-linux-gnu/libc.so.6\n"
        with patch("shlib_deps.packages.subprocess.run", return_value=_completed(output)) as run:
            assert DpkgDatabase().search("*/libc.so.6") == output
        assert run.call_args.args[0] == ["dpkg-query", "-S", "*/libc.so.6"]

    def test_search_no_match(self):
        failed = _completed(
            stderr="dpkg-query: no path found matching pattern */libnope.so.1\n", returncode=1
        )
        with patch("shlib_deps.packages.subprocess.run", return_value=failed):
            assert DpkgDatabase().search("*/libnope.so.1") is None

    def test_search_failure(self):
        failed = _completed(stderr="dpkg-query: database is locked\n", returncode=2)
        with patch("shlib_deps.packages.subprocess.run", return_value=failed):
            with pytest.raises(PackageDatabaseError, match="database is locked"):
                DpkgDatabase().search("*/libc.so.6")

    def test_search_killed_by_signal(self):
        killed = _completed(stderr="no path found matching pattern", returncode=-9)
        with patch("shlib_deps.packages.subprocess.run", return_value=killed):
            with pytest.raises(PackageDatabaseError):
                DpkgDatabase().search("*/libc.so.6")

    def test_search_spawn_failure(self):
        with patch("shlib_deps.packages.subprocess.run", side_effect=FileNotFoundError("dpkg-query")):
            with pytest.raises(PackageDatabaseError, match="cannot spawn 'dpkg-query'"):
                DpkgDatabase().search("*/libc.so.6")

    def test_native_architecture(self):
        with patch("shlib_deps.packages.subprocess.run", return_value=_completed("arm64\n")):
            assert DpkgDatabase().native_architecture() == "arm64"

    def test_native_architecture_failure(self):
        with patch("shlib_deps.packages.subprocess.run", return_value=_completed(returncode=1)):
            with pytest.raises(PackageDatabaseError, match="print-architecture"):
                DpkgDatabase().native_architecture()


class TestArchitecture:
    def test_explicit(self, no_arch_env):
        db = FakePackageDatabase(architecture="amd64")
        assert PackageLocator(db, architecture="riscv64").architecture == "riscv64"

    def test_host_arch_wins(self, no_arch_env):
        env = {"DEB_HOST_ARCH": "armhf", "DEB_BUILD_ARCH": "amd64"}
        with patch.dict(os.environ, env):
            assert PackageLocator(FakePackageDatabase()).architecture == "armhf"

    def test_build_arch(self, no_arch_env):
        with patch.dict(os.environ, {"DEB_HOST_ARCH": "", "DEB_BUILD_ARCH": "i386"}):
            assert PackageLocator(FakePackageDatabase()).architecture == "i386"

    def test_falls_back_to_dpkg_once(self, no_arch_env):
        db = FakePackageDatabase(architecture="ppc64el")
        locator = PackageLocator(db)
        with patch.object(db, "native_architecture", wraps=db.native_architecture) as native:
            assert locator.architecture == "ppc64el"
            assert locator.architecture == "ppc64el"
        assert native.call_count == 1

    def test_sessions_are_independent(self, no_arch_env):
        first = PackageLocator(FakePackageDatabase(architecture="amd64"))
        second = PackageLocator(FakePackageDatabase(architecture="arm64"))
        assert first.architecture == "amd64"
        assert second.architecture == "arm64"


class TestProviderFor:
    def test_exact_arch_match_preferred(self):
        db = FakePackageDatabase()
        db.add_provider("libfoo.so.1", "libfoo1-i386", arch="i386")
        db.add_provider("libfoo.so.1", "libfoo1", arch="amd64")
        locator = PackageLocator(db, architecture="amd64")
        assert locator.provider_for("libfoo.so.1") == "libfoo1"

    def test_first_entry_without_arch_match(self):
        db = FakePackageDatabase()
        db.add_provider("libfoo.so.1", "libfoo1-compat")
        db.add_provider("libfoo.so.1", "libfoo1", arch="i386")
        locator = PackageLocator(db, architecture="amd64")
        assert locator.provider_for("libfoo.so.1") == "libfoo1-compat"

    def test_explicit_architecture_argument(self):
        db = FakePackageDatabase()
        db.add_provider("libfoo.so.1", "libfoo1", arch="amd64")
        db.add_provider("libfoo.so.1", "libfoo1-arm", arch="arm64")
        locator = PackageLocator(db, architecture="amd64")
        assert locator.provider_for("libfoo.so.1", "arm64") == "libfoo1-arm"

    def test_no_provider(self):
        locator = PackageLocator(FakePackageDatabase(), architecture="amd64")
        assert locator.provider_for("libnope.so.1") is None

    def test_queries_glob_and_caches(self):
        db = FakePackageDatabase()
        db.add_provider("libfoo.so.1", "libfoo1", arch="amd64")
        locator = PackageLocator(db, architecture="amd64")
        locator.provider_for("libfoo.so.1")
        locator.provider_for("libfoo.so.1")
        assert db.searches == ["*/libfoo.so.1"]

    def test_database_error_propagates(self):
        db = FakePackageDatabase()
        locator = PackageLocator(db, architecture="amd64")
        with patch.object(db, "search", side_effect=PackageDatabaseError("boom")):
            with pytest.raises(PackageDatabaseError, match="boom"):
                locator.provider_for("libfoo.so.1")


class TestSymbolTableFor:
    def test_found(self, tmp_path: Path):
        path = tmp_path / "libfoo1:amd64.symbols"
        path.write_text("")
        locator = PackageLocator(FakePackageDatabase(), str(tmp_path), architecture="amd64")
        assert locator.symbol_table_for("libfoo1") == str(path)

    def test_other_arch_not_used(self, tmp_path: Path):
        (tmp_path / "libfoo1:i386.symbols").write_text("")
        locator = PackageLocator(FakePackageDatabase(), str(tmp_path), architecture="amd64")
        assert locator.symbol_table_for("libfoo1") is None
        assert locator.symbol_table_for("libfoo1", "i386") == str(tmp_path / "libfoo1:i386.symbols")

"""Tests for choosing between lock files and the installed tree."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from nodeaudit.engines.lock_tree.filter import filter_tree
from nodeaudit.engines.lock_tree.loader import (
    LOCK_FILE_NAMES,
    get_all_dependencies,
    load_lock_dependencies,
)
from nodeaudit.engines.lock_tree.models import PackageRecord
from nodeaudit.exceptions import (
    DependencySourcesExhaustedError,
    LockSourceUnavailableError,
    ModuleNotFoundInTreeError,
)

_PRIMARY = {"a": {"version": "1.0.0", "resolved": "x", "integrity": "sha512-a"}}
_FALLBACK = {"b": {"version": "2.0.0", "dev": True, "bundled": True}}


def _scanner_factory(result=None, error=None):
    scanner = MagicMock()
    if error is not None:
        scanner.scan.side_effect = error
    else:
        scanner.scan.return_value = result
    return MagicMock(return_value=scanner)


class TestLoadLockDependencies:
    def test_filters_lock_file(self, project):
        path = project.lock("package-lock.json", _PRIMARY)
        assert load_lock_dependencies(path) == filter_tree(_PRIMARY)

    def test_missing_file(self, project):
        with pytest.raises(LockSourceUnavailableError) as exc_info:
            load_lock_dependencies(project.path / "package-lock.json")
        assert exc_info.value.path == project.path / "package-lock.json"

    def test_invalid_json(self, project):
        (project.path / "package-lock.json").write_text("{")
        with pytest.raises(LockSourceUnavailableError):
            load_lock_dependencies(project.path / "package-lock.json")

    def test_lock_without_dependencies(self, project):
        (project.path / "package-lock.json").write_text('{"lockfileVersion": 1}')
        assert load_lock_dependencies(project.path / "package-lock.json") == {}


class TestGetAllDependencies:
    def test_lock_file_names_order(self):
        assert LOCK_FILE_NAMES == ("package-lock.json", "npm-shrinkwrap.json")

    def test_primary_lock_wins(self, project):
        project.lock("package-lock.json", _PRIMARY)
        project.lock("npm-shrinkwrap.json", _FALLBACK)
        factory = _scanner_factory()

        assert get_all_dependencies(project.path, factory) == filter_tree(_PRIMARY)
        factory.assert_not_called()

    def test_shrinkwrap_fallback(self, project):
        project.lock("npm-shrinkwrap.json", _FALLBACK)
        factory = _scanner_factory()

        result = get_all_dependencies(project.path, factory)

        assert result == filter_tree(_FALLBACK)
        assert result["b"] == PackageRecord(version="2.0.0", dev=True)
        factory.assert_not_called()

    def test_corrupt_primary_falls_back(self, project):
        (project.path / "package-lock.json").write_text("not json")
        project.lock("npm-shrinkwrap.json", _FALLBACK)
        assert get_all_dependencies(project.path, _scanner_factory()) == filter_tree(_FALLBACK)

    def test_scanner_used_without_lock_files(self, project):
        scanned = {"c": PackageRecord(version="3.0.0")}
        factory = _scanner_factory(result=scanned)

        assert get_all_dependencies(project.path, factory) is scanned
        factory.assert_called_once_with(project.path)

    def test_all_sources_failing(self, project):
        factory = _scanner_factory(error=ModuleNotFoundInTreeError("ghost", project.path))

        with pytest.raises(DependencySourcesExhaustedError) as exc_info:
            get_all_dependencies(project.path, factory)

        message = str(exc_info.value)
        assert "package-lock.json" in message
        assert "npm-shrinkwrap.json" in message
        assert isinstance(exc_info.value.__cause__, ModuleNotFoundInTreeError)

    def test_real_scanner_is_default(self, project):
        project.manifest(dependencies={"left-pad": "^1.0.0"})
        project.install("node_modules/left-pad", "left-pad", version="1.3.0")
        assert get_all_dependencies(project.path) == {"left-pad": PackageRecord(version="1.3.0")}

    def test_undecodable_primary_falls_back(self, project):
        (project.path / "package-lock.json").write_bytes(
            b'{"dependencies": {"a": {"version": "\xff"}}}'
        )
        project.lock("npm-shrinkwrap.json", {"b": {"version": "2.0.0"}})
        factory = _scanner_factory()

        assert get_all_dependencies(project.path, factory) == {"b": PackageRecord(version="2.0.0")}
        factory.assert_not_called()

    def test_bom_prefixed_lock_file_is_read(self, project):
        path = project.path / "package-lock.json"
        path.write_bytes(b"\xef\xbb\xbf" + b'{"dependencies": {"a": {"version": "1.0.0"}}}')
        assert load_lock_dependencies(path) == {"a": PackageRecord(version="1.0.0")}

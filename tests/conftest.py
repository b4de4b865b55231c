"""Shared pytest fixtures for nodeaudit tests."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
import structlog


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True, scope="session")
def _quiet_logs():
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING))


def write_package(
    package_dir: Path,
    name: str,
    version: str | None = "1.0.0",
    dependencies: dict[str, str] | None = None,
    integrity: str | None = None,
    **extra,
) -> Path:
    """Write a minimal installed package.json into *package_dir*."""
    package_dir.mkdir(parents=True, exist_ok=True)
    data: dict = {"name": name}
    if version is not None:
        data["version"] = version
    if dependencies is not None:
        data["dependencies"] = dependencies
    if integrity is not None:
        data["_integrity"] = integrity
    data.update(extra)
    manifest = package_dir / "package.json"
    manifest.write_text(json.dumps(data))
    return manifest


@pytest.fixture
def project(tmp_path):
    """A project directory with an empty-ish package.json; returns a writer helper."""
    root = tmp_path / "app"
    root.mkdir()

    class _Project:
        path = root.resolve()
        node_modules = root.resolve() / "node_modules"

        def manifest(self, dependencies=None, dev_dependencies=None, **extra) -> Path:
            data = {"name": "app", "version": "0.1.0", **extra}
            if dependencies is not None:
                data["dependencies"] = dependencies
            if dev_dependencies is not None:
                data["devDependencies"] = dev_dependencies
            path = root / "package.json"
            path.write_text(json.dumps(data))
            return path

        def install(self, rel: str, name: str, **kwargs) -> Path:
            """Install *name* at ``<project>/<rel>``."""
            return write_package(root / rel, name, **kwargs)

        def lock(self, filename: str, dependencies) -> Path:
            path = root / filename
            path.write_text(json.dumps({"name": "app", "lockfileVersion": 1, "dependencies": dependencies}))
            return path

    return _Project()


@pytest.fixture
def install_package():
    return write_package

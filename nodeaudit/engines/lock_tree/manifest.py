"""Load ``package.json`` documents from disk."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nodeaudit.engines.lock_tree.resolver import MANIFEST_NAME
from nodeaudit.exceptions import ManifestError


def load_json_document(path: Path) -> dict[str, Any]:
    """Read and parse the JSON object stored at *path*.

    Raises :class:`ManifestError` if the file is missing, unreadable, not
    valid JSON, or its root is not an object.
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as exc:
        raise ManifestError(path, f"cannot read file ({exc.strerror or exc})") from exc
    try:
        # utf-8-sig drops a leading BOM, as Node's JSON loader does
        content = raw.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise ManifestError(path, f"invalid UTF-8 (byte {exc.start})") from exc
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ManifestError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc
    if not isinstance(data, dict):
        raise ManifestError(path, "document root is not an object")
    return data


def dependency_map(data: Mapping[str, Any], key: str, path: Path) -> dict[str, str] | None:
    """Return ``data[key]`` as a name -> range mapping, or None when absent."""
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, Mapping):
        raise ManifestError(path, f"'{key}' must be an object")
    return dict(value)


@dataclass
class ProjectManifest:
    """The root project's ``package.json``."""

    path: Path
    name: str | None = None
    version: str | None = None
    dependencies: dict[str, str] = field(default_factory=dict)
    dev_dependencies: dict[str, str] = field(default_factory=dict)

    @property
    def project_dir(self) -> Path:
        return self.path.parent

    @classmethod
    def load(cls, project_dir: Path) -> ProjectManifest:
        path = Path(project_dir).resolve() / MANIFEST_NAME
        data = load_json_document(path)
        return cls(
            path=path,
            name=data.get("name"),
            version=data.get("version"),
            dependencies=dependency_map(data, "dependencies", path) or {},
            dev_dependencies=dependency_map(data, "devDependencies", path) or {},
        )

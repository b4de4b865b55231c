"""Data models for the lock tree engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Fields a lock tree node keeps; ``dependencies`` is handled recursively.
RECORD_FIELDS = ("version", "dev", "requires", "integrity")


@dataclass
class PackageRecord:
    """A single node of a lockfile-shaped dependency tree.

    ``None`` means the field is absent. ``dependencies`` is either ``None`` or
    a non-empty mapping of locally nested children.
    """

    version: str | None = None
    dev: bool | None = None
    requires: dict[str, Any] | None = None
    integrity: str | None = None
    dependencies: dict[str, PackageRecord] | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the lock file JSON shape, omitting absent fields."""
        data: dict[str, Any] = {}
        for name in RECORD_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = dict(value) if isinstance(value, dict) else value
        if self.dependencies:
            data["dependencies"] = tree_to_dict(self.dependencies)
        return data


@dataclass
class ResolvedPackage:
    """A package resolved from the installed tree, as stored in the cache."""

    package_dir: Path
    record: PackageRecord = field(default_factory=PackageRecord)


def tree_to_dict(tree: dict[str, PackageRecord]) -> dict[str, dict[str, Any]]:
    """Serialize a name -> record mapping to plain JSON-compatible dicts."""
    return {name: record.to_dict() for name, record in tree.items()}

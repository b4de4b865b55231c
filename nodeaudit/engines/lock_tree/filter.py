"""Project raw lock file nodes down to the canonical record fields."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from nodeaudit.engines.lock_tree.models import RECORD_FIELDS, PackageRecord


def filter_tree(tree: Mapping[str, Any] | None) -> dict[str, PackageRecord]:
    """Map every package in *tree* to a :class:`PackageRecord`.

    Unknown node fields are dropped and nested ``dependencies`` are filtered
    the same way. Malformed nodes yield records with the missing fields
    absent. Already filtered trees pass through unchanged.
    """
    if not isinstance(tree, Mapping):
        return {}
    return {name: _filter_node(node) for name, node in tree.items()}


def _filter_node(node: Any) -> PackageRecord:
    if isinstance(node, PackageRecord):
        node = node.to_dict()
    if not isinstance(node, Mapping):
        return PackageRecord()

    record = PackageRecord(**{name: node[name] for name in RECORD_FIELDS if name in node})
    if isinstance(record.requires, Mapping):
        record.requires = dict(record.requires)

    children = filter_tree(node.get("dependencies"))
    if children:
        record.dependencies = children
    return record

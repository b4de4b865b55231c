"""Pick the first dependency source that works: lock file, shrinkwrap, installed tree."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import structlog

from nodeaudit.engines.lock_tree.filter import filter_tree
from nodeaudit.engines.lock_tree.manifest import load_json_document
from nodeaudit.engines.lock_tree.models import PackageRecord
from nodeaudit.engines.lock_tree.scanner import InstalledTreeScanner
from nodeaudit.exceptions import (
    DependencySourcesExhaustedError,
    LockSourceUnavailableError,
    ManifestError,
    ScanError,
)

log = structlog.get_logger("nodeaudit.lock_tree")

LOCK_FILE_NAMES = ("package-lock.json", "npm-shrinkwrap.json")

ScannerFactory = Callable[[Path], InstalledTreeScanner]


def load_lock_dependencies(lock_file: Path) -> dict[str, PackageRecord]:
    """Parse *lock_file* and filter its root ``dependencies`` mapping.

    Raises :class:`LockSourceUnavailableError` if the file is missing or
    cannot be parsed.
    """
    try:
        document = load_json_document(lock_file)
    except ManifestError as exc:
        raise LockSourceUnavailableError(lock_file, exc.reason) from exc
    return filter_tree(document.get("dependencies"))


def get_all_dependencies(
    project_dir: Path,
    scanner_factory: ScannerFactory = InstalledTreeScanner,
) -> dict[str, PackageRecord]:
    """Return the project's dependency tree from the first source that succeeds.

    Tries each of :data:`LOCK_FILE_NAMES` in order, then scans the installed
    tree. Raises :class:`DependencySourcesExhaustedError` if all fail.
    """
    project_dir = Path(project_dir).resolve()
    for lock_name in LOCK_FILE_NAMES:
        try:
            tree = load_lock_dependencies(project_dir / lock_name)
        except LockSourceUnavailableError as exc:
            log.debug("lock_tree.source_unavailable", source=lock_name, reason=exc.reason)
            continue
        log.info("lock_tree.source_loaded", source=lock_name, packages=len(tree))
        return tree

    try:
        tree = scanner_factory(project_dir).scan()
    except ScanError as exc:
        log.warning("lock_tree.scan_failed", project=str(project_dir), error=str(exc))
        raise DependencySourcesExhaustedError(LOCK_FILE_NAMES) from exc
    log.info("lock_tree.source_loaded", source="node_modules", packages=len(tree))
    return tree

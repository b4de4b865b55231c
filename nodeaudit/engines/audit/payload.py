"""Assemble the request body for the registry's bulk audit endpoint."""

from __future__ import annotations

import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any

import structlog

from nodeaudit.core.config import Settings
from nodeaudit.engines.lock_tree.loader import ScannerFactory, get_all_dependencies
from nodeaudit.engines.lock_tree.manifest import ProjectManifest
from nodeaudit.engines.lock_tree.models import tree_to_dict
from nodeaudit.engines.lock_tree.scanner import InstalledTreeScanner

log = structlog.get_logger("nodeaudit.audit")

# sys.platform prefixes -> names reported by Node's os.platform()
_NODE_PLATFORMS = {
    "linux": "linux",
    "darwin": "darwin",
    "win32": "win32",
    "cygwin": "win32",
    "freebsd": "freebsd",
    "openbsd": "openbsd",
    "sunos": "sunos",
    "aix": "aix",
}


def node_platform(platform: str | None = None) -> str:
    platform = platform or sys.platform
    for prefix, name in _NODE_PLATFORMS.items():
        if platform.startswith(prefix):
            return name
    return platform


def detect_node_version() -> str | None:
    """Return the output of ``node --version``, or None if node is not installed."""
    node = shutil.which("node")
    if node is None:
        return None
    try:
        proc = subprocess.run(
            [node, "--version"],
            check=True,
            capture_output=True,
            text=True,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        log.warning("audit.node_version_failed", error=str(exc))
        return None
    return proc.stdout.strip() or None


def get_metadata(settings: Settings | None = None) -> dict[str, str]:
    settings = settings or Settings()
    metadata: dict[str, str] = {}
    node_version = settings.node_version or detect_node_version()
    if node_version:
        metadata["node_version"] = node_version
    metadata["platform"] = node_platform()
    return metadata


def build_audit_payload(
    project_dir: Path,
    settings: Settings | None = None,
    scanner_factory: ScannerFactory | None = None,
) -> dict[str, Any]:
    """Build the audit request for the project rooted at *project_dir*.

    ``requires`` merges dev and production ranges, production winning on
    name clashes. Errors from reading the manifest or the dependency sources
    propagate unchanged.
    """
    settings = settings or Settings()
    project_dir = Path(project_dir).resolve()
    manifest = ProjectManifest.load(project_dir)

    if scanner_factory is None:
        def scanner_factory(path: Path) -> InstalledTreeScanner:
            return InstalledTreeScanner(path, settings=settings)

    dependencies = get_all_dependencies(project_dir, scanner_factory)

    return {
        "name": manifest.name,
        "version": manifest.version,
        "requires": {**manifest.dev_dependencies, **manifest.dependencies},
        "dependencies": tree_to_dict(dependencies),
        "install": [],
        "remove": [],
        "metadata": get_metadata(settings),
    }

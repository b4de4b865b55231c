"""InstalledTreeScanner — rebuild a lock tree from an installed ``node_modules``."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from nodeaudit.core.config import Settings
from nodeaudit.engines.lock_tree.cache import PackageCache
from nodeaudit.engines.lock_tree.manifest import (
    ProjectManifest,
    dependency_map,
    load_json_document,
)
from nodeaudit.engines.lock_tree.models import PackageRecord, ResolvedPackage
from nodeaudit.engines.lock_tree.resolver import NODE_MODULES, ModuleResolver

log = structlog.get_logger("nodeaudit.lock_tree")


def _is_within(path: Path, directory: Path) -> bool:
    return path == directory or directory in path.parents


def _install_root(package_dir: Path) -> Path:
    """The ``node_modules`` folder a package sits in, looking past ``@scope`` folders."""
    parent = package_dir.parent
    # Not a plain dirname check: a hoisted scoped package lives at
    # <root>/node_modules/@scope/pkg and still counts as the shared root.
    if parent.name.startswith("@"):
        return parent.parent
    return parent


@dataclass
class _ScanState:
    cache: PackageCache = field(default_factory=PackageCache)
    top_level: dict[str, PackageRecord] = field(default_factory=dict)


class InstalledTreeScanner:
    """Infer a lockfile-shaped tree from the packages installed under a project.

    Each dependency edge is resolved with Node's lookup rules and the child
    is placed either under its parent (nested, or inside the project but not
    hoisted) or in the shared top-level set (hoisted to the project's
    ``node_modules`` or installed outside the project). The top-level set is
    first-writer-wins.
    """

    def __init__(
        self,
        project_dir: Path,
        resolver: ModuleResolver | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.project_dir = Path(project_dir).resolve()
        if resolver is None:
            settings = settings or Settings()
            resolver = ModuleResolver(settings.node_path)
        self.resolver = resolver
        self.shared_root = self.project_dir / NODE_MODULES
        self.last_cache: PackageCache | None = None

    def scan(self) -> dict[str, PackageRecord]:
        """Walk production then development roots and return the top-level set.

        Raises :class:`~nodeaudit.exceptions.ScanError` on any missing or
        malformed manifest, unresolvable package, or dependency cycle.
        """
        manifest = ProjectManifest.load(self.project_dir)
        state = _ScanState()
        self.last_cache = state.cache

        # Production first: a package reachable from both keeps its first (prod) marking.
        for name in manifest.dependencies:
            self._claim_top_level(state, name, self._resolve(state, self.project_dir, name, dev=False))
        for name in manifest.dev_dependencies:
            self._claim_top_level(state, name, self._resolve(state, self.project_dir, name, dev=True))

        log.info(
            "lock_tree.scan_done",
            project=str(self.project_dir),
            packages=len(state.cache),
            top_level=len(state.top_level),
        )
        return state.top_level

    # ── traversal ────────────────────────────────────────────────────────

    def _resolve(self, state: _ScanState, parent_dir: Path, name: str, *, dev: bool) -> ResolvedPackage:
        manifest_path = self.resolver.resolve_manifest(parent_dir, name)
        return state.cache.get_or_resolve(
            manifest_path, lambda: self._collect(state, manifest_path, dev=dev)
        )

    def _collect(self, state: _ScanState, manifest_path: Path, *, dev: bool) -> ResolvedPackage:
        package_dir = manifest_path.parent
        data = load_json_document(manifest_path)
        declared = dependency_map(data, "dependencies", manifest_path)

        record = PackageRecord(version=data.get("version"), integrity=data.get("_integrity"))
        if dev:
            record.dev = True

        if declared is not None:
            requires: dict[str, str] = {}
            local: dict[str, PackageRecord] = {}
            for child_name in declared:
                child = self._resolve(state, package_dir, child_name, dev=dev)
                if child.record.version is not None:
                    requires[child_name] = child.record.version
                self._classify(state, package_dir, child_name, child, local)
            record.requires = requires
            if local:
                record.dependencies = local

        log.debug("lock_tree.package_resolved", path=str(manifest_path), dev=dev)
        return ResolvedPackage(package_dir=package_dir, record=record)

    # ── placement ────────────────────────────────────────────────────────

    def _classify(
        self,
        state: _ScanState,
        parent_dir: Path,
        name: str,
        child: ResolvedPackage,
        local: dict[str, PackageRecord],
    ) -> None:
        if _is_within(child.package_dir, parent_dir):
            local[name] = child.record
        elif self._is_top_level(child.package_dir) and name not in state.top_level:
            state.top_level[name] = child.record
        elif _is_within(child.package_dir, self.project_dir):
            local[name] = child.record
        else:
            log.debug(
                "lock_tree.top_level_claim_dropped",
                name=name,
                package_dir=str(child.package_dir),
                parent_dir=str(parent_dir),
            )

    def _is_top_level(self, package_dir: Path) -> bool:
        return (
            not _is_within(package_dir, self.project_dir)
            or _install_root(package_dir) == self.shared_root
        )

    def _claim_top_level(self, state: _ScanState, name: str, resolved: ResolvedPackage) -> None:
        existing = state.top_level.setdefault(name, resolved.record)
        if existing is not resolved.record:
            log.debug(
                "lock_tree.top_level_claim_dropped",
                name=name,
                package_dir=str(resolved.package_dir),
                parent_dir=str(self.project_dir),
            )

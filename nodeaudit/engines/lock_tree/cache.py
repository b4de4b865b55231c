"""Per-scan memoization of resolved packages, keyed by manifest path."""

from __future__ import annotations

from collections import Counter
from collections.abc import Callable
from pathlib import Path

from nodeaudit.engines.lock_tree.models import ResolvedPackage
from nodeaudit.exceptions import DependencyCycleError


class PackageCache:
    """Resolve each package manifest at most once per scan.

    Not thread-safe; a scan is a single synchronous traversal.
    """

    def __init__(self) -> None:
        self._entries: dict[Path, ResolvedPackage] = {}
        self._in_progress: list[Path] = []
        self.resolutions: Counter[Path] = Counter()

    def __contains__(self, manifest_path: Path) -> bool:
        return manifest_path in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, manifest_path: Path) -> ResolvedPackage | None:
        return self._entries.get(manifest_path)

    def get_or_resolve(
        self,
        manifest_path: Path,
        resolve_fn: Callable[[], ResolvedPackage],
    ) -> ResolvedPackage:
        """Return the cached entry for *manifest_path*, resolving it on first use.

        Raises :class:`DependencyCycleError` when *manifest_path* is requested
        again while its own resolution is still running.
        """
        cached = self._entries.get(manifest_path)
        if cached is not None:
            return cached

        if manifest_path in self._in_progress:
            start = self._in_progress.index(manifest_path)
            raise DependencyCycleError(self._in_progress[start:] + [manifest_path])

        self._in_progress.append(manifest_path)
        try:
            self.resolutions[manifest_path] += 1
            resolved = resolve_fn()
        finally:
            self._in_progress.pop()

        self._entries[manifest_path] = resolved
        return resolved

"""Node-style package lookup: walk outward through ``node_modules`` folders."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from nodeaudit.exceptions import ModuleNotFoundInTreeError

NODE_MODULES = "node_modules"
MANIFEST_NAME = "package.json"


class ModuleResolver:
    """Find a package's ``package.json`` the way Node's ``require`` does.

    Starting at a directory, every ancestor's ``node_modules`` folder is tried
    in turn (folders that are themselves ``node_modules`` are skipped), then
    the extra global directories (``NODE_PATH``). Hits are returned with
    symlinks resolved.
    """

    def __init__(self, global_paths: Iterable[Path] = ()) -> None:
        self.global_paths = [Path(p) for p in global_paths]

    def resolve_manifest(self, start_dir: Path, name: str) -> Path:
        """Return the absolute manifest path of package *name* seen from *start_dir*.

        Raises :class:`ModuleNotFoundInTreeError` if no candidate exists.
        """
        start_dir = Path(start_dir).resolve()
        for candidate in self._candidates(start_dir, name):
            if candidate.is_file():
                return candidate.resolve()
        raise ModuleNotFoundInTreeError(name, start_dir)

    def _candidates(self, start_dir: Path, name: str) -> Iterable[Path]:
        for directory in (start_dir, *start_dir.parents):
            if directory.name == NODE_MODULES:
                continue
            yield directory / NODE_MODULES / name / MANIFEST_NAME
        for directory in self.global_paths:
            yield directory / name / MANIFEST_NAME

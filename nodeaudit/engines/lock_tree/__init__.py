"""Lock tree engine — lockfile-shaped dependency trees from lock files or node_modules."""

from nodeaudit.engines.lock_tree.cache import PackageCache
from nodeaudit.engines.lock_tree.filter import filter_tree
from nodeaudit.engines.lock_tree.loader import (
    LOCK_FILE_NAMES,
    get_all_dependencies,
    load_lock_dependencies,
)
from nodeaudit.engines.lock_tree.models import PackageRecord, ResolvedPackage, tree_to_dict
from nodeaudit.engines.lock_tree.resolver import ModuleResolver
from nodeaudit.engines.lock_tree.scanner import InstalledTreeScanner

__all__ = [
    "LOCK_FILE_NAMES",
    "InstalledTreeScanner",
    "ModuleResolver",
    "PackageCache",
    "PackageRecord",
    "ResolvedPackage",
    "filter_tree",
    "get_all_dependencies",
    "load_lock_dependencies",
    "tree_to_dict",
]

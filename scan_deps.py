#!/usr/bin/env python3
"""Standalone lock tree builder — no network required.

Usage:
    python scan_deps.py /path/to/project            # lock file, shrinkwrap, then node_modules
    python scan_deps.py .                           # current directory
    python scan_deps.py /path/to/project --scan     # always scan node_modules
    python scan_deps.py /path/to/project --json     # print the full tree as JSON
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from nodeaudit.engines.lock_tree.loader import get_all_dependencies
from nodeaudit.engines.lock_tree.models import PackageRecord, tree_to_dict
from nodeaudit.engines.lock_tree.scanner import InstalledTreeScanner
from nodeaudit.exceptions import AuditError


def _print_tree(tree: dict[str, PackageRecord], depth: int = 0) -> None:
    for name, record in sorted(tree.items()):
        flags = " (dev)" if record.dev else ""
        print(f"{'  ' * depth}{name}@{record.version or '?'}{flags}")
        if record.dependencies:
            _print_tree(record.dependencies, depth + 1)


def main() -> None:
    parser = argparse.ArgumentParser(description="Build a lockfile-shaped dependency tree")
    parser.add_argument("target", help="Project directory containing package.json")
    parser.add_argument("--scan", action="store_true", help="Ignore lock files, scan node_modules")
    parser.add_argument("--json", action="store_true", dest="as_json", help="Output as JSON")
    args = parser.parse_args()

    project = Path(args.target).resolve()
    if not project.is_dir():
        print(f"Error: {project} is not a directory", file=sys.stderr)
        sys.exit(1)

    try:
        if args.scan:
            tree = InstalledTreeScanner(project).scan()
        else:
            tree = get_all_dependencies(project)
    except AuditError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.as_json:
        print(json.dumps(tree_to_dict(tree), indent=2))
    elif not tree:
        print("No dependencies found.")
    else:
        print(f"Found {len(tree)} top-level packages\n")
        _print_tree(tree)


if __name__ == "__main__":
    main()

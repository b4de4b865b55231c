"""CLI entry point: nodeaudit.

Subcommands:
    nodeaudit audit [PATH] [--reporter detail|json|summary]   # audit against the registry
    nodeaudit tree [PATH] [--scan]                             # print the dependency tree
    nodeaudit payload [PATH]                                   # print the audit request body
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

import click
import httpx
from pydantic import ValidationError

from nodeaudit.core.config import Settings
from nodeaudit.core.logging import setup_logging
from nodeaudit.engines.audit.payload import build_audit_payload
from nodeaudit.engines.audit.report import DEFAULT_REPORTER, REPORTERS
from nodeaudit.engines.audit.runner import run_audit
from nodeaudit.engines.lock_tree.loader import get_all_dependencies
from nodeaudit.engines.lock_tree.models import tree_to_dict
from nodeaudit.engines.lock_tree.scanner import InstalledTreeScanner
from nodeaudit.exceptions import AuditError

_PROJECT_ARG = click.argument(
    "project_path",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(2)


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
@click.option("--log-json", is_flag=True, help="Emit logs as JSON lines on stderr")
def main(verbose: bool, log_json: bool) -> None:
    """nodeaudit: rebuild a project's locked dependency tree and audit it."""
    try:
        setup_logging("DEBUG" if verbose else None, "json" if log_json else None)
    except ValueError as e:
        _fail(str(e))


@main.command("audit")
@_PROJECT_ARG
@click.option(
    "--reporter",
    type=click.Choice(sorted(REPORTERS)),
    default=DEFAULT_REPORTER,
    show_default=True,
    help="Report format",
)
def audit(project_path: Path, reporter: str) -> None:
    """Send the project's dependency tree to the registry audit endpoint."""
    try:
        rendered = asyncio.run(run_audit(project_path, reporter, Settings()))
    except AuditError as e:
        _fail(str(e))
    except httpx.HTTPError as e:
        _fail(f"audit request failed: {e}")
    except ValidationError as e:
        _fail(f"malformed audit response: {e.error_count()} invalid field(s)")
    except ValueError as e:
        _fail(str(e))
    click.echo(rendered.report)
    sys.exit(rendered.exit_code)


@main.command("tree")
@_PROJECT_ARG
@click.option("--scan", "force_scan", is_flag=True, help="Ignore lock files, scan node_modules")
def tree(project_path: Path, force_scan: bool) -> None:
    """Print the lockfile-shaped dependency tree as JSON."""
    try:
        settings = Settings()
        if force_scan:
            deps = InstalledTreeScanner(project_path, settings=settings).scan()
        else:
            deps = get_all_dependencies(
                project_path, lambda p: InstalledTreeScanner(p, settings=settings)
            )
    except (AuditError, ValueError) as e:
        _fail(str(e))
    click.echo(json.dumps(tree_to_dict(deps), indent=2))


@main.command("payload")
@_PROJECT_ARG
def payload(project_path: Path) -> None:
    """Print the audit request body without sending it."""
    try:
        body = build_audit_payload(project_path, Settings())
    except (AuditError, ValueError) as e:
        _fail(str(e))
    click.echo(json.dumps(body, indent=2))

"""Render an audit result as text or JSON."""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from nodeaudit.engines.audit.models import SEVERITIES, Advisory, AuditResult

DEFAULT_REPORTER = "detail"


@dataclass
class RenderedReport:
    report: str
    exit_code: int


def _summary_line(result: AuditResult) -> str:
    counts = result.metadata.vulnerabilities
    scanned = result.metadata.total_dependencies
    if counts.total == 0:
        return f"found 0 vulnerabilities in {scanned} scanned packages"
    parts = [
        f"{getattr(counts, name)} {name}" for name in reversed(SEVERITIES) if getattr(counts, name)
    ]
    noun = "vulnerability" if counts.total == 1 else "vulnerabilities"
    return f"found {counts.total} {noun} ({', '.join(parts)}) in {scanned} scanned packages"


def _render_advisory(advisory: Advisory) -> list[str]:
    lines = [
        f"{advisory.severity.upper():<9} {advisory.title}",
        f"  Package:      {advisory.module_name}",
    ]
    if advisory.vulnerable_versions:
        lines.append(f"  Vulnerable:   {advisory.vulnerable_versions}")
    if advisory.patched_versions:
        lines.append(f"  Patched in:   {advisory.patched_versions}")
    paths = sorted({path for finding in advisory.findings for path in finding.paths})
    for path in paths:
        lines.append(f"  Path:         {path.replace('>', ' > ')}")
    if advisory.url:
        lines.append(f"  More info:    {advisory.url}")
    return lines


def render_detail(result: AuditResult, raw: dict[str, Any]) -> str:
    lines = ["# npm audit report", ""]
    rank = {name: i for i, name in enumerate(reversed(SEVERITIES))}
    advisories = sorted(
        result.advisories.values(),
        key=lambda a: (rank.get(a.severity, len(rank)), a.module_name),
    )
    for advisory in advisories:
        lines.extend(_render_advisory(advisory))
        lines.append("")
    lines.append(_summary_line(result))
    return "\n".join(lines)


def render_json(result: AuditResult, raw: dict[str, Any]) -> str:
    return json.dumps(raw, indent=2)


def render_summary(result: AuditResult, raw: dict[str, Any]) -> str:
    return _summary_line(result)


REPORTERS: dict[str, Callable[[AuditResult, dict[str, Any]], str]] = {
    "detail": render_detail,
    "json": render_json,
    "summary": render_summary,
}


def render_report(raw: dict[str, Any], reporter: str = DEFAULT_REPORTER) -> RenderedReport:
    """Render the raw audit response with the named *reporter*.

    The exit code is 1 when any vulnerability was reported, otherwise 0.
    Raises ``ValueError`` for unknown reporter names.
    """
    render = REPORTERS.get(reporter)
    if render is None:
        raise ValueError(f"unknown reporter {reporter!r} (expected one of {sorted(REPORTERS)})")
    result = AuditResult.model_validate(raw)
    exit_code = 1 if result.metadata.vulnerabilities.total > 0 else 0
    return RenderedReport(report=render(result, raw), exit_code=exit_code)

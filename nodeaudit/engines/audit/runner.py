"""Audit runner — build the payload, send it, render the result."""

from __future__ import annotations

from pathlib import Path

import structlog

from nodeaudit.core.config import Settings
from nodeaudit.engines.audit.client import AuditClient
from nodeaudit.engines.audit.payload import build_audit_payload
from nodeaudit.engines.audit.report import DEFAULT_REPORTER, RenderedReport, render_report

log = structlog.get_logger("nodeaudit.audit")


async def run_audit(
    project_dir: Path,
    reporter: str = DEFAULT_REPORTER,
    settings: Settings | None = None,
    client: AuditClient | None = None,
) -> RenderedReport:
    """Audit the project at *project_dir* and return the rendered report.

    The dependency tree is built synchronously before any network I/O.
    Transport and rendering errors propagate unchanged.
    """
    settings = settings or Settings()
    payload = build_audit_payload(project_dir, settings)
    log.info(
        "audit.submit",
        project=payload["name"],
        packages=len(payload["dependencies"]),
        registry=settings.registry,
    )

    if client is None:
        async with AuditClient(settings) as owned:
            result = await owned.submit(payload)
    else:
        result = await client.submit(payload)

    return render_report(result, reporter)

"""Audit engine — payload assembly, registry transport and report rendering."""

from nodeaudit.engines.audit.client import AUDIT_API_PATH, AuditClient
from nodeaudit.engines.audit.payload import build_audit_payload
from nodeaudit.engines.audit.report import RenderedReport, render_report
from nodeaudit.engines.audit.runner import run_audit

__all__ = [
    "AUDIT_API_PATH",
    "AuditClient",
    "RenderedReport",
    "build_audit_payload",
    "render_report",
    "run_audit",
]

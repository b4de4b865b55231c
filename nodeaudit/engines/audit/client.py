"""Async client for the npm registry bulk audit endpoint, with retries."""

from __future__ import annotations

import asyncio
import gzip
import json
from typing import Any

import httpx
import structlog

from nodeaudit.core.config import Settings

log = structlog.get_logger("nodeaudit.audit")

AUDIT_API_PATH = "/-/npm/v1/security/audits"

AUDIT_HEADERS = {
    "Content-Encoding": "gzip",
    "Content-Type": "application/json",
}

_MAX_RETRIES = 3
_RETRY_BASE_DELAY = 1.0  # seconds


def compress_payload(payload: dict[str, Any]) -> bytes:
    """gzip the JSON encoding of *payload*."""
    return gzip.compress(json.dumps(payload).encode("utf-8"))


class AuditClient:
    """Thin async wrapper around the registry's audit API."""

    def __init__(self, settings: Settings | None = None) -> None:
        settings = settings or Settings()
        headers: dict[str, str] = {"Accept": "application/json"}
        if settings.token:
            headers["Authorization"] = f"Bearer {settings.token}"
        self._client = httpx.AsyncClient(
            base_url=settings.registry,
            headers=headers,
            timeout=settings.timeout,
        )

    # ── lifecycle ──────────────────────────────────────────────────────────

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> AuditClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()

    # ── public ─────────────────────────────────────────────────────────────

    async def submit(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Compress and POST *payload*, returning the parsed audit result."""
        body = await asyncio.to_thread(compress_payload, payload)
        response = await self._post_with_retry(AUDIT_API_PATH, body)
        return response.json()

    # ── internal ───────────────────────────────────────────────────────────

    async def _post_with_retry(self, url: str, body: bytes) -> httpx.Response:
        """POST with exponential backoff on 5xx and timeout errors."""
        last_exc: Exception | None = None
        for attempt in range(_MAX_RETRIES):
            try:
                resp = await self._client.post(url, content=body, headers=AUDIT_HEADERS)

                if resp.status_code < 500:
                    resp.raise_for_status()
                    return resp

                # 5xx — retry
                log.warning(
                    "audit.server_error",
                    url=url,
                    status=resp.status_code,
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_exc = httpx.HTTPStatusError(
                    f"{resp.status_code}", request=resp.request, response=resp
                )
            except httpx.TimeoutException as exc:
                log.warning(
                    "audit.timeout",
                    url=url,
                    attempt=attempt + 1,
                    max_retries=_MAX_RETRIES,
                )
                last_exc = exc

            if attempt < _MAX_RETRIES - 1:
                delay = _RETRY_BASE_DELAY * (2**attempt)
                await asyncio.sleep(delay)

        raise last_exc  # type: ignore[misc]

"""Runtime settings — constructor arguments win over environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_REGISTRY = "https://registry.npmjs.org"
DEFAULT_TIMEOUT = 30.0


def _env_float(key: str, default: float) -> float:
    raw = os.environ.get(key)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{key} must be a number, got {raw!r}") from None


def _node_path() -> list[Path]:
    raw = os.environ.get("NODE_PATH", "")
    return [Path(p) for p in raw.split(os.pathsep) if p]


@dataclass
class Settings:
    """Settings shared by the payload builder, the scanner and the audit client.

    Environment variables:
        NODEAUDIT_REGISTRY (or npm_config_registry) — registry base URL
        NODEAUDIT_TOKEN (or NPM_TOKEN)               — bearer token, optional
        NODEAUDIT_TIMEOUT                            — HTTP timeout in seconds
        NODEAUDIT_NODE_VERSION                       — reported node version
        NODE_PATH                                    — extra module lookup dirs
    """

    registry: str = field(
        default_factory=lambda: os.environ.get("NODEAUDIT_REGISTRY")
        or os.environ.get("npm_config_registry")
        or DEFAULT_REGISTRY
    )
    token: str | None = field(
        default_factory=lambda: os.environ.get("NODEAUDIT_TOKEN") or os.environ.get("NPM_TOKEN")
    )
    timeout: float = field(default_factory=lambda: _env_float("NODEAUDIT_TIMEOUT", DEFAULT_TIMEOUT))
    node_version: str | None = field(
        default_factory=lambda: os.environ.get("NODEAUDIT_NODE_VERSION")
    )
    node_path: list[Path] = field(default_factory=_node_path)

    def __post_init__(self) -> None:
        self.registry = self.registry.rstrip("/")

"""Response schemas for the registry audit result."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

SEVERITIES = ("info", "low", "moderate", "high", "critical")


class Finding(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: str | None = None
    paths: list[str] = Field(default_factory=list)


class Advisory(BaseModel):
    """One advisory affecting a module in the audited tree."""

    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    title: str = ""
    module_name: str = ""
    severity: str = "info"
    vulnerable_versions: str | None = None
    patched_versions: str | None = None
    recommendation: str | None = None
    url: str | None = None
    findings: list[Finding] = Field(default_factory=list)


class VulnerabilityCounts(BaseModel):
    model_config = ConfigDict(extra="allow")

    info: int = 0
    low: int = 0
    moderate: int = 0
    high: int = 0
    critical: int = 0

    @property
    def total(self) -> int:
        return sum(getattr(self, name) for name in SEVERITIES)


class AuditMetadata(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    vulnerabilities: VulnerabilityCounts = Field(default_factory=VulnerabilityCounts)
    dependencies: int = 0
    dev_dependencies: int = Field(0, alias="devDependencies")
    total_dependencies: int = Field(0, alias="totalDependencies")


class AuditResult(BaseModel):
    """Parsed body returned by the audit endpoint; unknown fields are kept."""

    model_config = ConfigDict(extra="allow")

    advisories: dict[str, Advisory] = Field(default_factory=dict)
    metadata: AuditMetadata = Field(default_factory=AuditMetadata)
    actions: list[dict] = Field(default_factory=list)

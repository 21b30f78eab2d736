"""
Analysis Request/Response Models — API contract schemas.

Wire names are camelCase to stay compatible with the dashboard and the
report renderer, which read `migrationStatus`, `downtimeRisk` etc. directly.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.resource_models import AnalyzedResource
from app.models.rule_models import Scenario, Severity


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProviderResourceType(_CamelModel):
    """One resource type of a provider registration, with its supported regions."""

    resource_type: str
    locations: list[str] = Field(default_factory=list)


class ProviderRegistration(_CamelModel):
    """Resource provider namespace and the types it publishes."""

    namespace: str
    resource_types: list[ProviderResourceType] = Field(default_factory=list)


class AnalyzeRequest(_CamelModel):
    """Request body for POST /api/analyze."""

    scenario: Scenario = Scenario.CROSS_TENANT
    resources: list[dict[str, Any]] = Field(
        default_factory=list, description="Raw inventory records"
    )
    target_region: str | None = Field(
        default=None, description="Destination region for cross-region moves"
    )
    providers: list[ProviderRegistration] | None = Field(
        default=None,
        description="Provider registrations used for the region capability check",
    )


class AnalysisSummary(_CamelModel):
    """Resource counts per verdict."""

    total: int = 0
    blockers: int = 0
    critical: int = 0
    warnings: int = 0
    info: int = 0
    ready: int = 0
    downtime_risks: int = 0

    @classmethod
    def from_results(cls, results: list[AnalyzedResource]) -> AnalysisSummary:
        def count(status: Severity) -> int:
            return sum(1 for r in results if r.migration_status is status)

        return cls(
            total=len(results),
            blockers=count(Severity.BLOCKER),
            critical=count(Severity.CRITICAL),
            warnings=count(Severity.WARNING),
            info=count(Severity.INFO),
            ready=count(Severity.READY),
            downtime_risks=sum(1 for r in results if r.has_downtime_risk),
        )


class AnalyzeResponse(_CamelModel):
    """Response for POST /api/analyze."""

    scenario: Scenario
    target_region: str | None = None
    summary: AnalysisSummary
    details: list[AnalyzedResource] = Field(default_factory=list)


class AuditEntry(BaseModel):
    """Audit metadata for one analysis run."""

    analysis_id: str
    scenario: str
    resources_analyzed: int
    blockers: int
    critical: int
    warnings: int
    target_region: str | None = None
    duration_ms: float = 0.0

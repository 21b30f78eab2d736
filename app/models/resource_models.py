"""
Resource Data Models — Inventory records, issues and per-resource verdicts.

ResourceRecord keeps a fixed set of identity fields and pushes everything
provider-specific (sku, identity, properties, tags, unknown keys) into an
open attribute map. Rule conditions are resolved against that map only.
"""

from __future__ import annotations

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from app.models.rule_models import Rule, Severity


class Issue(BaseModel):
    """One firing rule, copied onto the analyzed resource."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rule_id: str | None = Field(default=None, description="Originating rule, None when injected")
    severity: Severity
    message: str
    impact: str = ""
    remediation: str = Field(
        default="",
        validation_alias=AliasChoices("remediation", "workaround"),
        serialization_alias="remediation",
    )
    downtime_risk: bool = False
    reference_link: str | None = None

    @classmethod
    def from_rule(cls, rule: Rule) -> Issue:
        return cls(
            rule_id=rule.id,
            severity=rule.severity,
            message=rule.message,
            impact=rule.impact,
            remediation=rule.remediation,
            downtime_risk=rule.downtime_risk,
            reference_link=rule.reference_link,
        )


class ResourceRecord(BaseModel):
    """A single discovered cloud resource, as the inventory provider returns it."""

    model_config = ConfigDict(
        extra="allow",
        frozen=True,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    # ── Identity ──
    id: str | None = None
    name: str | None = None
    resource_type: str | None = Field(
        default=None, validation_alias=AliasChoices("type", "resourceType", "resource_type")
    )
    location: str | None = None
    resource_group: str | None = Field(
        default=None,
        validation_alias=AliasChoices("resourceGroup", "resourcegroup", "resource_group"),
    )
    subscription_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("subscriptionId", "subscriptionid", "subscription_id"),
    )
    subscription_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("subscriptionName", "subscriptionname", "subscription_name"),
    )

    # ── Open map (condition targets) ──
    kind: Any = None
    sku: Any = None
    identity: Any = None
    properties: Any = None
    tags: Any = None

    # Set by the region capability check, read-only to the analyzer
    injected_issue: Issue | None = Field(
        default=None, validation_alias=AliasChoices("injectedIssue", "injected_issue")
    )

    @property
    def attributes(self) -> dict[str, Any]:
        """Provider-specific attribute tree walked by rule conditions."""
        tree: dict[str, Any] = {
            "kind": self.kind,
            "sku": self.sku,
            "identity": self.identity,
            "properties": self.properties,
            "tags": self.tags,
        }
        tree.update(self.model_extra or {})
        return {key: value for key, value in tree.items() if value is not None}


class AnalyzedResource(BaseModel):
    """Per-resource verdict for one scenario."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    name: str
    type: str
    resource_group: str
    location: str
    subscription_id: str
    subscription_name: str
    migration_status: Severity
    issues: list[Issue] = Field(default_factory=list)

    @property
    def has_downtime_risk(self) -> bool:
        return any(issue.downtime_risk for issue in self.issues)

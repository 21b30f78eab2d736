"""
Rule Data Models — Scenarios, severities, conditions and declarative rules.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Scenario(str, Enum):
    CROSS_TENANT = "cross-tenant"
    CROSS_SUBSCRIPTION = "cross-subscription"
    CROSS_RESOURCE_GROUP = "cross-resourcegroup"
    CROSS_REGION = "cross-region"

    @property
    def inherits(self) -> tuple[Scenario, ...]:
        """Scenarios whose rules also apply to this one."""
        if self is Scenario.CROSS_RESOURCE_GROUP:
            return (Scenario.CROSS_SUBSCRIPTION,)
        return ()

    def applies(self, rule_scenario: Scenario) -> bool:
        return rule_scenario is self or rule_scenario in self.inherits


class Severity(str, Enum):
    """
    Migration severity, declared most severe first.

    Declaration order is the total order: comparisons and rank are
    derived from it, so adding a member cannot drift out of sync.
    """

    BLOCKER = "Blocker"
    CRITICAL = "Critical"
    WARNING = "Warning"
    INFO = "Info"
    READY = "Ready"

    @property
    def rank(self) -> int:
        """Higher rank = more severe. Ready is 0."""
        members = list(type(self))
        return len(members) - 1 - members.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank >= other.rank

    @classmethod
    def worst(cls, severities: Iterable[Severity]) -> Severity:
        return max(severities, default=cls.READY)


class ConditionOperator(str, Enum):
    EQUALS = "equals"
    NOT_EQUALS = "not-equals"
    CONTAINS = "contains"
    NON_EMPTY = "non-empty"

    @classmethod
    def _missing_(cls, value: object) -> ConditionOperator | None:
        # Spellings used by older rule files
        legacy = {"eq": cls.EQUALS, "neq": cls.NOT_EQUALS, "notempty": cls.NON_EMPTY}
        if isinstance(value, str):
            return legacy.get(value.lower())
        return None


class RuleCondition(BaseModel):
    """Optional gate on a dotted attribute path of the resource."""

    model_config = ConfigDict(frozen=True)

    field: str = Field(..., min_length=1, description="Dotted path, e.g. 'sku.name'")
    operator: ConditionOperator
    value: Any = None


class Rule(BaseModel):
    """A declarative (type pattern, scenario, condition) → severity mapping."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: str = Field(..., min_length=1)
    resource_type: str = Field(..., min_length=1, description="Type or '*' / 'ns/type/*' pattern")
    scenario: Scenario
    condition: RuleCondition | None = None
    severity: Severity
    message: str
    impact: str = ""
    remediation: str = Field(
        default="",
        validation_alias=AliasChoices("remediation", "workaround"),
        serialization_alias="remediation",
    )
    downtime_risk: bool = False
    reference_link: str | None = Field(
        default=None,
        validation_alias=AliasChoices("referenceLink", "reference_link", "refLink"),
        serialization_alias="referenceLink",
    )

    @field_validator("severity")
    @classmethod
    def _not_ready(cls, value: Severity) -> Severity:
        if value is Severity.READY:
            raise ValueError("a rule cannot carry the 'Ready' severity")
        return value

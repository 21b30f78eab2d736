"""
Resource Analyzer — Applies the rule corpus to one resource.

Every firing rule becomes an Issue (corpus order, no dedup) and the
verdict is the worst severity found, or Ready. Missing identity fields
fall back to placeholders; a plausible record never makes this raise.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from app.core.rule_loader import RuleCorpus
from app.core.rule_matcher import matches
from app.models.resource_models import AnalyzedResource, Issue, ResourceRecord
from app.models.rule_models import Scenario, Severity

logger = logging.getLogger("moveready.analyzer")

UNKNOWN_ID = "unknown-id"
UNKNOWN_NAME = "Unknown Resource"
UNKNOWN_TYPE = "unknown/type"
UNKNOWN_LOCATION = "unknown"
UNKNOWN_SUBSCRIPTION = "unknown-sub-id"
NO_RESOURCE_GROUP = "No Resource Group"


class ResourceAnalyzer:
    """
    Stateless analyzer bound to one immutable corpus.

    Safe to share across requests: the only state is the corpus itself.
    """

    def __init__(self, corpus: RuleCorpus) -> None:
        self.corpus = corpus

    def analyze(
        self,
        record: ResourceRecord | Mapping[str, Any],
        scenario: Scenario,
    ) -> AnalyzedResource:
        """
        Analyze one resource for one scenario.

        Args:
            record: A ResourceRecord or the raw inventory mapping.
            scenario: Requested migration scenario.

        Returns:
            AnalyzedResource with issues in corpus order and the verdict.
        """
        if not isinstance(record, ResourceRecord):
            record = ResourceRecord.model_validate(record)

        issues = [
            Issue.from_rule(rule)
            for rule in self.corpus
            if matches(record, rule, scenario)
        ]
        if record.injected_issue is not None:
            issues.insert(0, record.injected_issue.model_copy())

        subscription_id = record.subscription_id or UNKNOWN_SUBSCRIPTION

        return AnalyzedResource(
            id=record.id or UNKNOWN_ID,
            name=record.name or UNKNOWN_NAME,
            type=record.resource_type or UNKNOWN_TYPE,
            resource_group=record.resource_group or NO_RESOURCE_GROUP,
            location=record.location or UNKNOWN_LOCATION,
            subscription_id=subscription_id,
            subscription_name=record.subscription_name or subscription_id,
            migration_status=worst_severity(issues),
            issues=issues,
        )

    def analyze_many(
        self,
        records: Iterable[ResourceRecord | Mapping[str, Any]],
        scenario: Scenario,
    ) -> list[AnalyzedResource]:
        """Analyze a batch, preserving input order."""
        results = [self.analyze(record, scenario) for record in records]
        logger.debug(f"Analyzed {len(results)} resources for {scenario.value}")
        return results


def worst_severity(issues: Iterable[Issue]) -> Severity:
    """Highest-wins reduction; Ready when there are no issues."""
    return Severity.worst(issue.severity for issue in issues)


def sort_by_severity(results: Iterable[AnalyzedResource]) -> list[AnalyzedResource]:
    """Most severe first; stable for equal verdicts."""
    return sorted(results, key=lambda r: r.migration_status.rank, reverse=True)

"""
Rule Corpus Loader — Builds the immutable rule corpus from static rule files.

Sources are concatenated in the order given. Shape problems are
configuration defects and fail the load; nothing is repaired silently.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from pydantic import ValidationError

from app.config import settings
from app.models.rule_models import Rule, Scenario

logger = logging.getLogger("moveready.rules")

PACKAGED_RULES_DIR = Path(__file__).resolve().parent.parent / "rules"

# Merge order of the packaged files: tenant, resource group, subscription, region
DEFAULT_RULE_FILES: tuple[str, ...] = (
    "rules-tenant.json",
    "rules-rg.json",
    "rules-sub.json",
    "rules-region.json",
)

RuleSource = tuple[str, Iterable[Mapping[str, Any]]]


class RuleCorpusError(ValueError):
    """Raised when a rule source cannot be turned into a valid corpus."""


@dataclass(frozen=True)
class RuleCorpus:
    """Ordered, read-only collection of rules plus the source of each rule."""

    rules: tuple[Rule, ...] = ()
    origins: Mapping[str, str] = field(default_factory=dict)

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def __len__(self) -> int:
        return len(self.rules)

    def get(self, rule_id: str) -> Rule | None:
        for rule in self.rules:
            if rule.id == rule_id:
                return rule
        return None

    def source_of(self, rule_id: str) -> str:
        return self.origins.get(rule_id, "")

    def for_scenario(self, scenario: Scenario) -> list[Rule]:
        """Rules that can fire for `scenario`, inherited ones included."""
        return [rule for rule in self.rules if scenario.applies(rule.scenario)]


def load_corpus(sources: Sequence[RuleSource]) -> RuleCorpus:
    """
    Validate and concatenate rule sources into a RuleCorpus.

    Args:
        sources: (source_name, raw rule mappings) pairs, in merge order.

    Raises:
        RuleCorpusError: invalid rule shape, bad type pattern or duplicate id.
    """
    rules: list[Rule] = []
    origins: dict[str, str] = {}

    for source_name, raw_rules in sources:
        count = 0
        for index, raw in enumerate(raw_rules):
            try:
                rule = Rule.model_validate(raw)
            except ValidationError as e:
                raise RuleCorpusError(
                    f"{source_name}[{index}]: invalid rule: {e}"
                ) from e

            _check_pattern(source_name, index, rule.resource_type)

            if rule.id in origins:
                raise RuleCorpusError(
                    f"{source_name}[{index}]: duplicate rule id '{rule.id}' "
                    f"(first defined in {origins[rule.id]})"
                )

            rules.append(rule)
            origins[rule.id] = source_name
            count += 1

        logger.info(f"Loaded {count} rules from {source_name}")

    return RuleCorpus(rules=tuple(rules), origins=MappingProxyType(origins))


def load_corpus_from_dir(
    rules_dir: str | Path,
    file_names: Sequence[str] = DEFAULT_RULE_FILES,
) -> RuleCorpus:
    """Load JSON rule files (each a list of rules) from `rules_dir`."""
    base = Path(rules_dir)
    sources: list[RuleSource] = []

    for name in file_names:
        path = base / name
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise RuleCorpusError(f"Rule file not found: {path}") from e
        except json.JSONDecodeError as e:
            raise RuleCorpusError(f"Rule file {path} is not valid JSON: {e}") from e

        if not isinstance(data, list):
            raise RuleCorpusError(f"Rule file {path} must contain a JSON array")
        sources.append((name, data))

    return load_corpus(sources)


def load_default_corpus() -> RuleCorpus:
    """Load the rule files from the configured rules directory."""
    return load_corpus_from_dir(settings.rules_dir or PACKAGED_RULES_DIR)


def _check_pattern(source_name: str, index: int, pattern: str) -> None:
    if pattern == "*":
        return
    body = pattern[:-2] if pattern.endswith("/*") else pattern
    if "*" in body or not body:
        raise RuleCorpusError(
            f"{source_name}[{index}]: unsupported resource type pattern '{pattern}'"
        )

"""
Rules Route — GET /api/rules

Read-only view of the loaded corpus, optionally narrowed to a scenario.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_rule_corpus
from app.core.rule_loader import RuleCorpus
from app.models.rule_models import Rule, Scenario

router = APIRouter(prefix="/api")


@router.get("/rules", response_model=list[Rule])
async def list_rules(
    scenario: Scenario | None = None,
    corpus: RuleCorpus = Depends(get_rule_corpus),
):
    """Rules in corpus order; with `scenario`, inherited rules are included."""
    if scenario is None:
        return list(corpus)
    return corpus.for_scenario(scenario)

"""
Health Check Route — GET /health
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.api.dependencies import get_rule_corpus
from app.core.rule_loader import RuleCorpus

router = APIRouter()

VERSION = "1.0.0"


@router.get("/health")
async def health(corpus: RuleCorpus = Depends(get_rule_corpus)):
    """Liveness plus the size of the loaded rule corpus."""
    return {
        "status": "ok",
        "version": VERSION,
        "rules": len(corpus),
    }

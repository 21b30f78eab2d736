"""
Audit Route — GET /api/admin/audit

Recent analysis runs from the JSON-lines audit trail.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import get_audit_logger
from app.audit.logger import AuditLogger
from app.models.rule_models import Scenario

router = APIRouter(prefix="/api/admin")


@router.get("/audit")
async def recent_analyses(
    count: int = Query(50, ge=1, le=1000),
    scenario: Scenario | None = None,
    audit: AuditLogger = Depends(get_audit_logger),
) -> list[dict]:
    """Newest entries last, as written."""
    return audit.read_recent(count, scenario)

"""
Diagnostics Route — GET /api/admin/run-test

Runs the conformance harness: matrix replay plus reference-link health.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from app.api.dependencies import get_conformance_harness
from app.core.conformance import ConformanceHarness
from app.models.diagnostics_models import DiagnosticsReport

logger = logging.getLogger("moveready.api.diagnostics")

router = APIRouter(prefix="/api/admin")


@router.get("/run-test", response_model=DiagnosticsReport)
async def run_test(harness: ConformanceHarness = Depends(get_conformance_harness)):
    """Operator-triggered diagnostics run; runs to completion."""
    try:
        report = await harness.run()
    except Exception as e:
        logger.exception("Diagnostics run failed")
        raise HTTPException(status_code=500, detail=str(e))

    logger.info(
        f"Diagnostics: logic {report.logic.passed}/{report.logic.total} passed, "
        f"links {report.links.broken}/{report.links.checked} broken"
    )
    return report

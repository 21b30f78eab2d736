"""
Analyze Route — POST /api/analyze

Takes raw inventory records for one scenario, optionally runs the region
capability check, and returns per-resource verdicts plus a summary.
"""

from __future__ import annotations

import logging
import time

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from app.api.dependencies import get_analyzer, get_audit_logger
from app.audit.logger import AuditLogger
from app.core.analyzer import ResourceAnalyzer
from app.core.region_check import build_capability_map, inject_region_issues
from app.models.analysis_models import AnalysisSummary, AnalyzeRequest, AnalyzeResponse
from app.models.resource_models import ResourceRecord
from app.models.rule_models import Scenario

logger = logging.getLogger("moveready.api.analyze")

router = APIRouter(prefix="/api")


@router.post("/analyze", response_model=AnalyzeResponse)
async def analyze(
    request: AnalyzeRequest,
    analyzer: ResourceAnalyzer = Depends(get_analyzer),
    audit: AuditLogger = Depends(get_audit_logger),
):
    """Analyze a resource inventory for migration readiness."""
    if not request.resources:
        raise HTTPException(status_code=400, detail="No resources supplied.")

    start = time.monotonic()

    try:
        records = [ResourceRecord.model_validate(raw) for raw in request.resources]
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        if (
            request.scenario is Scenario.CROSS_REGION
            and request.target_region
            and request.providers
        ):
            capability_map = build_capability_map(request.providers)
            records = inject_region_issues(records, capability_map, request.target_region)

        details = analyzer.analyze_many(records, request.scenario)
    except Exception as e:
        logger.exception("Analysis failed")
        raise HTTPException(status_code=500, detail=str(e))

    summary = AnalysisSummary.from_results(details)
    elapsed = (time.monotonic() - start) * 1000

    logger.info(
        f"{request.scenario.value}: {summary.total} resources, "
        f"{summary.blockers} blockers, {summary.critical} critical ({elapsed:.1f}ms)"
    )
    audit.record_analysis(request.scenario, summary, elapsed, request.target_region)

    return AnalyzeResponse(
        scenario=request.scenario,
        target_region=request.target_region,
        summary=summary,
        details=details,
    )

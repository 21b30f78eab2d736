"""
Audit Logger — JSON-lines trail of analysis runs.

One line per /api/analyze call: which scenario ran, over how many
resources, and how the verdicts came out. Writing is best-effort; an
unwritable log never fails the analysis.
"""

from __future__ import annotations

import json
import logging
import uuid
from datetime import datetime, timezone
from pathlib import Path

from app.config import settings
from app.models.analysis_models import AnalysisSummary, AuditEntry
from app.models.rule_models import Scenario

logger = logging.getLogger("moveready.audit")


class AuditLogger:
    """Appends AuditEntry records to a JSON-lines file."""

    def __init__(self, log_path: str | Path | None = None) -> None:
        self.log_path = Path(log_path or settings.audit_log_path)

    def record_analysis(
        self,
        scenario: Scenario,
        summary: AnalysisSummary,
        duration_ms: float,
        target_region: str | None = None,
    ) -> AuditEntry:
        """Build the entry for one analysis run and append it."""
        entry = AuditEntry(
            analysis_id=uuid.uuid4().hex[:8],
            scenario=scenario.value,
            resources_analyzed=summary.total,
            blockers=summary.blockers,
            critical=summary.critical,
            warnings=summary.warnings,
            target_region=target_region,
            duration_ms=round(duration_ms, 2),
        )
        self.append(entry)
        return entry

    def append(self, entry: AuditEntry) -> None:
        line = json.dumps(
            {"timestamp": datetime.now(timezone.utc).isoformat(), **entry.model_dump()}
        )
        try:
            with open(self.log_path, "a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            logger.error(f"Audit write to {self.log_path} failed: {e}")

    def read_recent(self, count: int = 50, scenario: Scenario | None = None) -> list[dict]:
        """Last `count` entries, optionally for one scenario only."""
        try:
            lines = self.log_path.read_text(encoding="utf-8").splitlines()
        except OSError:
            return []

        entries: list[dict] = []
        for line in lines:
            if not line.strip():
                continue
            try:
                entry = json.loads(line)
            except json.JSONDecodeError:
                logger.debug(f"Skipping unreadable audit line: {line[:80]}")
                continue
            if scenario is None or entry.get("scenario") == scenario.value:
                entries.append(entry)

        return entries[-count:]

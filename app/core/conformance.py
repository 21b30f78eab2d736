"""
Conformance Harness — Replays the reference move-support matrix through the
analyzer and checks every rule reference link.

Matrix format (semicolon separated, header row first):
    provider;resourceType;resourceGroupMove;subscriptionMove;regionMove[;docLink]

Each row becomes one synthetic resource per scenario. The resource only
carries the type plus flags sniffed from that scenario's cell text
("standard" -> sku.name, "incremental" -> properties.incremental,
"running" -> properties.jobState). This is a rough bridge from free text
to rule conditions, not an oracle; matrix rows whose blocking depends on
any other property will show up as failures.

A cell reading "No..." or "Pending" expects the move to be blocked. A
"Yes" cell that the engine blocks anyway counts as a pass: over-blocking
is accepted, under-blocking is not.
"""

from __future__ import annotations

import asyncio
import csv
import io
import logging
from dataclasses import dataclass
from pathlib import Path

import httpx

from app.core.analyzer import ResourceAnalyzer
from app.core.rule_loader import RuleCorpus
from app.models.diagnostics_models import (
    BrokenLink,
    DiagnosticsReport,
    LinkResult,
    LogicFailure,
    LogicResult,
)
from app.models.resource_models import ResourceRecord
from app.models.rule_models import Scenario, Severity

logger = logging.getLogger("moveready.conformance")

DEFAULT_CHUNK_SIZE = 20
DEFAULT_TIMEOUT = 5.0
MIN_COLUMNS = 5
TRANSPORT_ERROR = "ERR"


@dataclass(frozen=True)
class MatrixRow:
    """One resource type of the reference matrix."""

    row: int
    provider: str
    resource_type: str
    resource_group_move: str
    subscription_move: str
    region_move: str
    doc_link: str = ""

    @property
    def resource(self) -> str:
        return f"{self.provider}/{self.resource_type}"


@dataclass(frozen=True)
class ScenarioCheck:
    """How a matrix column maps onto an analyzer verdict."""

    scenario: Scenario
    label: str
    column: str
    accepted: frozenset[Severity]
    expected_label: str


SCENARIO_CHECKS: tuple[ScenarioCheck, ...] = (
    ScenarioCheck(
        scenario=Scenario.CROSS_RESOURCE_GROUP,
        label="ResourceGroup",
        column="resource_group_move",
        accepted=frozenset({Severity.BLOCKER}),
        expected_label="Blocker",
    ),
    ScenarioCheck(
        scenario=Scenario.CROSS_SUBSCRIPTION,
        label="Subscription",
        column="subscription_move",
        accepted=frozenset({Severity.BLOCKER}),
        expected_label="Blocker",
    ),
    # Region moves always have a redeploy path, so "No" means Critical/Warning
    ScenarioCheck(
        scenario=Scenario.CROSS_REGION,
        label="Region",
        column="region_move",
        accepted=frozenset({Severity.CRITICAL, Severity.WARNING}),
        expected_label="Critical/Warning",
    ),
)


# ── Matrix parsing ──


def parse_matrix(text: str) -> list[MatrixRow]:
    """Parse matrix text; the first line is a header, short rows are skipped."""
    rows: list[MatrixRow] = []
    reader = csv.reader(io.StringIO(text), delimiter=";")

    for cols in reader:
        line_no = reader.line_num
        if line_no == 1 or len(cols) < MIN_COLUMNS:
            continue
        cols = [c.strip() for c in cols]
        rows.append(
            MatrixRow(
                row=line_no,
                provider=cols[0],
                resource_type=cols[1],
                resource_group_move=cols[2],
                subscription_move=cols[3],
                region_move=cols[4],
                doc_link=cols[5] if len(cols) > 5 else "",
            )
        )

    return rows


def read_matrix(path: str | Path) -> list[MatrixRow] | None:
    """Read the matrix file; None when it does not exist."""
    path = Path(path)
    if not path.is_file():
        return None
    return parse_matrix(path.read_text(encoding="utf-8-sig"))


def expects_block(cell: str) -> bool:
    text = cell.strip().lower()
    return text.startswith("no") or text == "pending"


def create_mock_resource(provider: str, resource_type: str, notes: str) -> ResourceRecord:
    """Synthesize a minimal record, seeding condition targets from `notes`."""
    notes = notes.lower()
    sku: dict[str, object] = {}
    properties: dict[str, object] = {}

    if "standard" in notes:
        sku["name"] = "Standard"
    if "incremental" in notes:
        properties["incremental"] = True
    if "running" in notes:
        properties["jobState"] = "Running"

    return ResourceRecord(
        id=(
            "/subscriptions/00000000-0000-0000-0000-000000000000/resourceGroups/test-rg"
            f"/providers/{provider}/{resource_type}/test-res"
        ),
        name="test-resource",
        resource_type=f"{provider}/{resource_type}",
        resource_group="test-rg",
        location="westeurope",
        sku=sku,
        properties=properties,
    )


# ── Harness ──


class ConformanceHarness:
    """Runs the logic-conformance and link-health checks for a corpus."""

    def __init__(
        self,
        corpus: RuleCorpus,
        matrix_path: str | Path | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.corpus = corpus
        self.analyzer = ResourceAnalyzer(corpus)
        self.matrix_path = Path(matrix_path) if matrix_path else None
        self.timeout = timeout
        self.chunk_size = max(1, chunk_size)
        self.transport = transport

    async def run(self) -> DiagnosticsReport:
        """Both sections; a missing matrix only empties the logic section."""
        logic = await asyncio.to_thread(self.check_logic)
        links = await self.check_links()
        return DiagnosticsReport(logic=logic, links=links)

    # ── Logic conformance ──

    def check_logic(self) -> LogicResult:
        rows = read_matrix(self.matrix_path) if self.matrix_path else None
        if rows is None:
            logger.warning(f"Reference matrix not found at {self.matrix_path}; skipping logic checks")
            return LogicResult(matrix_found=False)
        return self.check_rows(rows)

    def check_rows(self, rows: list[MatrixRow]) -> LogicResult:
        result = LogicResult()

        for row in rows:
            for check in SCENARIO_CHECKS:
                failure = self._check_row(row, check)
                result.total += 1
                if failure is None:
                    result.passed += 1
                else:
                    result.failed += 1
                    result.failures.append(failure)
                    logger.warning(
                        f"[FAIL {failure.scenario}] row {failure.row} {failure.resource}: "
                        f"expected {failure.expected}, got {failure.got}"
                    )

        logger.info(f"Logic conformance: {result.passed}/{result.total} passed")
        return result

    def _check_row(self, row: MatrixRow, check: ScenarioCheck) -> LogicFailure | None:
        cell = getattr(row, check.column)
        mock = create_mock_resource(row.provider, row.resource_type, cell)
        verdict = self.analyzer.analyze(mock, check.scenario).migration_status

        if expects_block(cell) and verdict not in check.accepted:
            return LogicFailure(
                row=row.row,
                resource=row.resource,
                scenario=check.label,
                expected=check.expected_label,
                got=verdict.value,
                doc_link=row.doc_link or None,
            )
        return None

    # ── Link health ──

    def collect_links(self) -> list[tuple[str, str, str]]:
        """(url, source file, rule id) for every http(s) reference link."""
        return [
            (rule.reference_link, self.corpus.source_of(rule.id), rule.id)
            for rule in self.corpus
            if rule.reference_link and rule.reference_link.startswith("http")
        ]

    async def check_links(self) -> LinkResult:
        links = self.collect_links()
        result = LinkResult()

        async with httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
            transport=self.transport,
        ) as client:
            for start in range(0, len(links), self.chunk_size):
                chunk = links[start : start + self.chunk_size]
                statuses = await asyncio.gather(
                    *(check_url(client, url) for url, _, _ in chunk)
                )
                for (url, file, rule_id), (valid, status) in zip(chunk, statuses):
                    result.checked += 1
                    if not valid:
                        result.broken += 1
                        result.details.append(
                            BrokenLink(file=file, rule_id=rule_id, url=url, status=status)
                        )
                        logger.warning(f"Broken link in {file} ({rule_id}): {url} [{status}]")

        logger.info(f"Link health: {result.broken}/{result.checked} broken")
        return result


async def check_url(client: httpx.AsyncClient, url: str) -> tuple[bool, int | str]:
    """
    HEAD, then a single GET fallback. Returns (valid, status or 'ERR').

    ValueError covers URLs httpx cannot build a request for (IDNA errors
    on malformed hosts surface as UnicodeError).
    """
    try:
        response = await client.head(url)
        if response.status_code < 400:
            return True, response.status_code
    except (httpx.HTTPError, httpx.InvalidURL, ValueError):
        pass

    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL, ValueError):
        return False, TRANSPORT_ERROR

    return response.status_code < 400, response.status_code

"""
Tests for the Conformance Harness — matrix replay and link health.
"""

import asyncio
from pathlib import Path

import httpx

from app.core.conformance import (
    ConformanceHarness,
    create_mock_resource,
    expects_block,
    parse_matrix,
)
from app.core.rule_loader import load_corpus

HEADER = "Provider;Resource Type;Resource Group Move;Subscription Move;Region Move;Documentation\n"
REPO_MATRIX = Path(__file__).resolve().parents[1] / "azure-move-matrix.csv"


def _sql_corpus(region_severity="Critical"):
    return load_corpus([
        ("rules-sub.json", [{
            "id": "S-SQL",
            "resourceType": "microsoft.sql/servers",
            "scenario": "cross-subscription",
            "severity": "Blocker",
            "message": "cannot move",
        }]),
        ("rules-region.json", [{
            "id": "R-SQL",
            "resourceType": "microsoft.sql/servers",
            "scenario": "cross-region",
            "severity": region_severity,
            "message": "redeploy",
        }]),
    ])


def _write(tmp_path, body):
    path = tmp_path / "matrix.csv"
    path.write_text(HEADER + body)
    return path


# ── Matrix parsing & mocks ──


def test_parse_matrix_skips_header_and_short_rows():
    rows = parse_matrix(HEADER + "Microsoft.Sql;servers;No;No;No\nbad;row\n\nMicrosoft.Web;sites;Yes;Yes;No;https://x\n")
    assert [r.resource for r in rows] == ["Microsoft.Sql/servers", "Microsoft.Web/sites"]
    assert rows[0].row == 2
    assert rows[1].row == 5
    assert rows[1].doc_link == "https://x"


def test_expects_block():
    assert expects_block("No")
    assert expects_block("No - Standard SKU")
    assert expects_block("Pending")
    assert not expects_block("Yes")
    assert not expects_block("Pending review")


def test_mock_resource_keyword_flags():
    mock = create_mock_resource("Microsoft.Compute", "snapshots", "No - Incremental, while Running, Standard")
    assert mock.resource_type == "Microsoft.Compute/snapshots"
    assert mock.sku == {"name": "Standard"}
    assert mock.properties == {"incremental": True, "jobState": "Running"}

    plain = create_mock_resource("Microsoft.Compute", "disks", "No - Basic SKU")
    assert plain.sku == {}
    assert plain.properties == {}


# ── Logic conformance ──


def test_sql_row_passes_when_engine_blocks(tmp_path):
    harness = ConformanceHarness(_sql_corpus(), _write(tmp_path, "Microsoft.Sql;servers;No;No;No\n"))
    result = harness.check_logic()
    assert result.total == 3
    assert result.passed == 3
    assert result.failed == 0


def test_sql_row_failures_carry_row_and_labels(tmp_path):
    corpus = _sql_corpus(region_severity="Info")
    matrix = _write(tmp_path, "Microsoft.Web;sites;Yes;Yes;Yes\nMicrosoft.Sql;servers;No;No;No\n")
    result = ConformanceHarness(corpus, matrix).check_logic()

    assert result.total == 6
    assert result.failed == 1
    failure = result.failures[0]
    assert failure.row == 3
    assert failure.resource == "Microsoft.Sql/servers"
    assert failure.scenario == "Region"
    assert failure.expected == "Critical/Warning"
    assert failure.got == "Info"


def test_missing_blocker_is_failure(tmp_path):
    corpus = load_corpus([])
    result = ConformanceHarness(corpus, _write(tmp_path, "Microsoft.Sql;servers;No;Yes;Yes\n")).check_logic()
    assert result.failed == 1
    assert result.failures[0].scenario == "ResourceGroup"
    assert result.failures[0].expected == "Blocker"
    assert result.failures[0].got == "Ready"


def test_failure_carries_documentation_link(tmp_path):
    matrix = _write(tmp_path, "Microsoft.Sql;servers;No;Yes;Yes;https://learn.example.com/sql\n")
    result = ConformanceHarness(load_corpus([]), matrix).check_logic()
    assert result.failures[0].doc_link == "https://learn.example.com/sql"
    assert result.failures[0].model_dump(by_alias=True)["docLink"] == "https://learn.example.com/sql"


def test_failure_without_documentation_column(tmp_path):
    result = ConformanceHarness(load_corpus([]), _write(tmp_path, "Microsoft.Sql;servers;No;Yes;Yes\n")).check_logic()
    assert result.failures[0].doc_link is None


def test_over_blocking_is_not_flagged(tmp_path):
    matrix = _write(tmp_path, "Microsoft.Sql;servers;Yes;Yes;Yes\n")
    result = ConformanceHarness(_sql_corpus(), matrix).check_logic()
    assert result.failed == 0
    assert result.passed == 3


def test_missing_matrix_skips_logic(tmp_path):
    harness = ConformanceHarness(_sql_corpus(), tmp_path / "nope.csv")
    result = harness.check_logic()
    assert result.matrix_found is False
    assert result.total == 0


def test_packaged_matrix_agrees_with_packaged_rules(default_corpus):
    result = ConformanceHarness(default_corpus, REPO_MATRIX).check_logic()
    assert result.matrix_found
    assert result.total > 0
    assert result.failures == []


# ── Link health ──


def _link_corpus():
    return load_corpus([
        ("rules-a.json", [
            {"id": "OK", "resourceType": "*", "scenario": "cross-tenant", "severity": "Info",
             "message": "m", "referenceLink": "https://docs.example.com/ok"},
            {"id": "HEAD-405", "resourceType": "*", "scenario": "cross-tenant", "severity": "Info",
             "message": "m", "referenceLink": "https://docs.example.com/no-head"},
            {"id": "NO-LINK", "resourceType": "*", "scenario": "cross-tenant", "severity": "Info",
             "message": "m"},
        ]),
        ("rules-b.json", [
            {"id": "GONE", "resourceType": "*", "scenario": "cross-region", "severity": "Info",
             "message": "m", "referenceLink": "https://docs.example.com/gone"},
            {"id": "DOWN", "resourceType": "*", "scenario": "cross-region", "severity": "Info",
             "message": "m", "referenceLink": "https://down.example.com/"},
            {"id": "NOT-HTTP", "resourceType": "*", "scenario": "cross-region", "severity": "Info",
             "message": "m", "referenceLink": "mailto:team@example.com"},
        ]),
    ])


def _handler(calls):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append((request.method, str(request.url)))
        if request.url.host == "down.example.com":
            raise httpx.ConnectError("unreachable", request=request)
        if request.url.path == "/ok":
            return httpx.Response(200)
        if request.url.path == "/no-head":
            return httpx.Response(405 if request.method == "HEAD" else 200)
        return httpx.Response(404)

    return handler


def test_link_check_head_then_get(tmp_path):
    calls = []
    harness = ConformanceHarness(
        _link_corpus(),
        tmp_path / "absent.csv",
        chunk_size=2,
        transport=httpx.MockTransport(_handler(calls)),
    )
    result = asyncio.run(harness.check_links())

    assert result.checked == 4
    assert result.broken == 2
    broken = {d.rule_id: d for d in result.details}
    assert broken["GONE"].status == 404
    assert broken["GONE"].file == "rules-b.json"
    assert broken["DOWN"].status == "ERR"

    methods = [m for m, url in calls if url.endswith("/ok")]
    assert methods == ["HEAD"]
    methods = [m for m, url in calls if url.endswith("/no-head")]
    assert methods == ["HEAD", "GET"]
    assert not any("mailto" in url for _, url in calls)


def test_run_returns_both_sections(tmp_path):
    harness = ConformanceHarness(
        _link_corpus(),
        tmp_path / "absent.csv",
        transport=httpx.MockTransport(_handler([])),
    )
    report = asyncio.run(harness.run())
    assert report.logic.matrix_found is False
    assert report.links.checked == 4

    data = report.model_dump(by_alias=True)
    assert set(data) == {"logic", "links"}
    assert "ruleId" in data["links"]["details"][0]


def _links_corpus(*urls):
    return load_corpus([
        ("rules-links.json", [
            {"id": f"L{i}", "resourceType": "*", "scenario": "cross-tenant", "severity": "Info",
             "message": "m", "referenceLink": url}
            for i, url in enumerate(urls)
        ]),
    ])


def test_malformed_host_is_recorded_not_raised(tmp_path):
    corpus = _links_corpus("https://xn--/", "https://docs.example.com/ok")
    matrix = _write(tmp_path, "Microsoft.Sql;servers;Yes;Yes;Yes\n")
    harness = ConformanceHarness(
        corpus, matrix, transport=httpx.MockTransport(lambda request: httpx.Response(200))
    )
    report = asyncio.run(harness.run())

    assert report.logic.total == 3
    assert report.links.checked == 2
    assert report.links.broken == 1
    assert report.links.details[0].url == "https://xn--/"
    assert report.links.details[0].status == "ERR"


def test_at_most_chunk_size_requests_in_flight(tmp_path):
    in_flight = 0
    peak = 0

    async def handler(request: httpx.Request) -> httpx.Response:
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return httpx.Response(200)

    corpus = _links_corpus(*(f"https://docs.example.com/{i}" for i in range(7)))
    harness = ConformanceHarness(
        corpus, tmp_path / "absent.csv", chunk_size=3, transport=httpx.MockTransport(handler)
    )
    result = asyncio.run(harness.check_links())

    assert result.checked == 7
    assert result.broken == 0
    assert peak == 3

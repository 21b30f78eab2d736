"""
FastAPI Dependencies — Shared singletons injected via Depends().

The corpus is loaded once per process; everything built on it is read-only.
"""

from __future__ import annotations

from functools import lru_cache

from app.audit.logger import AuditLogger
from app.config import settings
from app.core.analyzer import ResourceAnalyzer
from app.core.conformance import ConformanceHarness
from app.core.rule_loader import RuleCorpus, load_default_corpus


@lru_cache
def get_rule_corpus() -> RuleCorpus:
    """Shared rule corpus, loaded from the configured rules directory."""
    return load_default_corpus()


@lru_cache
def get_analyzer() -> ResourceAnalyzer:
    """Shared analyzer bound to the corpus."""
    return ResourceAnalyzer(get_rule_corpus())


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Shared audit logger singleton."""
    return AuditLogger()


def get_conformance_harness() -> ConformanceHarness:
    """A fresh harness per diagnostics run, reading the matrix from settings."""
    return ConformanceHarness(
        get_rule_corpus(),
        settings.matrix_csv_path,
        timeout=settings.link_check_timeout,
        chunk_size=settings.link_check_chunk_size,
    )

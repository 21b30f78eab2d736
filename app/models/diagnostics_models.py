"""
Diagnostics Data Models — Logic conformance and link health results.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LogicFailure(_CamelModel):
    """A matrix row whose expectation the engine did not meet."""

    row: int = Field(..., description="1-based line number in the matrix file")
    resource: str = Field(..., description="Provider/type, as written in the matrix")
    scenario: str
    expected: str
    got: str
    doc_link: str | None = Field(None, description="Documentation column of the matrix row, if any")


class LogicResult(_CamelModel):
    passed: int = 0
    failed: int = 0
    total: int = 0
    failures: list[LogicFailure] = Field(default_factory=list)
    matrix_found: bool = True


class BrokenLink(_CamelModel):
    """A rule reference link that did not answer with a success status."""

    file: str
    rule_id: str
    url: str
    status: int | str


class LinkResult(_CamelModel):
    checked: int = 0
    broken: int = 0
    details: list[BrokenLink] = Field(default_factory=list)


class DiagnosticsReport(_CamelModel):
    """Combined result of a conformance run."""

    logic: LogicResult = Field(default_factory=LogicResult)
    links: LinkResult = Field(default_factory=LinkResult)

"""
Field Resolver — Dotted-path lookup into a resource's attribute tree.

Absence is a result, not an error: any missing segment or null value
resolves to MISSING.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class _Missing:
    """Sentinel for an unresolved path."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def resolve(tree: Mapping[str, Any] | None, path: str) -> Any:
    """
    Walk `tree` along `path` ("sku.name", "properties.networkProfile.x").

    Segments are matched case-sensitively, exactly as written.
    """
    if not path or tree is None:
        return MISSING

    current: Any = tree
    for segment in path.split("."):
        if not isinstance(current, Mapping) or segment not in current:
            return MISSING
        current = current[segment]
        if current is None:
            return MISSING

    return current


def is_missing(value: Any) -> bool:
    return value is MISSING

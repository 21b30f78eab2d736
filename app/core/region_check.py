"""
Region Capability Check — Flags resources whose type is not offered in the
target region.

Works on provider registrations (namespace → resource types → locations)
fetched by the caller. The result is a copy of each record carrying an
injected Blocker issue; input records are never modified.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from app.models.analysis_models import ProviderRegistration
from app.models.resource_models import Issue, ResourceRecord
from app.models.rule_models import Severity

logger = logging.getLogger("moveready.region_check")

GLOBAL_LOCATION = "global"

CapabilityMap = dict[str, dict[str, set[str]]]


def normalize_location(location: str) -> str:
    """'West Europe' -> 'westeurope'."""
    return location.lower().replace(" ", "")


def build_capability_map(
    providers: Iterable[ProviderRegistration | Mapping[str, Any]],
) -> CapabilityMap:
    """Index provider registrations by namespace and resource type."""
    capability_map: CapabilityMap = {}

    for provider in providers:
        if not isinstance(provider, ProviderRegistration):
            provider = ProviderRegistration.model_validate(provider)
        if not provider.namespace:
            continue

        types = capability_map.setdefault(provider.namespace.lower(), {})
        for rt in provider.resource_types:
            if rt.resource_type and rt.locations:
                types[rt.resource_type.lower()] = {
                    normalize_location(loc) for loc in rt.locations
                }

    return capability_map


def region_issue(resource_type: str, target_region: str) -> Issue:
    return Issue(
        severity=Severity.BLOCKER,
        message=f"Not available in {target_region}",
        impact=(
            f"The resource provider type '{resource_type}' is not supported "
            f"in region {target_region}."
        ),
        remediation="Select a different target region or redeploy to a supported region.",
        downtime_risk=True,
    )


def inject_region_issues(
    records: Iterable[ResourceRecord],
    capability_map: CapabilityMap,
    target_region: str | None,
) -> list[ResourceRecord]:
    """Return the records, with an injected issue on those the region lacks."""
    records = list(records)
    if not target_region:
        return records

    target = normalize_location(target_region)
    checked: list[ResourceRecord] = []
    flagged = 0

    for record in records:
        if (record.location or "").lower() == GLOBAL_LOCATION:
            checked.append(record)
            continue

        namespace, sep, type_name = (record.resource_type or "").partition("/")
        if not sep:
            checked.append(record)
            continue

        supported = capability_map.get(namespace.lower(), {}).get(type_name.lower())
        if supported and target not in supported:
            record = record.model_copy(
                update={"injected_issue": region_issue(record.resource_type, target_region)}
            )
            flagged += 1
        checked.append(record)

    logger.info(f"Region check for {target_region}: {flagged}/{len(records)} unavailable")
    return checked

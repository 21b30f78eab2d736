"""
Test fixtures shared across all MoveReady tests.
"""

import pytest

from app.core.rule_loader import load_corpus, load_default_corpus


@pytest.fixture(scope="session")
def default_corpus():
    """The packaged rule corpus."""
    return load_default_corpus()


@pytest.fixture
def small_corpus():
    """A hand-sized corpus covering every gate and operator."""
    return load_corpus([
        ("rules-tenant.json", [
            {
                "id": "T-ALL",
                "resourceType": "*",
                "scenario": "cross-tenant",
                "severity": "Info",
                "message": "RBAC assignments are dropped",
                "referenceLink": "https://docs.example.com/rbac",
            },
            {
                "id": "T-KV",
                "resourceType": "microsoft.keyvault/vaults",
                "scenario": "cross-tenant",
                "severity": "Critical",
                "message": "Vault keeps the old tenant ID",
                "downtimeRisk": True,
                "referenceLink": "https://docs.example.com/kv",
            },
        ]),
        ("rules-sub.json", [
            {
                "id": "S-PIP",
                "resourceType": "microsoft.network/publicipaddresses",
                "scenario": "cross-subscription",
                "condition": {"field": "sku.name", "operator": "equals", "value": "standard"},
                "severity": "Blocker",
                "message": "Standard public IPs cannot move",
                "downtimeRisk": True,
            },
            {
                "id": "S-SQL",
                "resourceType": "microsoft.sql/*",
                "scenario": "cross-subscription",
                "severity": "Warning",
                "message": "Move the server with its databases",
                "referenceLink": "ftp://not-checked.example.com",
            },
            {
                "id": "S-STORAGE",
                "resourceType": "microsoft.storage/storageaccounts",
                "scenario": "cross-subscription",
                "severity": "Info",
                "message": "Resource ID changes",
            },
        ]),
        ("rules-region.json", [
            {
                "id": "R-VM",
                "resourceType": "microsoft.compute/virtualmachines",
                "scenario": "cross-region",
                "severity": "Warning",
                "message": "Use Resource Mover",
                "referenceLink": "https://docs.example.com/vm",
            },
        ]),
    ])


@pytest.fixture
def keyvault_record():
    return {
        "id": "/subscriptions/sub-1/resourceGroups/rg-app/providers/Microsoft.KeyVault/vaults/kv-app",
        "name": "kv-app",
        "type": "Microsoft.KeyVault/vaults",
        "resourceGroup": "rg-app",
        "location": "westeurope",
        "subscriptionId": "sub-1",
        "subscriptionName": "Production",
        "properties": {"tenantId": "tenant-a"},
    }


@pytest.fixture
def public_ip_record():
    return {
        "id": "/subscriptions/sub-1/resourceGroups/rg-net/providers/Microsoft.Network/publicIPAddresses/pip-1",
        "name": "pip-1",
        "type": "microsoft.network/publicipaddresses",
        "resourceGroup": "rg-net",
        "location": "westeurope",
        "subscriptionId": "sub-1",
        "sku": {"name": "Standard", "tier": "Regional"},
    }

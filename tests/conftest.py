"""Shared pytest fixtures for provider-azure-validation tests.

Builders return plain dicts shaped like the manifests the admission
layer receives, so tests can tweak single fields before decoding.
"""

from __future__ import annotations

import sys
from typing import Any

import pytest
import structlog
from click.testing import CliRunner

SUBSCRIPTION_ID = "a6ad693a-028a-422c-b064-d76a4586f2b3"
TENANT_ID = "ee16e592-3035-41b9-a217-958f8f75b740"
CLIENT_ID = "7d4b5d3c-0a8f-4d63-9a2c-31a9c0e4b5a1"


@pytest.fixture(autouse=True)
def configure_structlog_for_tests() -> None:
    """Configure structlog to output to stdout for test capture."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=False,
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click test runner."""
    return CliRunner()


@pytest.fixture
def infrastructure_config() -> dict[str, Any]:
    """Return a valid single-subnet InfrastructureConfig manifest."""
    return {
        "apiVersion": "azure.provider.extensions.gardener.cloud/v1alpha1",
        "kind": "InfrastructureConfig",
        "networks": {
            "vnet": {"cidr": "10.0.0.0/8"},
            "workers": "10.250.0.0/16",
        },
        "zoned": True,
    }


@pytest.fixture
def cloud_profile() -> dict[str, Any]:
    """Return a CloudProfile manifest with one region and one image."""
    return {
        "apiVersion": "core.gardener.cloud/v1beta1",
        "kind": "CloudProfile",
        "metadata": {"name": "azure"},
        "spec": {
            "type": "azure",
            "regions": [{"name": "westeurope", "zones": [{"name": "1"}, {"name": "2"}, {"name": "3"}]}],
            "machineImages": [{"name": "gardenlinux", "versions": [{"version": "1592.1.0"}]}],
            "machineTypes": [{"name": "Standard_D4s_v5"}],
            "providerConfig": {
                "apiVersion": "azure.provider.extensions.gardener.cloud/v1alpha1",
                "kind": "CloudProfileConfig",
                "countUpdateDomains": [{"region": "westeurope", "count": 5}],
                "countFaultDomains": [{"region": "westeurope", "count": 3}],
                "machineImages": [
                    {
                        "name": "gardenlinux",
                        "versions": [{"version": "1592.1.0", "urn": "sap:gardenlinux:greatest:1592.1.0"}],
                    }
                ],
            },
        },
    }


@pytest.fixture
def shoot(infrastructure_config: dict[str, Any]) -> dict[str, Any]:
    """Return a valid zoned Shoot manifest using ``infrastructure_config``."""
    return {
        "apiVersion": "core.gardener.cloud/v1beta1",
        "kind": "Shoot",
        "metadata": {"name": "crazy-botany", "namespace": "garden-dev"},
        "spec": {
            "cloudProfileName": "azure",
            "region": "westeurope",
            "kubernetes": {"version": "1.30.2"},
            "networking": {
                "type": "calico",
                "nodes": "10.250.0.0/16",
                "pods": "100.96.0.0/11",
                "services": "100.64.0.0/13",
            },
            "provider": {
                "type": "azure",
                "infrastructureConfig": infrastructure_config,
                "workers": [
                    {
                        "name": "worker-a",
                        "machine": {"type": "Standard_D4s_v5"},
                        "volume": {"type": "StandardSSD_LRS", "size": "50Gi"},
                        "zones": ["1", "2"],
                    }
                ],
            },
        },
    }


@pytest.fixture
def infrastructure_secret() -> dict[str, Any]:
    """Return a valid infrastructure credentials Secret manifest."""
    return {
        "apiVersion": "v1",
        "kind": "Secret",
        "metadata": {"name": "azure", "namespace": "garden"},
        "stringData": {
            "subscriptionID": SUBSCRIPTION_ID,
            "tenantID": TENANT_ID,
            "clientID": CLIENT_ID,
            "clientSecret": "s3cr3t",
        },
    }

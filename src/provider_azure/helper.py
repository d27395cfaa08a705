"""Small lookups shared by validators and admission."""

from __future__ import annotations

from collections.abc import Mapping

from provider_azure.schemas.infrastructure_config import InfrastructureConfig

# Shoots carrying this annotation run their workers in VM scale sets with
# flexible orchestration (VMO) instead of availability sets.
SHOOT_VMO_USAGE_ANNOTATION = "alpha.azure.provider.extensions.gardener.cloud/vmo"


def is_using_single_subnet_layout(config: InfrastructureConfig) -> bool:
    """Return True unless the config lists per-zone subnets."""
    return not config.networks.zones


def infrastructure_zone_to_string(zone: int) -> str:
    """Render an infrastructure zone the way worker pools name it."""
    return str(zone)


def has_shoot_vmo_alpha_annotation(annotations: Mapping[str, str] | None) -> bool:
    if not annotations:
        return False
    return annotations.get(SHOOT_VMO_USAGE_ANNOTATION) == "true"


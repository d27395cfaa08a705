"""Validation of InfrastructureConfig.

The checks depend on the network layout:

- single-subnet (``networks.workers``): one subnet for all zones, an
  optional NAT gateway and service endpoints at the network level;
- multi-subnet (``networks.zones``): one subnet per zone, each with its own
  NAT gateway and service endpoints.

Ranges of the shoot networking (nodes, pods, services) are passed in as
plain strings and reported under ``networking_path``.

Example:
    >>> errors = validate_infrastructure_config(
    ...     config,
    ...     nodes="10.250.0.0/16",
    ...     pods="100.96.0.0/11",
    ...     services="100.64.0.0/13",
    ...     has_vmo_alpha_annotation=False,
    ...     path=Path("spec", "provider", "infrastructureConfig"),
    ... )
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

from provider_azure.helper import SHOOT_VMO_USAGE_ANNOTATION
from provider_azure.schemas import core
from provider_azure.schemas.infrastructure_config import (
    IdentityConfig,
    InfrastructureConfig,
    NatGatewayConfig,
    VNet,
    Zone,
    ZonedNatGatewayConfig,
)
from provider_azure.validation.cidr import CIDR, validate_pairwise_disjoint
from provider_azure.validation.field import (
    ErrorList,
    Path,
    forbidden,
    invalid,
    not_supported,
    required,
    validate_immutable_field,
)
from provider_azure.validation.primitives import (
    validate_generic_name,
    validate_public_ip_name,
    validate_resource_group_name,
    validate_resource_id,
    validate_service_endpoint,
    validate_vnet_name,
)

NAT_GATEWAY_MIN_TIMEOUT_MINUTES = 4
NAT_GATEWAY_MAX_TIMEOUT_MINUTES = 120


class NetworkLayout(str, Enum):
    """Subnet layout of a shoot's network."""

    SINGLE_SUBNET = "single-subnet"
    MULTI_SUBNET = "multi-subnet"

    @classmethod
    def of(cls, config: InfrastructureConfig) -> NetworkLayout | None:
        """Return the layout, or None if workers and zones are both set or both unset."""
        has_workers = config.networks.workers is not None
        has_zones = bool(config.networks.zones)
        if has_workers and not has_zones:
            return cls.SINGLE_SUBNET
        if has_zones and not has_workers:
            return cls.MULTI_SUBNET
        return None


def validate_infrastructure_config(
    config: InfrastructureConfig,
    nodes: str | None,
    pods: str | None,
    services: str | None,
    has_vmo_alpha_annotation: bool,
    path: Path,
    networking_path: Path | None = None,
) -> ErrorList:
    """Validate an InfrastructureConfig against the shoot's networking ranges.

    Args:
        config: The infrastructure config.
        nodes: Nodes CIDR of the shoot, if set.
        pods: Pods CIDR of the shoot, if set.
        services: Services CIDR of the shoot, if set.
        has_vmo_alpha_annotation: Whether the shoot opted into VMO.
        path: Path of the infrastructure config.
        networking_path: Path of the shoot networking, used for the ranges above.

    Returns:
        All findings.
    """
    networking_path = networking_path or Path("networking")
    nodes_cidr = _optional_cidr(nodes, networking_path.child("nodes"))
    pods_cidr = _optional_cidr(pods, networking_path.child("pods"))
    services_cidr = _optional_cidr(services, networking_path.child("services"))

    errors: ErrorList = []
    if config.resource_group is not None:
        errors.append(
            invalid(
                path.child("resourceGroup"),
                config.resource_group.name,
                "specifying an existing resource group is not supported yet",
            )
        )
    if config.zoned and has_vmo_alpha_annotation:
        errors.append(
            invalid(
                path.child("zoned"),
                config.zoned,
                f'zoned clusters cannot be combined with the "{SHOOT_VMO_USAGE_ANNOTATION}" annotation',
            )
        )

    networks = config.networks
    networks_path = path.child("networks")
    layout = NetworkLayout.of(config)
    workers_cidr: CIDR | None = None
    zone_cidrs: list[CIDR] = []

    if layout is None and networks.workers is not None:
        errors.append(
            forbidden(
                networks_path.child("workers"),
                "workers and zones cannot be specified at the same time",
            )
        )
    elif layout is None:
        errors.append(forbidden(networks_path.child("workers"), "either workers or zones must be specified"))
    elif layout is NetworkLayout.SINGLE_SUBNET:
        assert networks.workers is not None
        workers_cidr = CIDR(networks.workers, networks_path.child("workers"))
        errors.extend(workers_cidr.validate_parse())
        errors.extend(workers_cidr.validate_canonical())
        if nodes_cidr is not None:
            errors.extend(nodes_cidr.validate_subset(workers_cidr))
        errors.extend(
            _validate_nat_gateway(
                networks.nat_gateway,
                config.zoned,
                has_vmo_alpha_annotation,
                networks_path.child("natGateway"),
            )
        )
        errors.extend(
            _validate_service_endpoints(networks.service_endpoints, networks_path.child("serviceEndpoints"))
        )
    else:
        zone_errors, zone_cidrs = _validate_zones(
            networks.zones, nodes_cidr, pods_cidr, services_cidr, networks_path.child("zones")
        )
        errors.extend(zone_errors)
        if networks.nat_gateway is not None:
            errors.append(
                forbidden(
                    networks_path.child("natGateway"),
                    "natGateway cannot be specified when workers field is missing",
                )
            )
        if networks.service_endpoints:
            errors.append(
                forbidden(
                    networks_path.child("serviceEndpoints"),
                    "serviceEndpoints cannot be specified when workers field is missing",
                )
            )

    errors.extend(
        _validate_vnet(
            config,
            layout,
            workers_cidr,
            zone_cidrs,
            nodes_cidr,
            pods_cidr,
            services_cidr,
            networks_path.child("vnet"),
        )
    )
    if config.identity is not None:
        errors.extend(_validate_identity(config.identity, path.child("identity")))
    return errors


def _optional_cidr(value: str | None, path: Path) -> CIDR | None:
    return CIDR(value, path) if value is not None else None


def _validate_disjoint(cidr: CIDR, *others: CIDR | None) -> ErrorList:
    """Report ``cidr`` if it overlaps any of ``others``; errors land on ``cidr``."""
    errors: ErrorList = []
    for other in others:
        if other is not None:
            errors.extend(other.validate_not_overlap(cidr))
    return errors


# =============================================================================
# VNet
# =============================================================================


def _validate_vnet(
    config: InfrastructureConfig,
    layout: NetworkLayout | None,
    workers_cidr: CIDR | None,
    zone_cidrs: Sequence[CIDR],
    nodes_cidr: CIDR | None,
    pods_cidr: CIDR | None,
    services_cidr: CIDR | None,
    path: Path,
) -> ErrorList:
    vnet = config.networks.vnet
    if (vnet.name is None) != (vnet.resource_group is None):
        return [
            invalid(
                path,
                vnet.to_manifest(),
                "a vnet cidr or vnet name and resource group need to be specified",
            )
        ]

    if vnet.is_external:
        return _validate_external_vnet(config, vnet, workers_cidr, pods_cidr, services_cidr, path)

    errors: ErrorList = []
    if vnet.cidr is None:
        if layout is NetworkLayout.SINGLE_SUBNET and workers_cidr is not None:
            # The VNet is created with the workers range, so nodes must fit into it.
            errors.extend(workers_cidr.validate_subset(nodes_cidr))
            errors.extend(_validate_disjoint(workers_cidr, pods_cidr, services_cidr))
        elif layout is NetworkLayout.MULTI_SUBNET:
            errors.append(
                forbidden(
                    path.child("cidr"),
                    "a vnet cidr or vnet reference must be specified when the workers field is not set",
                )
            )
    else:
        vnet_cidr = CIDR(vnet.cidr, path.child("cidr"))
        errors.extend(vnet_cidr.validate_parse())
        errors.extend(vnet_cidr.validate_subset(nodes_cidr, workers_cidr, *zone_cidrs))
        errors.extend(vnet_cidr.validate_not_overlap(pods_cidr, services_cidr))
        errors.extend(vnet_cidr.validate_canonical())

    if vnet.ddos_protection_plan_id is not None:
        errors.extend(validate_resource_id(vnet.ddos_protection_plan_id, path.child("ddosProtectionPlanID")))
    return errors


def _validate_external_vnet(
    config: InfrastructureConfig,
    vnet: VNet,
    workers_cidr: CIDR | None,
    pods_cidr: CIDR | None,
    services_cidr: CIDR | None,
    path: Path,
) -> ErrorList:
    assert vnet.name is not None and vnet.resource_group is not None
    errors: ErrorList = []
    if vnet.cidr is not None:
        errors.append(
            invalid(path.child("cidr"), vnet.cidr, "specifying a cidr for an existing vnet is not possible")
        )
    if vnet.ddos_protection_plan_id is not None:
        errors.append(
            forbidden(
                path.child("ddosProtectionPlanID"),
                "specifying a DDoS protection plan for an existing vnet is not possible",
            )
        )
    if config.resource_group is not None and vnet.resource_group == config.resource_group.name:
        errors.append(
            invalid(
                path.child("resourceGroup"),
                vnet.resource_group,
                "the vnet resource group must not be the same as the cluster resource group",
            )
        )
    errors.extend(validate_vnet_name(vnet.name, path.child("name")))
    errors.extend(validate_resource_group_name(vnet.resource_group, path.child("resourceGroup")))
    if workers_cidr is not None:
        errors.extend(_validate_disjoint(workers_cidr, pods_cidr, services_cidr))
    return errors


# =============================================================================
# NAT gateways
# =============================================================================


def _validate_timeout(timeout: int | None, path: Path) -> ErrorList:
    if timeout is None:
        return []
    if NAT_GATEWAY_MIN_TIMEOUT_MINUTES <= timeout <= NAT_GATEWAY_MAX_TIMEOUT_MINUTES:
        return []
    return [
        invalid(
            path,
            timeout,
            f"idleConnectionTimeoutMinutes values must range between "
            f"{NAT_GATEWAY_MIN_TIMEOUT_MINUTES} and {NAT_GATEWAY_MAX_TIMEOUT_MINUTES}",
        )
    ]


def _validate_public_ip_reference(name: str, resource_group: str, path: Path) -> ErrorList:
    errors: ErrorList = []
    if not name:
        errors.append(required(path.child("name"), "Name for NatGateway public ip resource is required"))
    else:
        errors.extend(validate_public_ip_name(name, path.child("name")))
    if not resource_group:
        errors.append(
            required(
                path.child("resourceGroup"),
                "ResourceGroup for NatGateway public ip resource is required",
            )
        )
    else:
        errors.extend(validate_resource_group_name(resource_group, path.child("resourceGroup")))
    return errors


def _validate_nat_gateway(
    nat_gateway: NatGatewayConfig | None,
    zoned: bool,
    has_vmo_alpha_annotation: bool,
    path: Path,
) -> ErrorList:
    if nat_gateway is None:
        return []

    if not nat_gateway.enabled:
        if (
            nat_gateway.zone is not None
            or nat_gateway.idle_connection_timeout_minutes is not None
            or nat_gateway.ip_addresses
        ):
            return [
                invalid(
                    path,
                    nat_gateway.to_manifest(),
                    "NatGateway is disabled but additional NatGateway config is passed",
                )
            ]
        return []

    if not zoned and not has_vmo_alpha_annotation:
        return [forbidden(path, "NatGateway is currently only supported for zonal and VMO clusters")]

    errors = _validate_timeout(
        nat_gateway.idle_connection_timeout_minutes, path.child("idleConnectionTimeoutMinutes")
    )

    if nat_gateway.zone is None:
        if nat_gateway.ip_addresses:
            errors.append(
                invalid(path.child("zone"), None, "Public IPs can only be selected for zonal NatGateways")
            )
        return errors

    for i, ip in enumerate(nat_gateway.ip_addresses):
        ip_path = path.child("ipAddresses").index(i)
        if ip.zone != nat_gateway.zone:
            errors.append(
                invalid(
                    ip_path.child("zone"),
                    ip.zone,
                    "Public IP can't be used as it is not in the same zone as the NatGateway "
                    f"(zone {nat_gateway.zone})",
                )
            )
        errors.extend(_validate_public_ip_reference(ip.name, ip.resource_group, ip_path))
    return errors


def _validate_zoned_nat_gateway(nat_gateway: ZonedNatGatewayConfig | None, path: Path) -> ErrorList:
    if nat_gateway is None:
        return []

    if not nat_gateway.enabled:
        if nat_gateway.idle_connection_timeout_minutes is not None or nat_gateway.ip_addresses:
            return [
                invalid(
                    path,
                    nat_gateway.to_manifest(),
                    "NatGateway is disabled but additional NatGateway config is passed",
                )
            ]
        return []

    errors = _validate_timeout(
        nat_gateway.idle_connection_timeout_minutes, path.child("idleConnectionTimeoutMinutes")
    )
    for i, ip in enumerate(nat_gateway.ip_addresses):
        errors.extend(
            _validate_public_ip_reference(ip.name, ip.resource_group, path.child("ipAddresses").index(i))
        )
    return errors


def _validate_service_endpoints(endpoints: Sequence[str], path: Path) -> ErrorList:
    errors: ErrorList = []
    for i, endpoint in enumerate(endpoints):
        errors.extend(validate_service_endpoint(endpoint, path.index(i)))
    return errors


# =============================================================================
# Zones
# =============================================================================


def _validate_zones(
    zones: Sequence[Zone],
    nodes_cidr: CIDR | None,
    pods_cidr: CIDR | None,
    services_cidr: CIDR | None,
    path: Path,
) -> tuple[ErrorList, list[CIDR]]:
    errors: ErrorList = []
    seen: set[int] = set()
    zone_cidrs: list[CIDR] = []

    for i, zone in enumerate(zones):
        zone_path = path.index(i)
        if zone.name in seen:
            errors.append(invalid(zone_path, zone.name, "the same zone cannot be specified multiple times"))
        seen.add(zone.name)

        zone_cidr = CIDR(zone.cidr, zone_path.child("cidr"))
        errors.extend(zone_cidr.validate_parse())
        errors.extend(zone_cidr.validate_canonical())
        if nodes_cidr is not None:
            errors.extend(nodes_cidr.validate_subset(zone_cidr))
        errors.extend(_validate_disjoint(zone_cidr, pods_cidr, services_cidr))
        errors.extend(_validate_zoned_nat_gateway(zone.nat_gateway, zone_path.child("natGateway")))
        errors.extend(_validate_service_endpoints(zone.service_endpoints, zone_path.child("serviceEndpoints")))
        zone_cidrs.append(zone_cidr)

    errors.extend(validate_pairwise_disjoint(zone_cidrs))
    return errors, zone_cidrs


# =============================================================================
# Identity
# =============================================================================


def _validate_identity(identity: IdentityConfig, path: Path) -> ErrorList:
    if not identity.name or not identity.resource_group:
        return [
            invalid(
                path,
                identity.to_manifest(),
                "specifying an identity requires the name of the identity and the resource group "
                "which hosts the identity",
            )
        ]
    errors = validate_generic_name(identity.name, path.child("name"))
    errors.extend(validate_resource_group_name(identity.resource_group, path.child("resourceGroup")))
    return errors


# =============================================================================
# Updates
# =============================================================================


def validate_infrastructure_config_update(
    old_config: InfrastructureConfig,
    new_config: InfrastructureConfig,
    path: Path,
) -> ErrorList:
    """Validate a change of an InfrastructureConfig.

    Layout transitions:
        single -> single: workers CIDR is immutable
        single -> multi:  one zone must take over the old workers CIDR
        multi  -> multi:  zones cannot be removed, their CIDRs are immutable
        multi  -> single: forbidden
    """
    errors: ErrorList = []
    errors.extend(
        validate_immutable_field(
            new_config.resource_group.name if new_config.resource_group else None,
            old_config.resource_group.name if old_config.resource_group else None,
            path.child("resourceGroup"),
        )
    )
    errors.extend(validate_immutable_field(new_config.zoned, old_config.zoned, path.child("zoned")))

    networks_path = path.child("networks")
    old_layout = NetworkLayout.of(old_config)
    new_layout = NetworkLayout.of(new_config)
    old_networks = old_config.networks
    new_networks = new_config.networks

    if old_layout is NetworkLayout.SINGLE_SUBNET and new_layout is NetworkLayout.SINGLE_SUBNET:
        errors.extend(
            validate_immutable_field(new_networks.workers, old_networks.workers, networks_path.child("workers"))
        )
    elif old_layout is NetworkLayout.SINGLE_SUBNET and new_layout is NetworkLayout.MULTI_SUBNET:
        if not any(zone.cidr == old_networks.workers for zone in new_networks.zones):
            errors.append(
                forbidden(
                    networks_path.child("zones").index(0).child("cidr"),
                    "when updating to use zones the CIDR must match that of the previous "
                    "config.networks.workers",
                )
            )
    elif old_layout is NetworkLayout.MULTI_SUBNET and new_layout is NetworkLayout.SINGLE_SUBNET:
        errors.append(
            forbidden(
                networks_path.child("zones"),
                "updating from a multi-subnet layout to a single-subnet layout is not allowed",
            )
        )
    elif old_layout is NetworkLayout.MULTI_SUBNET and new_layout is NetworkLayout.MULTI_SUBNET:
        errors.extend(_validate_zones_update(old_networks.zones, new_networks.zones, networks_path.child("zones")))

    errors.extend(_validate_vnet_update(old_networks.vnet, new_networks.vnet, networks_path.child("vnet")))
    return errors


def _validate_zones_update(old_zones: Sequence[Zone], new_zones: Sequence[Zone], path: Path) -> ErrorList:
    errors: ErrorList = []
    new_index = {zone.name: i for i, zone in enumerate(new_zones)}
    for i, old_zone in enumerate(old_zones):
        j = new_index.get(old_zone.name)
        if j is None:
            errors.append(invalid(path.index(i).child("name"), old_zone.name, "zone information cannot be deleted"))
            continue
        errors.extend(
            validate_immutable_field(new_zones[j].cidr, old_zone.cidr, path.index(j).child("cidr"))
        )
    return errors


def _validate_vnet_update(old_vnet: VNet, new_vnet: VNet, path: Path) -> ErrorList:
    if old_vnet.is_external or old_vnet.is_default:
        errors = validate_immutable_field(new_vnet.name, old_vnet.name, path.child("name"))
        errors.extend(
            validate_immutable_field(new_vnet.resource_group, old_vnet.resource_group, path.child("resourceGroup"))
        )
        return errors

    if old_vnet.cidr is not None and new_vnet.cidr is None:
        return [invalid(path.child("cidr"), new_vnet.cidr, "vnet cidr need to be specified")]
    return []


def validate_vmo_config_update(
    old_has_vmo_alpha_annotation: bool,
    new_has_vmo_alpha_annotation: bool,
    path: Path,
) -> ErrorList:
    """The VMO annotation can neither be added to nor removed from an existing shoot."""
    if not old_has_vmo_alpha_annotation and new_has_vmo_alpha_annotation:
        return [
            forbidden(
                path.child("annotations"),
                f'not allowed to add annotation "{SHOOT_VMO_USAGE_ANNOTATION}" to an already existing '
                "shoot cluster",
            )
        ]
    if old_has_vmo_alpha_annotation and not new_has_vmo_alpha_annotation:
        return [
            forbidden(
                path.child("annotations"),
                f'not allowed to remove annotation "{SHOOT_VMO_USAGE_ANNOTATION}" from an already '
                "existing shoot cluster",
            )
        ]
    return []


# =============================================================================
# Cloud profile
# =============================================================================


def validate_infrastructure_config_against_cloud_profile(
    old_config: InfrastructureConfig | None,
    config: InfrastructureConfig,
    region: str,
    cloud_profile: core.CloudProfileSpec,
    path: Path,
) -> ErrorList:
    """Zones of a multi-subnet layout must be zones of the shoot's region.

    Zones already present in the old config are kept even if the region no
    longer offers them.
    """
    errors: ErrorList = []
    if not config.networks.zones:
        return errors

    region_zones = next(
        ([zone.name for zone in r.zones] for r in cloud_profile.regions if r.name == region),
        [],
    )
    old_zone_names = {zone.name for zone in old_config.networks.zones} if old_config else set()
    zones_path = path.child("networks", "zones")

    for i, zone in enumerate(config.networks.zones):
        if zone.name in old_zone_names:
            continue
        if str(zone.name) not in region_zones:
            errors.append(not_supported(zones_path.index(i).child("name"), zone.name, region_zones))
    return errors

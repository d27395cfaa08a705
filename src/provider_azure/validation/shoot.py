"""Validation of a shoot's networking and worker pools."""

from __future__ import annotations

from collections.abc import Sequence

from packaging.version import InvalidVersion, Version

from provider_azure.helper import infrastructure_zone_to_string, is_using_single_subnet_layout
from provider_azure.schemas import core
from provider_azure.schemas.infrastructure_config import InfrastructureConfig
from provider_azure.validation.field import (
    ErrorList,
    Path,
    forbidden,
    invalid,
    not_supported,
    required,
    too_many,
    validate_immutable_field,
)

MAX_DATA_VOLUME_COUNT = 64
CSI_MIGRATION_KUBERNETES_VERSION = "1.21"
CALICO_NETWORKING_TYPE = "calico"
SUPPORTED_IP_FAMILIES = ("IPv4",)


def validate_networking(networking: core.Networking, path: Path) -> ErrorList:
    """Validate the networking section of an Azure shoot."""
    errors: ErrorList = []
    if networking.nodes is None:
        errors.append(required(path.child("nodes"), "a nodes CIDR must be provided for Azure shoots"))

    if networking.type == CALICO_NETWORKING_TYPE and _calico_overlay_enabled(networking.provider_config):
        errors.append(
            forbidden(
                path.child("providerConfig", "overlay", "enabled"),
                "calico overlay networking is not supported on Azure",
            )
        )

    unsupported = [family for family in networking.ip_families if family not in SUPPORTED_IP_FAMILIES]
    if unsupported:
        errors.append(
            invalid(
                path.child("ipFamilies"),
                networking.ip_families,
                f"only {', '.join(SUPPORTED_IP_FAMILIES)} is supported for Azure shoots",
            )
        )
    return errors


def _calico_overlay_enabled(provider_config: core.RawConfig | None) -> bool:
    overlay = (provider_config or {}).get("overlay")
    return isinstance(overlay, dict) and overlay.get("enabled") is True


def validate_workers(
    workers: Sequence[core.Worker],
    infra: InfrastructureConfig,
    path: Path,
) -> ErrorList:
    """Validate the worker pools of a shoot against its InfrastructureConfig.

    Args:
        workers: The worker pools.
        infra: The decoded infrastructure config of the shoot.
        path: Path of the worker list.

    Returns:
        All findings. An unparsable kubelet version stops the validation.
    """
    errors: ErrorList = []
    csi_migration_version = Version(CSI_MIGRATION_KUBERNETES_VERSION)

    for i, worker in enumerate(workers):
        worker_path = path.index(i)

        if worker.kubernetes is not None and worker.kubernetes.version is not None:
            version_path = worker_path.child("kubernetes", "version")
            try:
                version = Version(worker.kubernetes.version.split("-", 1)[0])
            except InvalidVersion as e:
                errors.append(invalid(version_path, worker.kubernetes.version, str(e)))
                return errors
            if version < csi_migration_version:
                errors.append(
                    forbidden(
                        version_path,
                        f"cannot use kubelet version ({worker.kubernetes.version}) lower than CSI "
                        f"migration version ({CSI_MIGRATION_KUBERNETES_VERSION})",
                    )
                )

        if worker.volume is None:
            errors.append(required(worker_path.child("volume"), "must not be nil"))
        else:
            errors.extend(
                _validate_volume(
                    worker.volume.type, worker.volume.size, worker.volume.encrypted, worker_path.child("volume")
                )
            )

        if len(worker.data_volumes) > MAX_DATA_VOLUME_COUNT:
            errors.append(
                too_many(worker_path.child("dataVolumes"), len(worker.data_volumes), MAX_DATA_VOLUME_COUNT)
            )
        for j, volume in enumerate(worker.data_volumes):
            errors.extend(
                _validate_volume(volume.type, volume.size, volume.encrypted, worker_path.child("dataVolumes").index(j))
            )

        errors.extend(_validate_worker_zones(worker, infra, worker_path.child("zones")))
    return errors


def _validate_volume(volume_type: str | None, size: str, encrypted: bool | None, path: Path) -> ErrorList:
    errors: ErrorList = []
    if volume_type is None:
        errors.append(required(path.child("type"), "must not be empty"))
    if not size:
        errors.append(required(path.child("size"), "must not be empty"))
    if encrypted is not None:
        errors.append(not_supported(path.child("encrypted"), encrypted, None))
    return errors


def _validate_worker_zones(worker: core.Worker, infra: InfrastructureConfig, path: Path) -> ErrorList:
    if infra.zoned and not worker.zones:
        return [required(path, "at least one zone must be configured for zoned clusters")]
    if not infra.zoned and worker.zones:
        return [required(path, "zones must not be specified for non zoned clusters")]

    errors: ErrorList = []
    seen: set[str] = set()
    for j, zone in enumerate(worker.zones):
        if zone in seen:
            errors.append(invalid(path.index(j), zone, "must only be specified once per worker group"))
        seen.add(zone)

    if not is_using_single_subnet_layout(infra):
        infra_zones = {infrastructure_zone_to_string(zone.name) for zone in infra.networks.zones}
        for j, zone in enumerate(worker.zones):
            if zone not in infra_zones:
                errors.append(
                    invalid(
                        path.index(j),
                        zone,
                        'zone configuration must be specified in "infrastructureConfig.networks.zones"',
                    )
                )
    return errors


def _should_enforce_zone_immutability(new_zones: Sequence[str], old_zones: Sequence[str]) -> bool:
    """Zones may only be appended to, so the old list must stay a prefix."""
    if len(old_zones) > len(new_zones):
        return True
    return list(new_zones[: len(old_zones)]) != list(old_zones)


def validate_workers_update(
    old_workers: Sequence[core.Worker],
    new_workers: Sequence[core.Worker],
    path: Path,
) -> ErrorList:
    """Existing worker pools, matched by name, may only append zones."""
    errors: ErrorList = []
    old_by_name = {worker.name: worker for worker in old_workers}
    for i, new_worker in enumerate(new_workers):
        old_worker = old_by_name.get(new_worker.name)
        if old_worker is None:
            continue
        if _should_enforce_zone_immutability(new_worker.zones, old_worker.zones):
            errors.extend(validate_immutable_field(new_worker.zones, old_worker.zones, path.index(i).child("zones")))
    return errors

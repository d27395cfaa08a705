"""Object-level validation of shoots, seeds, cloud profiles and secrets.

Each entry point decodes the provider configs embedded in an orchestrator
object, runs the validators for them and returns all findings. Paths are
rooted at the object, e.g. ``spec.provider.infrastructureConfig.zoned``.

A provider config that cannot be decoded yields a single error at its path;
the validators for that config do not run.

Example:
    >>> shoot = Shoot.from_yaml("shoot.yaml")
    >>> cloud_profile = CloudProfile.from_yaml("cloudprofile.yaml")
    >>> for error in validate_shoot(shoot, cloud_profile):
    ...     print(error)
"""

from __future__ import annotations

import copy
from typing import Any, TypeVar

import structlog
from pydantic import ValidationError

from provider_azure.errors import DecodeError
from provider_azure.helper import has_shoot_vmo_alpha_annotation
from provider_azure.observability import record_result, validation_span
from provider_azure.schemas.backup_bucket_config import BackupBucketConfig
from provider_azure.schemas.base import ApiModel
from provider_azure.schemas.cloud_profile_config import CloudProfileConfig
from provider_azure.schemas.control_plane_config import (
    ControlPlaneConfig,
    WorkerConfig,
    WorkloadIdentityConfig,
)
from provider_azure.schemas.core import (
    CloudProfile,
    NamespacedCloudProfile,
    RawConfig,
    Seed,
    Shoot,
    WorkloadIdentity,
)
from provider_azure.schemas.infrastructure_config import InfrastructureConfig
from provider_azure.schemas.secret import Secret
from provider_azure.validation.backupbucket import (
    validate_backup_bucket_config,
    validate_backup_bucket_config_update,
)
from provider_azure.validation.cloudprofile import (
    validate_cloud_profile_config,
    validate_namespaced_cloud_profile_config,
)
from provider_azure.validation.controlplane import validate_control_plane_config
from provider_azure.validation.credentials import validate_dns_secret, validate_infrastructure_secret
from provider_azure.validation.field import (
    ErrorList,
    Path,
    internal_error,
    invalid,
    not_supported,
    required,
)
from provider_azure.validation.infrastructure import (
    validate_infrastructure_config,
    validate_infrastructure_config_against_cloud_profile,
    validate_infrastructure_config_update,
    validate_vmo_config_update,
)
from provider_azure.validation.shoot import validate_networking, validate_workers, validate_workers_update
from provider_azure.validation.worker import validate_worker_config
from provider_azure.validation.workloadidentity import (
    validate_workload_identity_config,
    validate_workload_identity_config_update,
)

logger = structlog.get_logger(__name__)

ModelT = TypeVar("ModelT", bound=ApiModel)

PROVIDER_TYPE = "azure"
CLOUD_PROFILE_REFERENCE_KIND = "CloudProfile"
SECRET_KIND_INFRASTRUCTURE = "infrastructure"
SECRET_KIND_DNS = "dns"
SECRET_KINDS = (SECRET_KIND_INFRASTRUCTURE, SECRET_KIND_DNS)

METADATA_PATH = Path("metadata")
SPEC_PATH = Path("spec")
NETWORKING_PATH = SPEC_PATH.child("networking")
PROVIDER_PATH = SPEC_PATH.child("provider")
INFRASTRUCTURE_CONFIG_PATH = PROVIDER_PATH.child("infrastructureConfig")
CONTROL_PLANE_CONFIG_PATH = PROVIDER_PATH.child("controlPlaneConfig")
WORKERS_PATH = PROVIDER_PATH.child("workers")
BACKUP_PROVIDER_CONFIG_PATH = SPEC_PATH.child("backup", "providerConfig")
CLOUD_PROFILE_CONFIG_PATH = SPEC_PATH.child("providerConfig")
WORKLOAD_IDENTITY_CONFIG_PATH = SPEC_PATH.child("targetSystem", "providerConfig")
SECRET_PATH = Path("secret")


def decode_provider_config(model: type[ModelT], raw: RawConfig, kind: str, *, lenient: bool = False) -> ModelT:
    """Decode an embedded provider config.

    Strict decoding rejects unknown keys. Lenient decoding drops them, which
    is used for configs already stored by an older version of the schema.

    Raises:
        DecodeError: If the document does not fit the model.
    """
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        unknown = [error["loc"] for error in e.errors() if error["type"] == "extra_forbidden"]
        if lenient and unknown and len(unknown) == e.error_count():
            pruned = _without_keys(raw, unknown)
            if pruned is not None:
                logger.debug("unknown_keys_ignored", kind=kind, count=len(unknown))
                return decode_provider_config(model, pruned, kind)
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "<root>"
        raise DecodeError(
            kind,
            f"{location}: {first['msg']}",
            internal_details=str(e),
        ) from e


def _without_keys(raw: RawConfig, locations: list[tuple[int | str, ...]]) -> RawConfig | None:
    """Return a copy of ``raw`` without the keys at ``locations``, or None if one is not found."""
    pruned = copy.deepcopy(raw)
    for location in locations:
        node: Any = pruned
        for part in location[:-1]:
            if isinstance(node, dict) and part in node:
                node = node[part]
            elif isinstance(node, list) and isinstance(part, int) and part < len(node):
                node = node[part]
            else:
                return None
        if not isinstance(node, dict) or location[-1] not in node:
            return None
        del node[location[-1]]
    return pruned


def _decode(
    model: type[ModelT], raw: RawConfig, path: Path, kind: str
) -> tuple[ModelT | None, ErrorList]:
    try:
        return decode_provider_config(model, raw, kind), []
    except DecodeError as e:
        return None, [invalid(path, raw, str(e))]


def _decode_stored(
    model: type[ModelT], raw: RawConfig, path: Path, kind: str
) -> tuple[ModelT | None, ErrorList]:
    """Leniently decode the config of a stored object; failures are internal errors."""
    try:
        return decode_provider_config(model, raw, kind, lenient=True), []
    except DecodeError as e:
        return None, [internal_error(path, e)]


# =============================================================================
# Shoot
# =============================================================================


def validate_shoot(
    shoot: Shoot,
    cloud_profile: CloudProfile,
    old_shoot: Shoot | None = None,
) -> ErrorList:
    """Validate a shoot on creation or, given ``old_shoot``, on update.

    Args:
        shoot: The new shoot.
        cloud_profile: The cloud profile the shoot references.
        old_shoot: The stored shoot, on update.

    Returns:
        All findings.
    """
    operation = "create" if old_shoot is None else "update"
    with validation_span(
        "Shoot",
        operation=operation,
        attributes={"shoot.name": shoot.metadata.name, "shoot.namespace": shoot.metadata.namespace},
    ) as s:
        if old_shoot is None:
            errors = _validate_shoot_creation(shoot, cloud_profile)
        else:
            errors = _validate_shoot_update(old_shoot, shoot, cloud_profile)
        record_result(s, errors)
    return errors


def _decode_infrastructure_config(raw: RawConfig | None) -> tuple[InfrastructureConfig | None, ErrorList]:
    if raw is None:
        return None, [
            required(INFRASTRUCTURE_CONFIG_PATH, "InfrastructureConfig must be set for Azure shoots")
        ]
    return _decode(InfrastructureConfig, raw, INFRASTRUCTURE_CONFIG_PATH, "InfrastructureConfig")


def _decode_control_plane_config(raw: RawConfig | None) -> tuple[ControlPlaneConfig | None, ErrorList]:
    if raw is None:
        return None, []
    return _decode(ControlPlaneConfig, raw, CONTROL_PLANE_CONFIG_PATH, "ControlPlaneConfig")


def _validate_shoot_creation(shoot: Shoot, cloud_profile: CloudProfile) -> ErrorList:
    infra_config, errors = _decode_infrastructure_config(shoot.spec.provider.infrastructure_config)
    if infra_config is None:
        return errors
    cp_config, errors = _decode_control_plane_config(shoot.spec.provider.control_plane_config)
    if errors:
        return errors
    return _validate_shoot_spec(shoot, None, infra_config, cloud_profile, cp_config)


def _validate_shoot_update(old_shoot: Shoot, shoot: Shoot, cloud_profile: CloudProfile) -> ErrorList:
    infra_config, errors = _decode_infrastructure_config(shoot.spec.provider.infrastructure_config)
    if infra_config is None:
        return errors

    old_raw = old_shoot.spec.provider.infrastructure_config
    if old_raw is None:
        return [internal_error(INFRASTRUCTURE_CONFIG_PATH, "InfrastructureConfig is not available on old shoot")]
    old_infra_config, errors = _decode_stored(
        InfrastructureConfig, old_raw, INFRASTRUCTURE_CONFIG_PATH, "InfrastructureConfig"
    )
    if old_infra_config is None:
        return errors

    cp_config, errors = _decode_control_plane_config(shoot.spec.provider.control_plane_config)
    if errors:
        return errors

    errors = []
    if old_infra_config != infra_config:
        errors.extend(
            validate_infrastructure_config_update(old_infra_config, infra_config, INFRASTRUCTURE_CONFIG_PATH)
        )
    errors.extend(
        validate_vmo_config_update(
            has_shoot_vmo_alpha_annotation(old_shoot.metadata.annotations),
            has_shoot_vmo_alpha_annotation(shoot.metadata.annotations),
            METADATA_PATH,
        )
    )
    errors.extend(validate_workers_update(old_shoot.spec.provider.workers, shoot.spec.provider.workers, WORKERS_PATH))
    errors.extend(_validate_shoot_spec(shoot, old_infra_config, infra_config, cloud_profile, cp_config))
    return errors


def _validate_shoot_spec(
    shoot: Shoot,
    old_infra_config: InfrastructureConfig | None,
    infra_config: InfrastructureConfig,
    cloud_profile: CloudProfile,
    cp_config: ControlPlaneConfig | None,
) -> ErrorList:
    networking = shoot.spec.networking
    errors = validate_networking(networking, NETWORKING_PATH)
    errors.extend(
        validate_infrastructure_config_against_cloud_profile(
            old_infra_config,
            infra_config,
            shoot.spec.region,
            cloud_profile.spec,
            INFRASTRUCTURE_CONFIG_PATH,
        )
    )
    errors.extend(
        validate_infrastructure_config(
            infra_config,
            networking.nodes,
            networking.pods,
            networking.services,
            has_shoot_vmo_alpha_annotation(shoot.metadata.annotations),
            INFRASTRUCTURE_CONFIG_PATH,
            networking_path=NETWORKING_PATH,
        )
    )
    if cp_config is not None:
        errors.extend(
            validate_control_plane_config(cp_config, shoot.spec.kubernetes.version, CONTROL_PLANE_CONFIG_PATH)
        )

    workers = shoot.spec.provider.workers
    errors.extend(validate_workers(workers, infra_config, WORKERS_PATH))
    for i, worker in enumerate(workers):
        if worker.provider_config is None:
            continue
        config_path = WORKERS_PATH.index(i).child("providerConfig")
        worker_config, decode_errors = _decode(WorkerConfig, worker.provider_config, config_path, "WorkerConfig")
        errors.extend(decode_errors)
        if worker_config is not None:
            errors.extend(validate_worker_config(worker_config, config_path))
    return errors


# =============================================================================
# Seed
# =============================================================================


def validate_seed(seed: Seed, old_seed: Seed | None = None) -> ErrorList:
    """Validate the backup bucket config of a seed.

    If the old seed had no backup config, the new one is validated as if
    it were created.
    """
    operation = "create" if old_seed is None else "update"
    with validation_span("Seed", operation=operation, attributes={"seed.name": seed.metadata.name}) as s:
        if old_seed is None or _backup_provider_config(old_seed) is None:
            errors = _validate_seed_creation(seed)
        else:
            errors = _validate_seed_update(old_seed, seed)
        record_result(s, errors)
    return errors


def _backup_provider_config(seed: Seed) -> RawConfig | None:
    if seed.spec.backup is None:
        return None
    return seed.spec.backup.provider_config


def _validate_seed_creation(seed: Seed) -> ErrorList:
    raw = _backup_provider_config(seed)
    if raw is None:
        return []
    config, errors = _decode(BackupBucketConfig, raw, BACKUP_PROVIDER_CONFIG_PATH, "BackupBucketConfig")
    if config is None:
        return errors
    return validate_backup_bucket_config(config, BACKUP_PROVIDER_CONFIG_PATH)


def _validate_seed_update(old_seed: Seed, seed: Seed) -> ErrorList:
    old_raw = _backup_provider_config(old_seed)
    assert old_raw is not None
    old_config, errors = _decode_stored(BackupBucketConfig, old_raw, BACKUP_PROVIDER_CONFIG_PATH, "BackupBucketConfig")
    if old_config is None:
        return errors

    new_config = BackupBucketConfig()
    new_raw = _backup_provider_config(seed)
    if new_raw is not None:
        decoded, errors = _decode(BackupBucketConfig, new_raw, BACKUP_PROVIDER_CONFIG_PATH, "BackupBucketConfig")
        if decoded is None:
            return errors
        new_config = decoded

    errors = validate_backup_bucket_config(new_config, BACKUP_PROVIDER_CONFIG_PATH)
    errors.extend(validate_backup_bucket_config_update(old_config, new_config, BACKUP_PROVIDER_CONFIG_PATH))
    return errors


# =============================================================================
# Cloud profiles
# =============================================================================


def validate_cloud_profile(cloud_profile: CloudProfile) -> ErrorList:
    """Validate the provider config of a cloud profile."""
    with validation_span("CloudProfile", attributes={"cloudprofile.name": cloud_profile.metadata.name}) as s:
        raw = cloud_profile.spec.provider_config
        if raw is None:
            errors = [required(CLOUD_PROFILE_CONFIG_PATH, "providerConfig must be set for Azure cloud profiles")]
        else:
            config, errors = _decode(CloudProfileConfig, raw, CLOUD_PROFILE_CONFIG_PATH, "CloudProfileConfig")
            if config is not None:
                errors = validate_cloud_profile_config(
                    config, cloud_profile.spec.machine_images, CLOUD_PROFILE_CONFIG_PATH
                )
        record_result(s, errors)
    return errors


def validate_namespaced_cloud_profile(profile: NamespacedCloudProfile, parent: CloudProfile) -> ErrorList:
    """Validate the provider config of a namespaced cloud profile against its parent.

    A missing provider config is validated as an empty one.
    """
    with validation_span(
        "NamespacedCloudProfile",
        attributes={"cloudprofile.name": profile.metadata.name, "cloudprofile.parent": parent.metadata.name},
    ) as s:
        errors = _validate_namespaced_cloud_profile(profile, parent)
        record_result(s, errors)
    return errors


def _validate_namespaced_cloud_profile(profile: NamespacedCloudProfile, parent: CloudProfile) -> ErrorList:
    reference = profile.spec.parent
    if reference.kind != CLOUD_PROFILE_REFERENCE_KIND:
        return [not_supported(SPEC_PATH.child("parent", "kind"), reference.kind, [CLOUD_PROFILE_REFERENCE_KIND])]

    config = CloudProfileConfig()
    if profile.spec.provider_config is not None:
        decoded, errors = _decode(
            CloudProfileConfig, profile.spec.provider_config, CLOUD_PROFILE_CONFIG_PATH, "CloudProfileConfig"
        )
        if decoded is None:
            return errors
        config = decoded
    return validate_namespaced_cloud_profile_config(config, profile.spec, parent.spec, CLOUD_PROFILE_CONFIG_PATH)


# =============================================================================
# Secrets and workload identities
# =============================================================================


def validate_secret(
    secret: Secret,
    old_secret: Secret | None = None,
    *,
    kind: str = SECRET_KIND_INFRASTRUCTURE,
) -> ErrorList:
    """Validate a credential secret.

    Args:
        secret: The new secret.
        old_secret: The stored secret, on update. An update that leaves the
            data unchanged is not validated again.
        kind: "infrastructure" for cloud provider credentials, "dns" for
            DNS provider credentials.

    Raises:
        ValueError: If kind is not a known secret kind.
    """
    if kind not in SECRET_KINDS:
        raise ValueError(f"unknown secret kind {kind!r}, expected one of {', '.join(SECRET_KINDS)}")

    if old_secret is not None and old_secret.data == secret.data:
        logger.debug("secret_unchanged", secret=secret.reference)
        return []

    operation = "create" if old_secret is None else "update"
    with validation_span("Secret", operation=operation, attributes={"secret.kind": kind}) as s:
        if kind == SECRET_KIND_DNS:
            errors = validate_dns_secret(secret, SECRET_PATH)
        else:
            errors = validate_infrastructure_secret(secret, SECRET_PATH, old_secret=old_secret)
        record_result(s, errors)
    return errors


def validate_workload_identity(
    workload_identity: WorkloadIdentity,
    old_workload_identity: WorkloadIdentity | None = None,
) -> ErrorList:
    """Validate the Azure config of a workload identity.

    Identities targeting another system are skipped.
    """
    target = workload_identity.spec.target_system
    if target.type != PROVIDER_TYPE:
        return []
    if target.provider_config is None:
        return [required(WORKLOAD_IDENTITY_CONFIG_PATH, "providerConfig must be set for Azure workload identities")]

    operation = "create" if old_workload_identity is None else "update"
    with validation_span("WorkloadIdentity", operation=operation) as s:
        config, errors = _decode(
            WorkloadIdentityConfig, target.provider_config, WORKLOAD_IDENTITY_CONFIG_PATH, "WorkloadIdentityConfig"
        )
        if config is not None:
            errors = _validate_workload_identity_config(config, old_workload_identity)
        record_result(s, errors)
    return errors


def _validate_workload_identity_config(
    config: WorkloadIdentityConfig, old_workload_identity: WorkloadIdentity | None
) -> ErrorList:
    old_raw = old_workload_identity.spec.target_system.provider_config if old_workload_identity else None
    if old_raw is None:
        return validate_workload_identity_config(config, WORKLOAD_IDENTITY_CONFIG_PATH)

    old_config, errors = _decode_stored(
        WorkloadIdentityConfig, old_raw, WORKLOAD_IDENTITY_CONFIG_PATH, "WorkloadIdentityConfig"
    )
    if old_config is None:
        return errors
    return validate_workload_identity_config_update(old_config, config, WORKLOAD_IDENTITY_CONFIG_PATH)

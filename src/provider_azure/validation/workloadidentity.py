"""Validation of WorkloadIdentityConfig."""

from __future__ import annotations

from provider_azure.schemas.control_plane_config import WorkloadIdentityConfig
from provider_azure.validation.field import ErrorList, Path, required, validate_immutable_field
from provider_azure.validation.primitives import validate_guid


def validate_workload_identity_config(config: WorkloadIdentityConfig, path: Path) -> ErrorList:
    """All three identifiers are required and must be GUIDs.

    An empty identifier yields both a Required and an Invalid error.
    """
    fields = (
        ("clientID", config.client_id),
        ("tenantID", config.tenant_id),
        ("subscriptionID", config.subscription_id),
    )
    errors: ErrorList = []
    for name, value in fields:
        if not value:
            errors.append(required(path.child(name), f"{name} is required"))
    for name, value in fields:
        errors.extend(validate_guid(value, path.child(name), name))
    return errors


def validate_workload_identity_config_update(
    old_config: WorkloadIdentityConfig,
    new_config: WorkloadIdentityConfig,
    path: Path,
) -> ErrorList:
    """subscriptionID and tenantID are immutable; the new config must be valid."""
    errors = validate_immutable_field(
        new_config.subscription_id, old_config.subscription_id, path.child("subscriptionID")
    )
    errors.extend(validate_immutable_field(new_config.tenant_id, old_config.tenant_id, path.child("tenantID")))
    errors.extend(validate_workload_identity_config(new_config, path))
    return errors

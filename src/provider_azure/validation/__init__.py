"""Validators for Azure provider configs and credentials.

Every validator is a pure function returning an ErrorList: all findings,
each addressed by the path of the offending field. An empty list means
valid.

Validators:
- validate_infrastructure_config / validate_infrastructure_config_update
- validate_cloud_profile_config / validate_namespaced_cloud_profile_config
- validate_backup_bucket_config / validate_backup_bucket_config_update
- validate_networking / validate_workers / validate_workers_update
- validate_worker_config
- validate_control_plane_config
- validate_workload_identity_config / validate_workload_identity_config_update
- validate_infrastructure_secret / validate_dns_secret
"""

from __future__ import annotations

from provider_azure.validation.backupbucket import (
    RetentionLockState,
    validate_backup_bucket_config,
    validate_backup_bucket_config_update,
)
from provider_azure.validation.cidr import CIDR, validate_pairwise_disjoint
from provider_azure.validation.cloudprofile import (
    validate_cloud_profile_config,
    validate_namespaced_cloud_profile_config,
    validate_provider_machine_image,
)
from provider_azure.validation.controlplane import validate_control_plane_config, validate_feature_gates
from provider_azure.validation.credentials import (
    DNS_CREDENTIALS,
    INFRASTRUCTURE_CREDENTIALS,
    CredentialMapping,
    FieldSpec,
    validate_client_credentials_consistency,
    validate_credentials,
    validate_dns_secret,
    validate_infrastructure_secret,
    validate_predefined_values,
)
from provider_azure.validation.field import (
    ErrorList,
    ErrorType,
    FieldError,
    Path,
    to_aggregate,
    validate_immutable_field,
)
from provider_azure.validation.infrastructure import (
    NetworkLayout,
    validate_infrastructure_config,
    validate_infrastructure_config_against_cloud_profile,
    validate_infrastructure_config_update,
    validate_vmo_config_update,
)
from provider_azure.validation.primitives import (
    is_guid,
    parse_resource_id,
    validate_generic_name,
    validate_guid,
    validate_public_ip_name,
    validate_resource_group_name,
    validate_resource_id,
    validate_service_endpoint,
    validate_vnet_name,
)
from provider_azure.validation.shoot import validate_networking, validate_workers, validate_workers_update
from provider_azure.validation.worker import validate_worker_config
from provider_azure.validation.workloadidentity import (
    validate_workload_identity_config,
    validate_workload_identity_config_update,
)

__all__ = [
    # Field errors
    "ErrorList",
    "ErrorType",
    "FieldError",
    "Path",
    "to_aggregate",
    "validate_immutable_field",
    # Primitives
    "CIDR",
    "validate_pairwise_disjoint",
    "is_guid",
    "parse_resource_id",
    "validate_guid",
    "validate_generic_name",
    "validate_public_ip_name",
    "validate_resource_group_name",
    "validate_resource_id",
    "validate_service_endpoint",
    "validate_vnet_name",
    # Credentials
    "CredentialMapping",
    "FieldSpec",
    "INFRASTRUCTURE_CREDENTIALS",
    "DNS_CREDENTIALS",
    "validate_credentials",
    "validate_predefined_values",
    "validate_client_credentials_consistency",
    "validate_infrastructure_secret",
    "validate_dns_secret",
    # Infrastructure
    "NetworkLayout",
    "validate_infrastructure_config",
    "validate_infrastructure_config_update",
    "validate_infrastructure_config_against_cloud_profile",
    "validate_vmo_config_update",
    # Cloud profile
    "validate_cloud_profile_config",
    "validate_namespaced_cloud_profile_config",
    "validate_provider_machine_image",
    # Backup bucket
    "RetentionLockState",
    "validate_backup_bucket_config",
    "validate_backup_bucket_config_update",
    # Shoot, workers and control plane
    "validate_networking",
    "validate_workers",
    "validate_workers_update",
    "validate_worker_config",
    "validate_control_plane_config",
    "validate_feature_gates",
    # Workload identity
    "validate_workload_identity_config",
    "validate_workload_identity_config_update",
]

"""Schema definitions for provider-azure-validation.

Provider configs (strict, unknown keys rejected):
- InfrastructureConfig: Networks, zones, NAT gateways and identity of a shoot
- ControlPlaneConfig: Cloud-controller-manager feature gates and storage
- WorkerConfig: Node template of a worker pool
- CloudProfileConfig: Machine images, machine types and domain counts
- BackupBucketConfig: Retention policy and key rotation of a backup bucket
- WorkloadIdentityConfig: Azure identifiers for workload identity

Orchestrator objects (unknown keys ignored):
- Shoot, Seed, CloudProfile, NamespacedCloudProfile, WorkloadIdentity
- Secret: Credential secret with decoded data
"""

from __future__ import annotations

from provider_azure.schemas.backup_bucket_config import (
    BackupBucketConfig,
    ImmutableConfig,
    RotationConfig,
    format_duration,
    parse_duration,
)
from provider_azure.schemas.base import ApiModel, ObjectModel, load_manifest
from provider_azure.schemas.cloud_profile_config import (
    CloudConfiguration,
    CloudProfileConfig,
    DomainCount,
    MachineImages,
    MachineImageVersion,
    MachineType,
)
from provider_azure.schemas.control_plane_config import (
    CloudControllerManagerConfig,
    ControlPlaneConfig,
    NodeTemplate,
    Storage,
    WorkerConfig,
    WorkloadIdentityConfig,
)
from provider_azure.schemas.core import (
    CloudProfile,
    CloudProfileSpec,
    NamespacedCloudProfile,
    NamespacedCloudProfileSpec,
    Seed,
    Shoot,
    WorkloadIdentity,
)
from provider_azure.schemas.infrastructure_config import (
    IdentityConfig,
    InfrastructureConfig,
    NatGatewayConfig,
    NetworkConfig,
    PublicIPReference,
    ResourceGroup,
    VNet,
    Zone,
    ZonedNatGatewayConfig,
    ZonedPublicIPReference,
)
from provider_azure.schemas.secret import Secret

__all__ = [
    # Base
    "ApiModel",
    "ObjectModel",
    "load_manifest",
    # InfrastructureConfig
    "InfrastructureConfig",
    "NetworkConfig",
    "VNet",
    "Zone",
    "NatGatewayConfig",
    "ZonedNatGatewayConfig",
    "PublicIPReference",
    "ZonedPublicIPReference",
    "ResourceGroup",
    "IdentityConfig",
    # ControlPlaneConfig, WorkerConfig, WorkloadIdentityConfig
    "ControlPlaneConfig",
    "CloudControllerManagerConfig",
    "Storage",
    "WorkerConfig",
    "NodeTemplate",
    "WorkloadIdentityConfig",
    # CloudProfileConfig
    "CloudProfileConfig",
    "CloudConfiguration",
    "DomainCount",
    "MachineImages",
    "MachineImageVersion",
    "MachineType",
    # BackupBucketConfig
    "BackupBucketConfig",
    "ImmutableConfig",
    "RotationConfig",
    "parse_duration",
    "format_duration",
    # Orchestrator objects
    "Shoot",
    "Seed",
    "WorkloadIdentity",
    "CloudProfile",
    "CloudProfileSpec",
    "NamespacedCloudProfile",
    "NamespacedCloudProfileSpec",
    "Secret",
]

"""Orchestrator objects, reduced to the fields the validators read.

Shoots, seeds and cloud profiles belong to the orchestrator. Their embedded
``providerConfig`` documents are kept raw here; ``provider_azure.admission``
decodes them into the provider config models.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from provider_azure.schemas.base import ObjectModel

RawConfig = dict[str, Any]


class ObjectMeta(ObjectModel):
    """Identity and annotations of an orchestrator object."""

    name: str = ""
    namespace: str = ""
    annotations: dict[str, str] = Field(default_factory=dict)


# =============================================================================
# Shoot
# =============================================================================


class Volume(ObjectModel):
    """Root disk of a worker node."""

    name: str | None = None
    type: str | None = None
    size: str = ""
    encrypted: bool | None = None


class DataVolume(ObjectModel):
    """Additional disk of a worker node."""

    name: str = ""
    type: str | None = None
    size: str = ""
    encrypted: bool | None = None


class WorkerKubernetes(ObjectModel):
    version: str | None = None


class Worker(ObjectModel):
    """Worker pool of a shoot."""

    name: str
    zones: list[str] = Field(default_factory=list)
    volume: Volume | None = None
    data_volumes: list[DataVolume] = Field(default_factory=list)
    kubernetes: WorkerKubernetes | None = None
    provider_config: RawConfig | None = None


class Networking(ObjectModel):
    """Network settings of a shoot."""

    type: str | None = None
    provider_config: RawConfig | None = None
    nodes: str | None = None
    pods: str | None = None
    services: str | None = None
    ip_families: list[str] = Field(default_factory=list)


class Provider(ObjectModel):
    type: str = "azure"
    infrastructure_config: RawConfig | None = None
    control_plane_config: RawConfig | None = None
    workers: list[Worker] = Field(default_factory=list)


class Kubernetes(ObjectModel):
    version: str = ""


class ShootSpec(ObjectModel):
    region: str = ""
    cloud_profile_name: str | None = None
    kubernetes: Kubernetes = Field(default_factory=Kubernetes)
    networking: Networking = Field(default_factory=Networking)
    provider: Provider = Field(default_factory=Provider)


class Shoot(ObjectModel):
    """A cluster requested by a user."""

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: ShootSpec = Field(default_factory=ShootSpec)


# =============================================================================
# Cloud profiles
# =============================================================================


class AvailabilityZone(ObjectModel):
    name: str


class Region(ObjectModel):
    name: str
    zones: list[AvailabilityZone] = Field(default_factory=list)


class MachineImageVersion(ObjectModel):
    """Generic machine image version; lists the architectures it is built for."""

    version: str
    architectures: list[str] = Field(default_factory=lambda: ["amd64"])


class MachineImage(ObjectModel):
    name: str
    versions: list[MachineImageVersion] = Field(default_factory=list)


class MachineType(ObjectModel):
    name: str


class CloudProfileSpec(ObjectModel):
    """Generic catalog of regions, images and machine types."""

    regions: list[Region] = Field(default_factory=list)
    machine_images: list[MachineImage] = Field(default_factory=list)
    machine_types: list[MachineType] = Field(default_factory=list)
    provider_config: RawConfig | None = None


class CloudProfile(ObjectModel):
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: CloudProfileSpec = Field(default_factory=CloudProfileSpec)


class CloudProfileReference(ObjectModel):
    kind: str = "CloudProfile"
    name: str = ""


class NamespacedCloudProfileSpec(ObjectModel):
    """Project-local extension of a parent cloud profile."""

    parent: CloudProfileReference = Field(default_factory=CloudProfileReference)
    machine_images: list[MachineImage] = Field(default_factory=list)
    machine_types: list[MachineType] = Field(default_factory=list)
    provider_config: RawConfig | None = None


class NamespacedCloudProfile(ObjectModel):
    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: NamespacedCloudProfileSpec = Field(default_factory=NamespacedCloudProfileSpec)


# =============================================================================
# Seed
# =============================================================================


class SeedBackup(ObjectModel):
    provider: str = ""
    provider_config: RawConfig | None = None


class SeedSpec(ObjectModel):
    backup: SeedBackup | None = None


class Seed(ObjectModel):
    """A cluster hosting shoot control planes."""

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: SeedSpec = Field(default_factory=SeedSpec)


# =============================================================================
# WorkloadIdentity
# =============================================================================


class TargetSystem(ObjectModel):
    type: str = ""
    provider_config: RawConfig | None = None


class WorkloadIdentitySpec(ObjectModel):
    audiences: list[str] = Field(default_factory=list)
    target_system: TargetSystem = Field(default_factory=TargetSystem)


class WorkloadIdentity(ObjectModel):
    """An identity whose tokens are trusted by a target system such as Azure."""

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    spec: WorkloadIdentitySpec = Field(default_factory=WorkloadIdentitySpec)

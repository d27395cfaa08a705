"""ControlPlaneConfig, WorkerConfig and WorkloadIdentityConfig."""

from __future__ import annotations

from pydantic import Field

from provider_azure.schemas.base import ApiModel


class CloudControllerManagerConfig(ApiModel):
    """Settings of the cloud-controller-manager."""

    feature_gates: dict[str, bool] = Field(default_factory=dict)


class Storage(ApiModel):
    """Storage settings of the shoot."""

    managed_default_storage_class: bool | None = None
    managed_default_volume_snapshot_class: bool | None = None


class ControlPlaneConfig(ApiModel):
    """Provider config of a shoot's control plane."""

    api_version: str | None = None
    kind: str | None = None
    cloud_controller_manager: CloudControllerManagerConfig | None = None
    storage: Storage | None = None


class NodeTemplate(ApiModel):
    """Resources a node of the pool offers, used when scaling from zero."""

    capacity: dict[str, str | int | float] = Field(default_factory=dict)


class WorkerConfig(ApiModel):
    """Provider config of a worker pool."""

    api_version: str | None = None
    kind: str | None = None
    node_template: NodeTemplate | None = None


class WorkloadIdentityConfig(ApiModel):
    """Azure identifiers used for workload identity federation."""

    api_version: str | None = None
    kind: str | None = None
    client_id: str = Field(default="", alias="clientID")
    tenant_id: str = Field(default="", alias="tenantID")
    subscription_id: str = Field(default="", alias="subscriptionID")

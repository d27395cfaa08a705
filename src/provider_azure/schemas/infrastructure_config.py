"""InfrastructureConfig: network and topology of an Azure shoot.

The network layout is chosen by which of ``networks.workers`` and
``networks.zones`` is set:

- single-subnet: one ``workers`` CIDR shared by all zones;
- multi-subnet: one subnet per entry in ``zones``.

Example:
    >>> config = InfrastructureConfig.model_validate({
    ...     "networks": {"vnet": {"cidr": "10.0.0.0/8"}, "workers": "10.250.0.0/16"},
    ...     "zoned": True,
    ... })
    >>> config.networks.workers
    '10.250.0.0/16'
"""

from __future__ import annotations

from pydantic import Field

from provider_azure.schemas.base import ApiModel


class ResourceGroup(ApiModel):
    """Reference to an existing resource group."""

    name: str


class IdentityConfig(ApiModel):
    """Reference to a user-assigned managed identity."""

    name: str = ""
    resource_group: str = ""
    acr_access: bool | None = None


class VNet(ApiModel):
    """Virtual network of the shoot.

    Three shapes are meaningful: default (nothing set), managed with a
    CIDR (``cidr`` only) and a reference to an existing VNet (``name`` and
    ``resource_group``).
    """

    name: str | None = None
    resource_group: str | None = None
    cidr: str | None = None
    ddos_protection_plan_id: str | None = Field(default=None, alias="ddosProtectionPlanID")

    @property
    def is_external(self) -> bool:
        return self.name is not None and self.resource_group is not None

    @property
    def is_default(self) -> bool:
        return self.name is None and self.resource_group is None and self.cidr is None


class PublicIPReference(ApiModel):
    """Existing public IP attached to a NAT gateway."""

    name: str = ""
    resource_group: str = ""
    zone: int = 0


class NatGatewayConfig(ApiModel):
    """NAT gateway of the single-subnet layout."""

    enabled: bool = False
    idle_connection_timeout_minutes: int | None = None
    zone: int | None = None
    ip_addresses: list[PublicIPReference] = Field(default_factory=list)


class ZonedPublicIPReference(ApiModel):
    """Existing public IP of a zone's NAT gateway; the zone is implied."""

    name: str = ""
    resource_group: str = ""


class ZonedNatGatewayConfig(ApiModel):
    """NAT gateway of one zone in the multi-subnet layout."""

    enabled: bool = False
    idle_connection_timeout_minutes: int | None = None
    ip_addresses: list[ZonedPublicIPReference] = Field(default_factory=list)


class Zone(ApiModel):
    """Subnet of one availability zone."""

    name: int
    cidr: str
    nat_gateway: ZonedNatGatewayConfig | None = None
    service_endpoints: list[str] = Field(default_factory=list)


class NetworkConfig(ApiModel):
    """Networks of the shoot."""

    vnet: VNet = Field(default_factory=VNet)
    workers: str | None = None
    zones: list[Zone] = Field(default_factory=list)
    nat_gateway: NatGatewayConfig | None = None
    service_endpoints: list[str] = Field(default_factory=list)


class InfrastructureConfig(ApiModel):
    """Provider config of a shoot's infrastructure."""

    api_version: str | None = None
    kind: str | None = None
    resource_group: ResourceGroup | None = None
    networks: NetworkConfig = Field(default_factory=NetworkConfig)
    identity: IdentityConfig | None = None
    zoned: bool = False

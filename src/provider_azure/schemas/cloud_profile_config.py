"""CloudProfileConfig: Azure specifics of a cloud profile."""

from __future__ import annotations

from pydantic import Field

from provider_azure.schemas.base import ApiModel

ARCHITECTURE_AMD64 = "amd64"
ARCHITECTURE_ARM64 = "arm64"
VALID_ARCHITECTURES = (ARCHITECTURE_AMD64, ARCHITECTURE_ARM64)


class DomainCount(ApiModel):
    """Fault or update domain count of a region."""

    region: str = ""
    count: int = 0


class MachineImageVersion(ApiModel):
    """One version of a machine image and the Azure image it maps to.

    Exactly one of ``urn``, ``id``, ``community_gallery_image_id`` and
    ``shared_gallery_image_id`` names the image.
    """

    version: str = ""
    urn: str | None = None
    id: str | None = None
    community_gallery_image_id: str | None = Field(default=None, alias="communityGalleryImageID")
    shared_gallery_image_id: str | None = Field(default=None, alias="sharedGalleryImageID")
    accelerated_networking: bool | None = None
    skip_marketplace_agreement: bool | None = None
    architecture: str | None = None

    @property
    def effective_architecture(self) -> str:
        return self.architecture if self.architecture is not None else ARCHITECTURE_AMD64

    @property
    def image_reference_count(self) -> int:
        references = (self.urn, self.id, self.community_gallery_image_id, self.shared_gallery_image_id)
        return sum(1 for reference in references if reference is not None)


class MachineImages(ApiModel):
    """Versions of one machine image."""

    name: str = ""
    versions: list[MachineImageVersion] = Field(default_factory=list)


class MachineType(ApiModel):
    """Azure specifics of a machine type."""

    name: str
    accelerated_networking: bool | None = None


class CloudConfiguration(ApiModel):
    """Azure cloud instance (public, China, government)."""

    name: str


class CloudProfileConfig(ApiModel):
    """Provider config of a cloud profile."""

    api_version: str | None = None
    kind: str | None = None
    count_update_domains: list[DomainCount] = Field(default_factory=list)
    count_fault_domains: list[DomainCount] = Field(default_factory=list)
    machine_images: list[MachineImages] = Field(default_factory=list)
    machine_types: list[MachineType] = Field(default_factory=list)
    cloud_configuration: CloudConfiguration | None = None


def version_architecture_key(version: str, architecture: str) -> str:
    """Key of a provider image version, e.g. "1.2.3-arm64"."""
    return f"{version}-{architecture}"

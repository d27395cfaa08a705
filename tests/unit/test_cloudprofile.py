"""Unit tests for CloudProfileConfig validation."""

from __future__ import annotations

from typing import Any

from provider_azure.schemas import core
from provider_azure.schemas.cloud_profile_config import CloudProfileConfig
from provider_azure.validation.cloudprofile import (
    IMAGE_REFERENCE_DETAIL,
    validate_cloud_profile_config,
    validate_namespaced_cloud_profile_config,
)
from provider_azure.validation.field import ErrorType, Path

PATH = Path("spec", "providerConfig")
URN = "sap:gardenlinux:greatest:1592.1.0"
COMMUNITY_IMAGE_ID = "/CommunityGalleries/gardenlinux-13e998fe/Images/gardenlinux/Versions/1592.1.0"
SHARED_IMAGE_ID = "/SharedGalleries/id-123/Images/gardenlinux/Versions/1592.1.0"


def provider_config(versions: list[dict[str, Any]], **extra: Any) -> CloudProfileConfig:
    document: dict[str, Any] = {
        "countUpdateDomains": [{"region": "westeurope", "count": 5}],
        "countFaultDomains": [{"region": "westeurope", "count": 3}],
        "machineImages": [{"name": "gardenlinux", "versions": versions}],
    }
    document.update(extra)
    return CloudProfileConfig.model_validate(document)


def generic_images(*versions: dict[str, Any]) -> list[core.MachineImage]:
    return [core.MachineImage.model_validate({"name": "gardenlinux", "versions": list(versions)})]


class TestValidateCloudProfileConfig:
    """Tests for cloud profile provider configs."""

    def test_valid(self) -> None:
        """One urn per version, matching the generic catalog, is valid."""
        config = provider_config([{"version": "1592.1.0", "urn": URN}])
        assert validate_cloud_profile_config(config, generic_images({"version": "1592.1.0"}), PATH) == []

    def test_multiple_image_references(self) -> None:
        """A version naming several images yields one Required at the version."""
        config = provider_config(
            [
                {
                    "version": "1592.1.0",
                    "urn": URN,
                    "id": "/subscriptions/x/resourceGroups/y/providers/Microsoft.Compute/images/z",
                    "communityGalleryImageID": COMMUNITY_IMAGE_ID,
                }
            ]
        )
        errors = validate_cloud_profile_config(config, generic_images({"version": "1592.1.0"}), PATH)
        assert len(errors) == 1
        assert errors[0].type is ErrorType.REQUIRED
        assert errors[0].field == "spec.providerConfig.machineImages[0].versions[0]"
        assert errors[0].detail == IMAGE_REFERENCE_DETAIL

    def test_no_image_reference(self) -> None:
        """A version without any image reference is Required as well."""
        config = provider_config([{"version": "1592.1.0"}])
        errors = validate_cloud_profile_config(config, generic_images({"version": "1592.1.0"}), PATH)
        assert [e.field for e in errors] == ["spec.providerConfig.machineImages[0].versions[0]"]

    def test_malformed_urn(self) -> None:
        """A urn needs four colon-separated parts."""
        config = provider_config([{"version": "1592.1.0", "urn": "sap:gardenlinux"}])
        errors = validate_cloud_profile_config(config, generic_images({"version": "1592.1.0"}), PATH)
        assert [(e.type, e.field) for e in errors] == [
            (ErrorType.INVALID, "spec.providerConfig.machineImages[0].versions[0].urn")
        ]

    def test_gallery_prefixes(self) -> None:
        """Gallery image IDs must start with their gallery kind."""
        config = provider_config(
            [
                {"version": "1592.1.0", "communityGalleryImageID": SHARED_IMAGE_ID},
                {"version": "1592.2.0", "sharedGalleryImageID": SHARED_IMAGE_ID},
            ]
        )
        images = generic_images({"version": "1592.1.0"}, {"version": "1592.2.0"})
        errors = validate_cloud_profile_config(config, images, PATH)
        assert [e.field for e in errors] == [
            "spec.providerConfig.machineImages[0].versions[0].communityGalleryImageID"
        ]
        assert errors[0].detail == "communityGalleryImageID must start with '/CommunityGalleries/' prefix"

    def test_unsupported_architecture(self) -> None:
        """Only amd64 and arm64 are supported."""
        config = provider_config([{"version": "1592.1.0", "urn": URN, "architecture": "s390x"}])
        errors = validate_cloud_profile_config(config, [], PATH)
        assert [(e.type, e.field) for e in errors] == [
            (ErrorType.NOT_SUPPORTED, "spec.providerConfig.machineImages[0].versions[0].architecture")
        ]

    def test_missing_domain_counts(self) -> None:
        """Update and fault domain counts are required."""
        config = CloudProfileConfig.model_validate(
            {"machineImages": [{"name": "gardenlinux", "versions": [{"version": "1592.1.0", "urn": URN}]}]}
        )
        errors = validate_cloud_profile_config(config, [], PATH)
        assert {e.field for e in errors} == {
            "spec.providerConfig.countFaultDomains",
            "spec.providerConfig.countUpdateDomains",
        }

    def test_no_machine_images(self) -> None:
        """At least one provider image is required."""
        config = CloudProfileConfig.model_validate(
            {
                "countUpdateDomains": [{"region": "westeurope", "count": 5}],
                "countFaultDomains": [{"region": "westeurope", "count": -1}],
            }
        )
        errors = validate_cloud_profile_config(config, generic_images({"version": "1592.1.0"}), PATH)
        assert [(e.type, e.field) for e in errors] == [
            (ErrorType.INVALID, "spec.providerConfig.countFaultDomains[0].count"),
            (ErrorType.REQUIRED, "spec.providerConfig.machineImages"),
        ]

    def test_missing_architecture_mapping(self) -> None:
        """Every generic version and architecture needs a provider mapping."""
        config = provider_config([{"version": "1592.1.0", "urn": URN}])
        images = generic_images({"version": "1592.1.0", "architectures": ["amd64", "arm64"]})
        errors = validate_cloud_profile_config(config, images, PATH)
        assert len(errors) == 1
        assert errors[0].field == "spec.providerConfig.machineImages.versions"
        assert errors[0].detail == 'must provide an image mapping for version "1592.1.0" and architecture: arm64'

    def test_missing_image_mapping(self) -> None:
        """A generic image without provider image is reported once."""
        config = provider_config([{"version": "1592.1.0", "urn": URN}])
        images = [core.MachineImage.model_validate({"name": "ubuntu", "versions": [{"version": "22.04"}]})]
        errors = validate_cloud_profile_config(config, images, PATH)
        assert [e.detail for e in errors] == ['must provide a provider image mapping for image "ubuntu"']


class TestValidateNamespacedCloudProfileConfig:
    """Tests for namespaced cloud profile provider configs."""

    def _parent(self) -> core.CloudProfileSpec:
        return core.CloudProfileSpec.model_validate(
            {
                "machineImages": [{"name": "gardenlinux", "versions": [{"version": "1592.1.0"}]}],
                "machineTypes": [{"name": "Standard_D4s_v5"}],
            }
        )

    def _profile(self, **extra: Any) -> core.NamespacedCloudProfileSpec:
        document: dict[str, Any] = {
            "parent": {"kind": "CloudProfile", "name": "azure"},
            "machineImages": [{"name": "gardenlinux", "versions": [{"version": "1592.2.0"}]}],
        }
        document.update(extra)
        return core.NamespacedCloudProfileSpec.model_validate(document)

    def test_valid_extension(self) -> None:
        """New versions declared in spec.machineImages and mapped in the config are valid."""
        config = CloudProfileConfig.model_validate(
            {"machineImages": [{"name": "gardenlinux", "versions": [{"version": "1592.2.0", "urn": URN}]}]}
        )
        assert validate_namespaced_cloud_profile_config(config, self._profile(), self._parent()) == []

    def test_forbidden_profile_wide_settings(self) -> None:
        """Domain counts and cloud configuration belong to the parent."""
        config = CloudProfileConfig.model_validate(
            {
                "cloudConfiguration": {"name": "AzurePublic"},
                "countUpdateDomains": [{"region": "westeurope", "count": 5}],
                "countFaultDomains": [{"region": "westeurope", "count": 3}],
                "machineImages": [{"name": "gardenlinux", "versions": [{"version": "1592.2.0", "urn": URN}]}],
            }
        )
        errors = validate_namespaced_cloud_profile_config(config, self._profile(), self._parent())
        assert [(e.type, e.field) for e in errors] == [
            (ErrorType.FORBIDDEN, "spec.providerConfig.cloudConfiguration"),
            (ErrorType.FORBIDDEN, "spec.providerConfig.countUpdateDomains"),
            (ErrorType.FORBIDDEN, "spec.providerConfig.countFaultDomains"),
        ]

    def test_version_missing_in_config(self) -> None:
        """A version only added by spec.machineImages must be mapped in the config."""
        config = CloudProfileConfig()
        errors = validate_namespaced_cloud_profile_config(config, self._profile(), self._parent())
        assert [(e.type, e.field) for e in errors] == [(ErrorType.REQUIRED, "spec.providerConfig.machineImages")]
        assert "gardenlinux@1592.2.0" in errors[0].detail

    def test_version_already_in_parent(self) -> None:
        """Versions of the parent must not be redefined."""
        config = CloudProfileConfig.model_validate(
            {"machineImages": [{"name": "gardenlinux", "versions": [{"version": "1592.1.0", "urn": URN}]}]}
        )
        profile = self._profile(
            machineImages=[{"name": "gardenlinux", "versions": [{"version": "1592.1.0"}]}]
        )
        errors = validate_namespaced_cloud_profile_config(config, profile, self._parent())
        assert [(e.type, e.field) for e in errors] == [
            (ErrorType.FORBIDDEN, "spec.providerConfig.machineImages[0].versions[0]")
        ]

    def test_machine_types(self) -> None:
        """Machine types must be new and declared in the spec."""
        config = CloudProfileConfig.model_validate(
            {
                "machineImages": [{"name": "gardenlinux", "versions": [{"version": "1592.2.0", "urn": URN}]}],
                "machineTypes": [{"name": "Standard_D4s_v5"}],
            }
        )
        errors = validate_namespaced_cloud_profile_config(config, self._profile(), self._parent())
        assert [(e.type, e.field) for e in errors] == [
            (ErrorType.FORBIDDEN, "spec.providerConfig.machineTypes[0]"),
            (ErrorType.REQUIRED, "spec.providerConfig.machineTypes[0]"),
        ]

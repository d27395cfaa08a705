"""Validation of CloudProfileConfig.

Each provider image version names its Azure image by exactly one of urn,
id, community gallery ID or shared gallery ID. Every image version and
architecture of the generic catalog needs such a provider mapping.
"""

from __future__ import annotations

from collections.abc import Sequence

from provider_azure.schemas import core
from provider_azure.schemas.cloud_profile_config import (
    VALID_ARCHITECTURES,
    CloudProfileConfig,
    DomainCount,
    MachineImages,
    MachineImageVersion,
    version_architecture_key,
)
from provider_azure.validation.field import (
    ErrorList,
    Path,
    forbidden,
    invalid,
    not_supported,
    required,
)

IMAGE_REFERENCE_DETAIL = "must provide either urn, id, sharedGalleryImageID or communityGalleryImageID"


def validate_cloud_profile_config(
    config: CloudProfileConfig,
    machine_images: Sequence[core.MachineImage],
    path: Path,
) -> ErrorList:
    """Validate a cloud profile's provider config against its generic image catalog.

    Args:
        config: The provider config.
        machine_images: The generic machine images of the cloud profile.
        path: Path of the provider config.

    Returns:
        All findings. Without any provider image, image checks are skipped.
    """
    errors: ErrorList = []
    errors.extend(_validate_domain_count(config.count_fault_domains, path.child("countFaultDomains")))
    errors.extend(_validate_domain_count(config.count_update_domains, path.child("countUpdateDomains")))

    images_path = path.child("machineImages")
    if not config.machine_images:
        errors.append(required(images_path, "must provide at least one machine image"))
        return errors

    for i, machine_image in enumerate(config.machine_images):
        errors.extend(validate_provider_machine_image(machine_image, images_path.index(i)))

    errors.extend(_validate_provider_images_mapping(config.machine_images, machine_images, images_path))
    return errors


def _validate_domain_count(counts: Sequence[DomainCount], path: Path) -> ErrorList:
    errors: ErrorList = []
    if not counts:
        errors.append(required(path, "must provide at least one domain count"))

    for i, count in enumerate(counts):
        if not count.region:
            errors.append(required(path.index(i).child("region"), "must provide a region"))
        if count.count < 0:
            errors.append(invalid(path.index(i).child("count"), count.count, "count must not be negative"))
    return errors


def validate_provider_machine_image(machine_image: MachineImages, path: Path) -> ErrorList:
    """Validate one provider image and all of its versions."""
    errors: ErrorList = []
    if not machine_image.name:
        errors.append(required(path.child("name"), "must provide a name"))
    if not machine_image.versions:
        errors.append(
            required(
                path.child("versions"),
                f'must provide at least one version for machine image "{machine_image.name}"',
            )
        )

    for j, version in enumerate(machine_image.versions):
        errors.extend(_validate_machine_image_version(version, path.child("versions").index(j)))
    return errors


def _validate_machine_image_version(version: MachineImageVersion, path: Path) -> ErrorList:
    errors: ErrorList = []
    if not version.version:
        errors.append(required(path.child("version"), "must provide a version"))

    if version.image_reference_count != 1:
        errors.append(required(path, IMAGE_REFERENCE_DETAIL))

    if version.urn is not None:
        if not version.urn:
            errors.append(required(path.child("urn"), "urn cannot be empty when defined"))
        elif len(version.urn.split(":")) != 4:
            errors.append(
                invalid(
                    path.child("urn"),
                    version.urn,
                    "please use the format `Publisher:Offer:Sku:Version` for the urn",
                )
            )

    if version.id is not None and not version.id:
        errors.append(required(path.child("id"), "id cannot be empty when defined"))

    if version.community_gallery_image_id is not None:
        errors.extend(
            _validate_gallery_image_id(
                version.community_gallery_image_id,
                path.child("communityGalleryImageID"),
                field_name="communityGalleryImageID",
                prefix="CommunityGalleries",
                format_hint="/CommunityGalleries/<gallery id>/Images/<image id>/versions/<version id>",
            )
        )
    if version.shared_gallery_image_id is not None:
        errors.extend(
            _validate_gallery_image_id(
                version.shared_gallery_image_id,
                path.child("sharedGalleryImageID"),
                field_name="sharedGalleryImageID",
                prefix="SharedGalleries",
                format_hint=(
                    "/SharedGalleries/<sharedGalleryName>/Images/<sharedGalleryImageName>"
                    "/Versions/<sharedGalleryImageVersionName>"
                ),
            )
        )

    architecture = version.effective_architecture
    if architecture not in VALID_ARCHITECTURES:
        errors.append(not_supported(path.child("architecture"), architecture, VALID_ARCHITECTURES))
    return errors


def _validate_gallery_image_id(
    image_id: str,
    path: Path,
    *,
    field_name: str,
    prefix: str,
    format_hint: str,
) -> ErrorList:
    if not image_id:
        return [required(path, f"{field_name} cannot be empty when defined")]

    parts = image_id.split("/")
    if len(parts) != 7:
        return [invalid(path, image_id, f"please use the format `{format_hint}` for the {field_name}")]
    if parts[1].lower() != prefix.lower():
        return [invalid(path, image_id, f"{field_name} must start with '/{prefix}/' prefix")]
    return []


def _provider_image_index(images: Sequence[MachineImages]) -> dict[str, set[str]]:
    """Map image name to its set of "<version>-<architecture>" keys."""
    index: dict[str, set[str]] = {}
    for image in images:
        keys = index.setdefault(image.name, set())
        for version in image.versions:
            keys.add(version_architecture_key(version.version, version.effective_architecture))
    return index


def _validate_provider_images_mapping(
    provider_images: Sequence[MachineImages],
    machine_images: Sequence[core.MachineImage],
    path: Path,
) -> ErrorList:
    errors: ErrorList = []
    provider_index = _provider_image_index(provider_images)

    for machine_image in machine_images:
        if machine_image.name not in provider_index:
            errors.append(
                required(path, f'must provide a provider image mapping for image "{machine_image.name}"')
            )
            continue

        keys = provider_index[machine_image.name]
        for version in machine_image.versions:
            for architecture in version.architectures:
                if version_architecture_key(version.version, architecture) not in keys:
                    errors.append(
                        required(
                            path.child("versions"),
                            f'must provide an image mapping for version "{version.version}" '
                            f"and architecture: {architecture}",
                        )
                    )
    return errors


# =============================================================================
# Namespaced cloud profiles
# =============================================================================


def validate_namespaced_cloud_profile_config(
    config: CloudProfileConfig,
    profile_spec: core.NamespacedCloudProfileSpec,
    parent_spec: core.CloudProfileSpec,
    path: Path | None = None,
) -> ErrorList:
    """Validate the provider config of a namespaced cloud profile.

    A namespaced profile may only add image versions and machine types that
    its parent does not define, and only for entries of its own spec.
    """
    path = path or Path("spec", "providerConfig")
    errors: ErrorList = []

    if config.cloud_configuration is not None:
        errors.append(
            forbidden(
                path.child("cloudConfiguration"),
                "cloud configuration is not allowed in a NamespacedCloudProfile providerConfig",
            )
        )
    if config.count_update_domains:
        errors.append(
            forbidden(
                path.child("countUpdateDomains"),
                "count update domains is not allowed in a NamespacedCloudProfile providerConfig",
            )
        )
    if config.count_fault_domains:
        errors.append(
            forbidden(
                path.child("countFaultDomains"),
                "count fault domains is not allowed in a NamespacedCloudProfile providerConfig",
            )
        )

    errors.extend(_validate_namespaced_machine_images(config, profile_spec, parent_spec, path))
    errors.extend(_validate_namespaced_machine_types(config, profile_spec, parent_spec, path))
    return errors


def _generic_image_index(images: Sequence[core.MachineImage]) -> dict[str, dict[str, core.MachineImageVersion]]:
    return {image.name: {v.version: v for v in image.versions} for image in images}


def _validate_namespaced_machine_images(
    config: CloudProfileConfig,
    profile_spec: core.NamespacedCloudProfileSpec,
    parent_spec: core.CloudProfileSpec,
    path: Path,
) -> ErrorList:
    errors: ErrorList = []
    images_path = path.child("machineImages")

    for i, machine_image in enumerate(config.machine_images):
        errors.extend(validate_provider_machine_image(machine_image, images_path.index(i)))

    profile_images = _generic_image_index(profile_spec.machine_images)
    parent_images = _generic_image_index(parent_spec.machine_images)
    provider_images = _provider_image_index(config.machine_images)

    for machine_image in profile_spec.machine_images:
        in_parent = machine_image.name in parent_images
        if not in_parent and machine_image.name not in provider_images:
            errors.append(
                required(
                    images_path,
                    f"machine image {machine_image.name} is not defined in the "
                    "NamespacedCloudProfile providerConfig",
                )
            )
            continue
        parent_versions = parent_images.get(machine_image.name, {})
        provider_keys = provider_images.get(machine_image.name, set())
        for version in machine_image.versions:
            if version.version in parent_versions:
                continue
            for architecture in version.architectures:
                if version_architecture_key(version.version, architecture) not in provider_keys:
                    errors.append(
                        required(
                            images_path,
                            f"machine image version {machine_image.name}@{version.version} is not "
                            "defined in the NamespacedCloudProfile providerConfig",
                        )
                    )

    for i, machine_image in enumerate(config.machine_images):
        image_path = images_path.index(i)
        parent_versions = parent_images.get(machine_image.name, {})
        for j, version in enumerate(machine_image.versions):
            if version.version in parent_versions:
                errors.append(
                    forbidden(
                        image_path.child("versions").index(j),
                        f"machine image version {machine_image.name}@{version.version} is already "
                        "defined in the parent CloudProfile",
                    )
                )

        if machine_image.name not in profile_images:
            errors.append(
                required(
                    image_path,
                    f"machine image {machine_image.name} is not defined in the "
                    "NamespacedCloudProfile .spec.machineImages",
                )
            )
            continue

        profile_versions = profile_images[machine_image.name]
        for j, version in enumerate(machine_image.versions):
            profile_version = profile_versions.get(version.version)
            if profile_version is None:
                errors.append(
                    invalid(
                        image_path.child("versions").index(j),
                        f"{machine_image.name}@{version.version}",
                        "machine image version is not defined in the NamespacedCloudProfile",
                    )
                )
                continue
            architecture = version.effective_architecture
            if architecture not in profile_version.architectures:
                errors.append(
                    forbidden(
                        images_path,
                        f"machine image version {machine_image.name}@{version.version} has an excess "
                        f'entry for architecture "{architecture}", which is not defined in the '
                        "machineImages spec",
                    )
                )
    return errors


def _validate_namespaced_machine_types(
    config: CloudProfileConfig,
    profile_spec: core.NamespacedCloudProfileSpec,
    parent_spec: core.CloudProfileSpec,
    path: Path,
) -> ErrorList:
    errors: ErrorList = []
    types_path = path.child("machineTypes")
    profile_types = {machine_type.name for machine_type in profile_spec.machine_types}
    parent_types = {machine_type.name for machine_type in parent_spec.machine_types}

    for i, machine_type in enumerate(config.machine_types):
        if machine_type.name in parent_types:
            errors.append(
                forbidden(
                    types_path.index(i),
                    f"machine type {machine_type.name} is already defined in the parent CloudProfile",
                )
            )
        if machine_type.name not in profile_types:
            errors.append(
                required(
                    types_path.index(i),
                    f"machine type {machine_type.name} is not defined in the "
                    "NamespacedCloudProfile .spec.machineTypes",
                )
            )
    return errors

"""Primitive validators and Azure naming rules.

A primitive is a function ``(value, path) -> ErrorList``. Primitives over
the same value are composed with ``combine``:

    >>> validate_name = combine(regex(r"^[a-z]+$"), max_length(10))
    >>> validate_name("abc", Path("name"))
    []

Empty strings pass ``regex``, ``min_length`` and ``max_length``. Combine
with ``not_empty`` where emptiness must be rejected.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict

from provider_azure.validation.field import ErrorList, Path, invalid, required

Validator = Callable[[str, Path], ErrorList]

# =============================================================================
# Patterns
# =============================================================================

GUID_PATTERN = r"^[0-9A-Fa-f]{8}-([0-9A-Fa-f]{4}-){3}[0-9A-Fa-f]{12}$"
RESOURCE_GROUP_NAME_PATTERN = r"^[A-Za-z0-9_().-]{1,89}[A-Za-z0-9_()-]$"
VNET_NAME_PATTERN = r"^[A-Za-z0-9][\w.-]*[\w]$"
GENERIC_AZURE_NAME_PATTERN = r"^[A-Za-z0-9][\w-]*$"
SERVICE_ENDPOINT_PATTERN = r"^Microsoft\.[A-Za-z0-9.]+$"

_GUID_RE = re.compile(GUID_PATTERN, re.ASCII)


# =============================================================================
# Building blocks
# =============================================================================


def combine(*validators: Validator) -> Validator:
    """Build one validator that runs all given validators and concatenates their errors."""

    def validate(value: str, path: Path) -> ErrorList:
        errors: ErrorList = []
        for validator in validators:
            errors.extend(validator(value, path))
        return errors

    return validate


def regex(pattern: str) -> Validator:
    compiled = re.compile(pattern, re.ASCII)

    def validate(value: str, path: Path) -> ErrorList:
        if value == "" or compiled.fullmatch(value):
            return []
        return [invalid(path, value, f"does not match expected regex {pattern}")]

    return validate


def min_length(minimum: int) -> Validator:
    def validate(value: str, path: Path) -> ErrorList:
        if value == "" or len(value) >= minimum:
            return []
        return [invalid(path, value, f"must not be fewer than {minimum} characters, got {len(value)}")]

    return validate


def max_length(maximum: int) -> Validator:
    def validate(value: str, path: Path) -> ErrorList:
        if len(value) <= maximum:
            return []
        return [invalid(path, value, f"must not be more than {maximum} characters, got {len(value)}")]

    return validate


def not_empty() -> Validator:
    def validate(value: str, path: Path) -> ErrorList:
        if value:
            return []
        return [required(path, "must not be empty")]

    return validate


def url() -> Validator:
    def validate(value: str, path: Path) -> ErrorList:
        try:
            urlparse(value)
        except ValueError as e:
            return [invalid(path, value, f"must be a valid URL: {e}")]
        return []

    return validate


# =============================================================================
# Azure naming rules
# =============================================================================

validate_resource_group_name = combine(regex(RESOURCE_GROUP_NAME_PATTERN), max_length(90))
validate_vnet_name = combine(regex(VNET_NAME_PATTERN), min_length(2), max_length(64))
validate_generic_name = combine(regex(GENERIC_AZURE_NAME_PATTERN), min_length(3), max_length(120))
validate_public_ip_name = combine(regex(GENERIC_AZURE_NAME_PATTERN), max_length(80))
validate_service_endpoint = combine(regex(SERVICE_ENDPOINT_PATTERN), min_length(9), max_length(120))


def is_guid(value: str) -> bool:
    """Return True if value is a hyphenated 32-hex-digit GUID."""
    return _GUID_RE.fullmatch(value) is not None


def validate_guid(value: str, path: Path, name: str) -> ErrorList:
    if is_guid(value):
        return []
    return [invalid(path, value, f"{name} should be a valid GUID")]


# =============================================================================
# Resource IDs
# =============================================================================


class ResourceID(BaseModel):
    """Parsed Azure Resource Manager ID.

    Example:
        >>> rid = parse_resource_id(
        ...     "/subscriptions/00000000-0000-0000-0000-000000000000"
        ...     "/resourceGroups/rg/providers/Microsoft.Network/ddosProtectionPlans/plan"
        ... )
        >>> rid.resource_type
        'ddosProtectionPlans'
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    subscription_id: str
    resource_group_name: str | None = None
    provider_namespace: str | None = None
    resource_type: str | None = None
    name: str | None = None


def parse_resource_id(resource_id: str) -> ResourceID:
    """Parse an ARM resource ID.

    Raises:
        ValueError: If the ID is not an ARM path.
    """
    if not resource_id.startswith("/"):
        raise ValueError(f"invalid resource ID: id '{resource_id}' must start with '/'")

    parts = resource_id.rstrip("/").split("/")[1:]
    if any(part == "" for part in parts):
        raise ValueError(f"invalid resource ID: id '{resource_id}' contains an empty segment")
    if len(parts) < 2 or parts[0].lower() != "subscriptions":
        raise ValueError(f"invalid resource ID: {resource_id}")

    fields: dict[str, str | None] = {"subscription_id": parts[1]}
    rest = parts[2:]

    if rest and rest[0].lower() == "resourcegroups":
        if len(rest) < 2:
            raise ValueError(f"invalid resource ID: {resource_id}")
        fields["resource_group_name"] = rest[1]
        rest = rest[2:]

    if rest:
        if rest[0].lower() != "providers" or len(rest) < 4 or len(rest[2:]) % 2 != 0:
            raise ValueError(f"invalid resource ID: {resource_id}")
        fields["provider_namespace"] = rest[1]
        fields["resource_type"] = rest[-2]
        fields["name"] = rest[-1]

    return ResourceID(**fields)


def validate_resource_id(resource_id: str, path: Path) -> ErrorList:
    """Validate an ARM resource ID referenced at ``path``.

    The subscription must be a GUID (reported at ``path``). The resource group
    and resource type follow the Azure naming rules and are reported at
    ``path.resourceGroupName`` and ``path.resourceType``.
    """
    try:
        rid = parse_resource_id(resource_id)
    except ValueError as e:
        return [invalid(path, resource_id, str(e))]

    errors: ErrorList = []
    if not is_guid(rid.subscription_id):
        errors.append(
            invalid(
                path,
                resource_id,
                f"must be a valid Azure subscription ID: {rid.subscription_id!r} is not a GUID",
            )
        )
    if rid.resource_group_name is not None:
        errors.extend(validate_resource_group_name(rid.resource_group_name, path.child("resourceGroupName")))
    if rid.resource_type is not None:
        errors.extend(validate_generic_name(rid.resource_type, path.child("resourceType")))
    return errors

"""Credential-schema engine.

A CredentialMapping describes the keys a secret may hold. The engine
interprets the mapping against a secret in fixed phases:

1. required keys are present and non-empty
2. present values are well-formed (GUID, no surrounding whitespace)
3. no key outside the mapping is present
4. values restricted to a set use one of its members
5. immutable values are unchanged (updates only)

Every phase runs, whatever the previous ones found. Secret values never
appear in errors: format and immutability errors carry "(hidden)".

Example:
    >>> errors = validate_infrastructure_secret(secret, Path("secret"))
    >>> [str(e) for e in errors]
    ['secret.data[tenantID]: Required value: missing required field "tenantID" in secret garden/azure']
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from pydantic import BaseModel, ConfigDict, Field

from provider_azure.schemas.secret import Secret
from provider_azure.validation.field import (
    HIDDEN_VALUE,
    ErrorList,
    Path,
    forbidden,
    invalid,
    not_supported,
    required,
)
from provider_azure.validation.primitives import is_guid

_ASCII_WHITESPACE = " \t\n\r\x0b\x0c"


class FieldSpec(BaseModel):
    """Rules for one key of a credential secret.

    Attributes:
        required: The key must be present and non-empty.
        is_guid: The value must be a GUID.
        is_immutable: The value must not change once set.
        allowed_values: If non-empty, the value must be one of these.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    required: bool = False
    is_guid: bool = False
    is_immutable: bool = False
    allowed_values: tuple[str, ...] = Field(default_factory=tuple)


CredentialMapping = Mapping[str, FieldSpec]


# =============================================================================
# Infrastructure and DNS credential keys
# =============================================================================

SUBSCRIPTION_ID_KEY = "subscriptionID"
TENANT_ID_KEY = "tenantID"
CLIENT_ID_KEY = "clientID"
CLIENT_SECRET_KEY = "clientSecret"

DNS_SUBSCRIPTION_ID_KEY = "AZURE_SUBSCRIPTION_ID"
DNS_TENANT_ID_KEY = "AZURE_TENANT_ID"
DNS_CLIENT_ID_KEY = "AZURE_CLIENT_ID"
DNS_CLIENT_SECRET_KEY = "AZURE_CLIENT_SECRET"
DNS_AZURE_CLOUD_KEY = "AZURE_CLOUD"

AZURE_CLOUD_VALUES = ("AzurePublic", "AzureChina", "AzureGovernment")

INFRASTRUCTURE_CREDENTIALS: CredentialMapping = {
    SUBSCRIPTION_ID_KEY: FieldSpec(required=True, is_guid=True, is_immutable=True),
    TENANT_ID_KEY: FieldSpec(required=True, is_guid=True, is_immutable=True),
    CLIENT_ID_KEY: FieldSpec(is_guid=True),
    CLIENT_SECRET_KEY: FieldSpec(),
}

DNS_CREDENTIALS: CredentialMapping = {
    DNS_SUBSCRIPTION_ID_KEY: FieldSpec(required=True, is_guid=True),
    DNS_TENANT_ID_KEY: FieldSpec(required=True, is_guid=True),
    DNS_CLIENT_ID_KEY: FieldSpec(required=True, is_guid=True),
    DNS_CLIENT_SECRET_KEY: FieldSpec(required=True),
    DNS_AZURE_CLOUD_KEY: FieldSpec(allowed_values=AZURE_CLOUD_VALUES),
}

INFRASTRUCTURE_RESOURCE_TYPE = "shoot clusters"
DNS_RESOURCE_TYPE = "DNS records"


# =============================================================================
# Engine
# =============================================================================


def validate_credentials(
    mapping: CredentialMapping,
    secret: Secret,
    path: Path,
    resource_type: str,
    old_secret: Secret | None = None,
) -> ErrorList:
    """Validate a secret against a credential mapping.

    Args:
        mapping: Rules per data key.
        secret: The secret to validate.
        path: Path of the secret; errors land below ``path.data``.
        resource_type: What the credentials are used for, e.g. "shoot clusters".
        old_secret: The previously accepted secret, on update.

    Returns:
        All findings of all phases.
    """
    data_path = path.child("data")
    errors: ErrorList = []
    errors.extend(_validate_required(mapping, secret, data_path))
    errors.extend(_validate_formats(mapping, secret, data_path))
    errors.extend(_validate_no_unexpected_keys(mapping, secret, data_path))
    errors.extend(_validate_allowed_values(mapping, secret, data_path))
    if old_secret is not None:
        errors.extend(_validate_immutable(mapping, secret, old_secret, data_path, resource_type))
    return errors


def _validate_required(mapping: CredentialMapping, secret: Secret, data_path: Path) -> ErrorList:
    errors: ErrorList = []
    for key, field_spec in mapping.items():
        if not field_spec.required:
            continue
        value = secret.data.get(key)
        if value is None:
            errors.append(
                required(
                    data_path.key(key),
                    f'missing required field "{key}" in secret {secret.reference}',
                )
            )
        elif len(value) == 0:
            errors.append(
                required(
                    data_path.key(key),
                    f'field "{key}" cannot be empty in secret {secret.reference}',
                )
            )
    return errors


def _validate_formats(mapping: CredentialMapping, secret: Secret, data_path: Path) -> ErrorList:
    errors: ErrorList = []
    for key, field_spec in mapping.items():
        value = secret.data.get(key)
        if not value:
            continue
        text = value.decode("utf-8", errors="replace")
        if field_spec.is_guid and not is_guid(text):
            errors.append(
                invalid(
                    data_path.key(key),
                    HIDDEN_VALUE,
                    f'field "{key}" must be a valid GUID in secret {secret.reference}',
                )
            )
        if text.strip(_ASCII_WHITESPACE) != text:
            errors.append(
                invalid(
                    data_path.key(key),
                    HIDDEN_VALUE,
                    f'field "{key}" must not contain leading or trailing whitespace '
                    f"in secret {secret.reference}",
                )
            )
    return errors


def _validate_no_unexpected_keys(
    mapping: CredentialMapping, secret: Secret, data_path: Path
) -> ErrorList:
    return [
        forbidden(data_path.key(key), f'unexpected field "{key}" in secret {secret.reference}')
        for key in secret.data
        if key not in mapping
    ]


def _validate_allowed_values(
    mapping: CredentialMapping, secret: Secret, data_path: Path
) -> ErrorList:
    errors: ErrorList = []
    for key, field_spec in mapping.items():
        if field_spec.allowed_values:
            errors.extend(validate_predefined_values(secret, key, field_spec.allowed_values, data_path))
    return errors


def _validate_immutable(
    mapping: CredentialMapping,
    secret: Secret,
    old_secret: Secret,
    data_path: Path,
    resource_type: str,
) -> ErrorList:
    errors: ErrorList = []
    for key, field_spec in mapping.items():
        if not field_spec.is_immutable:
            continue
        if (secret.data.get(key) or b"") != (old_secret.data.get(key) or b""):
            errors.append(
                invalid(
                    data_path.key(key),
                    HIDDEN_VALUE,
                    f'field "{key}" must not be changed for existing {resource_type} '
                    f"in secret {secret.reference}",
                )
            )
    return errors


def validate_predefined_values(
    secret: Secret, key: str, allowed_values: Sequence[str], path: Path
) -> ErrorList:
    """Check that ``secret.data[key]``, if set, is one of ``allowed_values``.

    The error is reported at ``path[key]``.
    """
    value = secret.data.get(key)
    if not value:
        return []
    text = value.decode("utf-8", errors="replace")
    if text in allowed_values:
        return []
    return [not_supported(path.key(key), text, allowed_values)]


# =============================================================================
# Credential surfaces
# =============================================================================


def validate_client_credentials_consistency(secret: Secret, path: Path) -> ErrorList:
    """``clientID`` and ``clientSecret`` must be set together and be non-empty."""
    data_path = path.child("data")
    errors: ErrorList = []
    client_id = secret.data.get(CLIENT_ID_KEY)
    client_secret = secret.data.get(CLIENT_SECRET_KEY)

    if client_id is not None and client_secret is None:
        errors.append(
            required(
                data_path.key(CLIENT_SECRET_KEY),
                f'"{CLIENT_SECRET_KEY}" must be provided when "{CLIENT_ID_KEY}" is specified '
                f"in secret {secret.reference}",
            )
        )
    if client_secret is not None and client_id is None:
        errors.append(
            required(
                data_path.key(CLIENT_ID_KEY),
                f'"{CLIENT_ID_KEY}" must be provided when "{CLIENT_SECRET_KEY}" is specified '
                f"in secret {secret.reference}",
            )
        )

    for key, value in ((CLIENT_ID_KEY, client_id), (CLIENT_SECRET_KEY, client_secret)):
        if value is not None and len(value) == 0:
            errors.append(
                invalid(
                    data_path.key(key),
                    HIDDEN_VALUE,
                    f'"{key}" cannot be empty if specified in secret {secret.reference}',
                )
            )
    return errors


def validate_infrastructure_secret(
    secret: Secret, path: Path, old_secret: Secret | None = None
) -> ErrorList:
    """Validate the cloud provider credentials of a shoot."""
    errors = validate_credentials(
        INFRASTRUCTURE_CREDENTIALS,
        secret,
        path,
        INFRASTRUCTURE_RESOURCE_TYPE,
        old_secret=old_secret,
    )
    errors.extend(validate_client_credentials_consistency(secret, path))
    return errors


def validate_dns_secret(secret: Secret, path: Path) -> ErrorList:
    """Validate the credentials of an Azure DNS provider."""
    return validate_credentials(DNS_CREDENTIALS, secret, path, DNS_RESOURCE_TYPE)

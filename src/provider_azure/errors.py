"""Exception hierarchy for provider-azure-validation.

Validators never raise on bad input: their findings are FieldError records.
The exceptions below exist for the edges of the package:
- ProviderAzureError: Base exception for all package errors
- InvalidConfigError: Wraps a non-empty list of field errors
- DecodeError: An embedded provider config could not be decoded
- ConfigurationError: A manifest file could not be read or parsed

User-facing messages stay free of credential material. Technical details
are logged through structlog and never put into the message.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from provider_azure.validation.field import FieldError

logger = structlog.get_logger(__name__)


class ProviderAzureError(Exception):
    """Base exception for provider-azure-validation.

    Args:
        user_message: Safe message to display to the user.
        internal_details: Optional technical details. Logged, never shown.

    Example:
        >>> raise ProviderAzureError(
        ...     "Provider config could not be read",
        ...     internal_details="unexpected key 'zonez' at networks",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(user_message)
        self.user_message = user_message

        if internal_details:
            logger.error(
                "provider_azure_error",
                error_type=self.__class__.__name__,
                user_message=user_message,
                internal_details=internal_details,
            )


class InvalidConfigError(ProviderAzureError):
    """Raised when a validation run produced field errors.

    Holds the complete error list; the message lists every error on its own
    line so callers can show the whole report at once.

    Attributes:
        errors: The field errors, in discovery order.
    """

    def __init__(self, errors: Sequence[FieldError]) -> None:
        self.errors = list(errors)
        if len(self.errors) == 1:
            message = str(self.errors[0])
        else:
            message = "[" + ", ".join(str(err) for err in self.errors) + "]"
        super().__init__(message)


class DecodeError(ProviderAzureError):
    """Raised when a provider config cannot be decoded into its model.

    Attributes:
        kind: Name of the provider config kind (e.g. "InfrastructureConfig").
    """

    def __init__(
        self,
        kind: str,
        reason: str,
        *,
        internal_details: str | None = None,
    ) -> None:
        super().__init__(f"failed to decode {kind}: {reason}", internal_details=internal_details)
        self.kind = kind
        self.reason = reason


class ConfigurationError(ProviderAzureError):
    """Raised when a manifest file cannot be read or parsed.

    Attributes:
        file_path: Path to the manifest (if known).
        field_path: Dot-separated path to the offending field (if known).

    Example:
        >>> raise ConfigurationError(
        ...     "Manifest is not a mapping",
        ...     file_path="shoot.yaml",
        ... )
    """

    def __init__(
        self,
        user_message: str,
        *,
        file_path: str | None = None,
        field_path: str | None = None,
        internal_details: str | None = None,
    ) -> None:
        context_parts: list[str] = []
        if file_path:
            context_parts.append(f"in {file_path}")
        if field_path:
            context_parts.append(f"field '{field_path}'")

        if context_parts:
            full_message = f"{user_message} ({', '.join(context_parts)})"
        else:
            full_message = user_message

        super().__init__(full_message, internal_details=internal_details)

        self.file_path = file_path
        self.field_path = field_path

"""provider-azure-validation: validation of Azure provider configs for Gardener.

This package provides:
- Provider config models (InfrastructureConfig, CloudProfileConfig, ...)
- Pure validators returning field-path-scoped error lists
- Object-level admission validation for shoots, seeds, cloud profiles,
  secrets and workload identities
- The provider-azure-validate CLI
"""

from __future__ import annotations

__version__ = "0.1.0"

from provider_azure.admission import (
    validate_cloud_profile,
    validate_namespaced_cloud_profile,
    validate_seed,
    validate_secret,
    validate_shoot,
    validate_workload_identity,
)
from provider_azure.errors import (
    ConfigurationError,
    DecodeError,
    InvalidConfigError,
    ProviderAzureError,
)
from provider_azure.validation.field import ErrorList, ErrorType, FieldError, Path

__all__ = [
    "__version__",
    # Admission
    "validate_shoot",
    "validate_seed",
    "validate_cloud_profile",
    "validate_namespaced_cloud_profile",
    "validate_secret",
    "validate_workload_identity",
    # Errors
    "ProviderAzureError",
    "InvalidConfigError",
    "DecodeError",
    "ConfigurationError",
    # Field errors
    "FieldError",
    "ErrorType",
    "ErrorList",
    "Path",
]

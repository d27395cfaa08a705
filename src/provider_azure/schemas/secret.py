"""Credential secrets.

A secret is an opaque ``key -> bytes`` map plus the namespace and name it
lives under. Manifests follow the Kubernetes shape: ``data`` holds base64
encoded values, ``stringData`` plain text that wins over ``data``.
"""

from __future__ import annotations

import base64
import binascii
from pathlib import Path
from typing import Any

from pydantic import Field

from provider_azure.errors import ConfigurationError
from provider_azure.schemas.base import ObjectModel, load_manifest
from provider_azure.schemas.core import ObjectMeta


class Secret(ObjectModel):
    """Credential secret.

    Example:
        >>> secret = Secret(metadata=ObjectMeta(namespace="garden", name="azure"),
        ...                 data={"tenantID": b"ee16e593-3035-41b9-a217-958f8f75b750"})
        >>> secret.reference
        'garden/azure'
    """

    metadata: ObjectMeta = Field(default_factory=ObjectMeta)
    data: dict[str, bytes] = Field(default_factory=dict)

    @property
    def reference(self) -> str:
        return f"{self.metadata.namespace}/{self.metadata.name}"

    @classmethod
    def from_manifest(cls, manifest: dict[str, Any]) -> Secret:
        """Build a secret from a Kubernetes manifest.

        Raises:
            ConfigurationError: If a ``data`` value is not valid base64.
        """
        data: dict[str, bytes] = {}
        for key, encoded in (manifest.get("data") or {}).items():
            try:
                data[key] = base64.b64decode(str(encoded), validate=True)
            except (binascii.Error, ValueError) as e:
                raise ConfigurationError(
                    "Secret value is not valid base64",
                    field_path=f"data.{key}",
                    internal_details=str(e),
                ) from e
        for key, text in (manifest.get("stringData") or {}).items():
            data[key] = str(text).encode("utf-8")

        return cls.model_validate({"metadata": manifest.get("metadata") or {}, "data": data})

    @classmethod
    def from_yaml(cls, path: str | Path) -> Secret:
        return cls.from_manifest(load_manifest(path))

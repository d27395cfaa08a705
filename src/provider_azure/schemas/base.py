"""Base models for provider configs and orchestrator objects.

Provider configs are decoded strictly: unknown keys are rejected, the
same way the extension's admission decoder rejects them. Orchestrator
objects (shoots, seeds, cloud profiles) carry many fields this package
never reads, so their models ignore unknown keys.

Wire names are camelCase; Python attributes are snake_case. Both are
accepted on input, and ``to_manifest`` writes the wire names back.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing_extensions import Self

from provider_azure.errors import ConfigurationError


class ApiModel(BaseModel):
    """Strict, immutable model for provider configs."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    @classmethod
    def from_yaml(cls, path: str | Path) -> Self:
        """Load and validate the model from a YAML manifest.

        Args:
            path: Path to the manifest.

        Returns:
            Validated model instance.

        Raises:
            ConfigurationError: If the file is missing or not a YAML mapping.
            pydantic.ValidationError: If the document does not fit the model.
        """
        return cls.model_validate(load_manifest(path))

    def to_manifest(self) -> dict[str, Any]:
        """Serialize with wire names, leaving out unset optional fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ObjectModel(ApiModel):
    """Immutable model for orchestrator objects; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore")


def load_manifest(path: str | Path) -> dict[str, Any]:
    """Read a YAML manifest into a mapping.

    Raises:
        ConfigurationError: If the file is missing, unparsable or not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigurationError("Manifest not found", file_path=str(path))

    try:
        with path.open("r") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            "Manifest is not valid YAML",
            file_path=str(path),
            internal_details=str(e),
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError("Manifest must be a YAML mapping", file_path=str(path))
    return data

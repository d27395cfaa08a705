"""Validation of ControlPlaneConfig.

Feature gates of the cloud-controller-manager are checked against the
packaged table ``data/feature_gates.yaml``.
"""

from __future__ import annotations

from functools import lru_cache
from importlib import resources

import structlog
import yaml
from packaging.version import InvalidVersion, Version
from pydantic import BaseModel, ConfigDict

from provider_azure.errors import ConfigurationError
from provider_azure.schemas.control_plane_config import ControlPlaneConfig
from provider_azure.validation.field import ErrorList, Path, forbidden, invalid

logger = structlog.get_logger(__name__)

FEATURE_GATES_RESOURCE = "feature_gates.yaml"


class FeatureGate(BaseModel):
    """A Kubernetes feature gate and the minor versions that know it."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str
    added_in: str
    removed_in: str | None = None

    def is_supported(self, version: Version) -> bool:
        minor = Version(f"{version.major}.{version.minor}")
        if minor < Version(self.added_in):
            return False
        if self.removed_in is not None and minor >= Version(self.removed_in):
            return False
        return True


@lru_cache(maxsize=1)
def load_feature_gates() -> dict[str, FeatureGate]:
    """Load the packaged feature gate table, keyed by gate name.

    Raises:
        ConfigurationError: If the table is malformed.
    """
    resource = resources.files("provider_azure").joinpath("data", FEATURE_GATES_RESOURCE)
    document = yaml.safe_load(resource.read_text(encoding="utf-8")) or {}
    entries = document.get("feature_gates") if isinstance(document, dict) else None
    if not isinstance(entries, list):
        raise ConfigurationError(
            "Feature gate table must contain a 'feature_gates' list",
            file_path=FEATURE_GATES_RESOURCE,
        )
    gates = {gate.name: gate for gate in (FeatureGate.model_validate(entry) for entry in entries)}
    logger.debug("feature_gates_loaded", count=len(gates))
    return gates


def validate_feature_gates(feature_gates: dict[str, bool], version: str, path: Path) -> ErrorList:
    """Every gate must be known and supported by the given Kubernetes version.

    An empty version skips the version check.
    """
    errors: ErrorList = []
    known = load_feature_gates()
    parsed_version: Version | None = None
    if version:
        try:
            parsed_version = Version(version.split("-", 1)[0])
        except InvalidVersion as e:
            return [invalid(path, version, str(e))]

    for name in feature_gates:
        gate = known.get(name)
        if gate is None:
            errors.append(invalid(path.child(name), name, "unknown feature gate"))
        elif parsed_version is not None and not gate.is_supported(parsed_version):
            errors.append(forbidden(path.child(name), f"not supported in Kubernetes version {version}"))
    return errors


def validate_control_plane_config(
    config: ControlPlaneConfig,
    kubernetes_version: str,
    path: Path,
) -> ErrorList:
    """Validate a ControlPlaneConfig for a shoot of the given Kubernetes version."""
    if config.cloud_controller_manager is None:
        return []
    return validate_feature_gates(
        config.cloud_controller_manager.feature_gates,
        kubernetes_version,
        path.child("cloudControllerManager", "featureGates"),
    )

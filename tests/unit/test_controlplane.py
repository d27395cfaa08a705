"""Unit tests for ControlPlaneConfig validation."""

from __future__ import annotations

import pytest
from packaging.version import Version

from provider_azure.schemas.control_plane_config import ControlPlaneConfig
from provider_azure.validation.controlplane import (
    FeatureGate,
    load_feature_gates,
    validate_control_plane_config,
    validate_feature_gates,
)
from provider_azure.validation.field import ErrorType, Path

PATH = Path("spec", "provider", "controlPlaneConfig")
FEATURE_GATES = "spec.provider.controlPlaneConfig.cloudControllerManager.featureGates"


def control_plane(feature_gates: dict[str, bool]) -> ControlPlaneConfig:
    return ControlPlaneConfig.model_validate({"cloudControllerManager": {"featureGates": feature_gates}})


class TestFeatureGateTable:
    """Tests for the packaged feature gate table."""

    def test_loads(self) -> None:
        """The table is keyed by gate name."""
        gates = load_feature_gates()
        assert "AnyVolumeDataSource" in gates
        assert gates["AnyVolumeDataSource"].removed_in is None

    def test_cached(self) -> None:
        """The table is read once."""
        assert load_feature_gates() is load_feature_gates()

    @pytest.mark.parametrize(
        "version, supported",
        [("1.14.0", False), ("1.15.3", True), ("1.26.9", True), ("1.27.0", False)],
    )
    def test_is_supported(self, version: str, supported: bool) -> None:
        """Support starts at added_in and ends before removed_in."""
        gate = FeatureGate(name="CSIMigrationAzureDisk", added_in="1.15", removed_in="1.27")
        assert gate.is_supported(Version(version)) is supported


class TestValidateControlPlaneConfig:
    """Tests for the cloud-controller-manager feature gates."""

    def test_no_cloud_controller_manager(self) -> None:
        """Nothing to check without a cloud-controller-manager section."""
        assert validate_control_plane_config(ControlPlaneConfig(), "1.30.2", PATH) == []

    def test_supported_gate(self) -> None:
        """A gate known to the version is valid."""
        config = control_plane({"AnyVolumeDataSource": True})
        assert validate_control_plane_config(config, "1.24.8", PATH) == []

    def test_unknown_gate(self) -> None:
        """Unknown gates are reported at their key."""
        errors = validate_control_plane_config(control_plane({"Foo": True}), "1.24.8", PATH)
        assert len(errors) == 1
        assert errors[0].type is ErrorType.INVALID
        assert errors[0].field == f"{FEATURE_GATES}.Foo"
        assert errors[0].bad_value == "Foo"

    def test_removed_gate(self) -> None:
        """Gates removed before the version are forbidden."""
        errors = validate_control_plane_config(control_plane({"CSIMigrationAzureDisk": True}), "1.28.0", PATH)
        assert [(e.type, e.field) for e in errors] == [(ErrorType.FORBIDDEN, f"{FEATURE_GATES}.CSIMigrationAzureDisk")]
        assert errors[0].detail == "not supported in Kubernetes version 1.28.0"

    def test_empty_version_skips_support_check(self) -> None:
        """Without a version only gate names are checked."""
        errors = validate_feature_gates({"CSIMigrationAzureDisk": True, "Foo": False}, "", Path("featureGates"))
        assert [e.field for e in errors] == ["featureGates.Foo"]

    def test_invalid_version(self) -> None:
        """An unparsable version is reported at the gate map."""
        errors = validate_feature_gates({"AnyVolumeDataSource": True}, "one.two", Path("featureGates"))
        assert [(e.type, e.field) for e in errors] == [(ErrorType.INVALID, "featureGates")]

    def test_version_with_suffix(self) -> None:
        """Pre-release and build suffixes are ignored when checking support."""
        errors = validate_feature_gates({"CSIMigrationAzureDisk": True}, "1.28.0-gardener.1", Path("featureGates"))
        assert [(e.type, e.field) for e in errors] == [(ErrorType.FORBIDDEN, "featureGates.CSIMigrationAzureDisk")]

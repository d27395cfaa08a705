"""Unit tests for schema models and manifest loading."""

from __future__ import annotations

import base64
from datetime import timedelta
from pathlib import Path
from typing import Any

import pytest
from pydantic import ValidationError

from provider_azure.errors import ConfigurationError
from provider_azure.schemas import (
    ApiModel,
    BackupBucketConfig,
    CloudProfileConfig,
    ControlPlaneConfig,
    InfrastructureConfig,
    Secret,
    Shoot,
    WorkerConfig,
    WorkloadIdentityConfig,
    format_duration,
    parse_duration,
)


class TestDurations:
    """Tests for duration parsing and formatting."""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("24h", timedelta(hours=24)),
            ("1h30m", timedelta(hours=1, minutes=30)),
            ("96h0m0s", timedelta(hours=96)),
            ("1.5h", timedelta(minutes=90)),
            ("0", timedelta(0)),
            ("-2m", timedelta(minutes=-2)),
        ],
    )
    def test_parse(self, text: str, expected: timedelta) -> None:
        """Unit-suffixed numbers are summed."""
        assert parse_duration(text) == expected

    @pytest.mark.parametrize("text", ["", "24", "1d", "h"])
    def test_parse_invalid(self, text: str) -> None:
        """Missing units and unknown units are rejected."""
        with pytest.raises(ValueError, match="invalid duration"):
            parse_duration(text)

    def test_parse_whole_microseconds(self) -> None:
        """Nanoseconds are accepted when they add up to whole microseconds."""
        assert parse_duration("1000ns") == timedelta(microseconds=1)
        assert parse_duration("1ms500us") == timedelta(microseconds=1500)

    @pytest.mark.parametrize("text", ["1ns", "1500ns", "0.5us"])
    def test_parse_sub_microsecond(self, text: str) -> None:
        """Precision below a microsecond is rejected instead of dropped."""
        with pytest.raises(ValueError, match="finer than a microsecond"):
            parse_duration(text)

    @pytest.mark.parametrize(
        "value, expected",
        [
            (timedelta(hours=48), "48h0m0s"),
            (timedelta(minutes=90), "1h30m0s"),
            (timedelta(seconds=1.5), "1.5s"),
            (timedelta(minutes=2), "2m0s"),
            (timedelta(0), "0s"),
        ],
    )
    def test_format(self, value: timedelta, expected: str) -> None:
        """Durations print hours, minutes and seconds."""
        assert format_duration(value) == expected

    def test_model_round_trip(self) -> None:
        """Retention periods serialize back to duration strings."""
        config = BackupBucketConfig.model_validate(
            {"immutability": {"retentionType": "bucket", "retentionPeriod": "48h"}}
        )
        assert config.to_manifest() == {
            "immutability": {"retentionType": "bucket", "retentionPeriod": "48h0m0s", "locked": False}
        }


class TestProviderConfigs:
    """Tests for strict provider config models."""

    def test_unknown_keys_rejected(self) -> None:
        """Provider configs reject unknown keys."""
        with pytest.raises(ValidationError):
            InfrastructureConfig.model_validate({"networks": {"workers": "10.250.0.0/16", "zonez": [1]}})

    def test_field_names_and_wire_names(self) -> None:
        """Both Python names and wire names populate a model."""
        by_alias = InfrastructureConfig.model_validate({"networks": {"vnet": {"resourceGroup": "rg", "name": "v"}}})
        by_name = InfrastructureConfig.model_validate({"networks": {"vnet": {"resource_group": "rg", "name": "v"}}})
        assert by_alias == by_name
        assert by_alias.networks.vnet.is_external

    @pytest.mark.parametrize(
        "model, document",
        [
            (
                BackupBucketConfig,
                {
                    "immutability": {"retentionType": "bucket", "retentionPeriod": "96h", "locked": True},
                    "rotationConfig": {"rotationPeriodDays": 30, "expirationPeriodDays": 60},
                },
            ),
            (ControlPlaneConfig, {"cloudControllerManager": {"featureGates": {"AnyVolumeDataSource": True}}}),
            (WorkerConfig, {"nodeTemplate": {"capacity": {"cpu": 4, "memory": "16Gi"}}}),
            (
                WorkloadIdentityConfig,
                {
                    "clientID": "7d4b5d3c-0a8f-4d63-9a2c-31a9c0e4b5a1",
                    "tenantID": "ee16e592-3035-41b9-a217-958f8f75b740",
                    "subscriptionID": "a6ad693a-028a-422c-b064-d76a4586f2b3",
                },
            ),
            (
                CloudProfileConfig,
                {
                    "countFaultDomains": [{"region": "westeurope", "count": 2}],
                    "machineImages": [
                        {
                            "name": "gardenlinux",
                            "versions": [
                                {"version": "1592.1.0", "communityGalleryImageID": "/CommunityGalleries/x/Images/y"}
                            ],
                        }
                    ],
                },
            ),
        ],
    )
    def test_round_trip(self, model: type[ApiModel], document: dict[str, Any]) -> None:
        """Serializing with wire names and decoding again yields the same config."""
        config = model.model_validate(document)
        assert model.model_validate(config.model_dump(by_alias=True)) == config
        assert model.model_validate(config.to_manifest()) == config

    def test_frozen(self) -> None:
        """Models are immutable."""
        config = InfrastructureConfig()
        with pytest.raises(ValidationError):
            config.zoned = True  # type: ignore[misc]


class TestObjects:
    """Tests for orchestrator objects."""

    def test_unknown_keys_ignored(self) -> None:
        """Orchestrator objects keep only the fields validators read."""
        shoot = Shoot.model_validate(
            {"kind": "Shoot", "spec": {"purpose": "evaluation", "networking": {"nodes": "10.250.0.0/16"}}}
        )
        assert shoot.spec.networking.nodes == "10.250.0.0/16"

    def test_from_yaml(self, tmp_path: Path) -> None:
        """Manifests are loaded from YAML files."""
        manifest = tmp_path / "shoot.yaml"
        manifest.write_text("metadata:\n  name: crazy-botany\nspec:\n  region: westeurope\n")
        shoot = Shoot.from_yaml(manifest)
        assert shoot.metadata.name == "crazy-botany"
        assert shoot.spec.region == "westeurope"

    def test_from_yaml_missing(self, tmp_path: Path) -> None:
        """A missing manifest is a configuration error."""
        with pytest.raises(ConfigurationError, match="Manifest not found"):
            Shoot.from_yaml(tmp_path / "missing.yaml")

    def test_from_yaml_not_a_mapping(self, tmp_path: Path) -> None:
        """A manifest must be a mapping."""
        manifest = tmp_path / "list.yaml"
        manifest.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError, match="Manifest must be a YAML mapping"):
            Shoot.from_yaml(manifest)

    def test_from_yaml_invalid_yaml(self, tmp_path: Path) -> None:
        """Unparsable YAML is a configuration error."""
        manifest = tmp_path / "broken.yaml"
        manifest.write_text("metadata: [unclosed\n")
        with pytest.raises(ConfigurationError, match="not valid YAML"):
            Shoot.from_yaml(manifest)


class TestSecret:
    """Tests for secret manifests."""

    def test_data_is_base64_decoded(self) -> None:
        """data values are base64, stringData values plain text."""
        secret = Secret.from_manifest(
            {
                "metadata": {"name": "azure", "namespace": "garden"},
                "data": {
                    "tenantID": base64.b64encode(b"from-data").decode(),
                    "clientID": base64.b64encode(b"client").decode(),
                },
                "stringData": {"tenantID": "from-string-data"},
            }
        )
        assert secret.reference == "garden/azure"
        assert secret.data == {"tenantID": b"from-string-data", "clientID": b"client"}

    def test_invalid_base64(self) -> None:
        """data values must be valid base64."""
        with pytest.raises(ConfigurationError, match="data.tenantID"):
            Secret.from_manifest({"data": {"tenantID": "not base64!"}})

    def test_from_yaml(self, tmp_path: Path) -> None:
        """Secrets are read from manifests."""
        manifest = tmp_path / "secret.yaml"
        manifest.write_text("metadata:\n  name: azure\n  namespace: garden\nstringData:\n  tenantID: abc\n")
        assert Secret.from_yaml(manifest).data == {"tenantID": b"abc"}

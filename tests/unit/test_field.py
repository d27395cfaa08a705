"""Unit tests for field paths and field errors."""

from __future__ import annotations

from provider_azure.errors import InvalidConfigError
from provider_azure.validation.field import (
    HIDDEN_VALUE,
    ErrorType,
    Path,
    forbidden,
    internal_error,
    invalid,
    not_supported,
    required,
    to_aggregate,
    too_many,
    validate_immutable_field,
)


class TestPath:
    """Tests for Path rendering and derivation."""

    def test_root_with_multiple_names(self) -> None:
        """Path("a", "b") renders dot-separated names."""
        assert str(Path("spec", "provider")) == "spec.provider"

    def test_child_index_and_key(self) -> None:
        """Indices and keys render in brackets."""
        path = Path("networks").child("zones").index(1).child("cidr")
        assert str(path) == "networks.zones[1].cidr"
        assert str(Path("secret").child("data").key("tenantID")) == "secret.data[tenantID]"

    def test_child_with_several_names(self) -> None:
        """child() accepts several names at once."""
        assert str(Path("spec").child("backup", "providerConfig")) == "spec.backup.providerConfig"

    def test_derivation_does_not_change_parent(self) -> None:
        """Deriving children leaves the parent path unchanged."""
        parent = Path("networks")
        parent.child("workers")
        parent.index(0)
        assert str(parent) == "networks"

    def test_segments(self) -> None:
        """segments() returns names and integer indices from the root."""
        path = Path("workers").index(2).child("data").key("clientID")
        assert path.segments() == ["workers", 2, "data", "clientID"]

    def test_equality_and_hash(self) -> None:
        """Paths compare and hash by their rendering."""
        assert Path("a", "b") == Path("a").child("b")
        assert len({Path("a", "b"), Path("a").child("b")}) == 1


class TestFieldError:
    """Tests for FieldError factories and rendering."""

    def test_required_omits_value(self) -> None:
        """Required errors render without a bad value."""
        err = required(Path("networking", "nodes"), "a nodes CIDR must be provided for Azure shoots")
        assert err.type is ErrorType.REQUIRED
        assert str(err) == "networking.nodes: Required value: a nodes CIDR must be provided for Azure shoots"

    def test_invalid_renders_quoted_string(self) -> None:
        """Invalid errors render string values in quotes."""
        err = invalid(Path("zones").index(0).child("cidr"), "10.0.0.3/8", "must be valid canonical CIDR")
        assert str(err) == 'zones[0].cidr: Invalid value: "10.0.0.3/8": must be valid canonical CIDR'

    def test_invalid_hidden_value(self) -> None:
        """Hidden values render as the redaction marker."""
        err = invalid(Path("data").key("tenantID"), HIDDEN_VALUE, "must be a valid GUID")
        assert '"(hidden)"' in str(err)

    def test_forbidden(self) -> None:
        """Forbidden errors render without a value."""
        assert str(forbidden(Path("natGateway"), "not allowed")) == "natGateway: Forbidden: not allowed"

    def test_not_supported_lists_values(self) -> None:
        """NotSupported lists the supported values in its detail."""
        err = not_supported(Path("architecture"), "s390x", ["amd64", "arm64"])
        assert err.supported_values == ("amd64", "arm64")
        assert str(err) == 'architecture: Unsupported value: "s390x": supported values: "amd64", "arm64"'

    def test_not_supported_without_values(self) -> None:
        """NotSupported with None accepts no value at all."""
        err = not_supported(Path("volume", "encrypted"), False, None)
        assert err.supported_values is None
        assert err.detail == ""
        assert str(err) == "volume.encrypted: Unsupported value: false"

    def test_too_many(self) -> None:
        """TooMany reports the maximum in its detail."""
        err = too_many(Path("dataVolumes"), 65, 64)
        assert err.bad_value == 65
        assert err.detail == "must have at most 64 items"

    def test_internal_error(self) -> None:
        """InternalError carries the error text as detail."""
        err = internal_error(Path("spec"), ValueError("boom"))
        assert err.type is ErrorType.INTERNAL
        assert err.detail == "boom"


class TestImmutableAndAggregate:
    """Tests for immutability checks and aggregation."""

    def test_unchanged_field(self) -> None:
        """An unchanged value yields no error."""
        assert validate_immutable_field("a", "a", Path("zoned")) == []

    def test_changed_field(self) -> None:
        """A changed value yields one Invalid 'field is immutable'."""
        errors = validate_immutable_field(True, False, Path("zoned"))
        assert len(errors) == 1
        assert errors[0].type is ErrorType.INVALID
        assert errors[0].detail == "field is immutable"

    def test_aggregate_empty(self) -> None:
        """An empty error list aggregates to None."""
        assert to_aggregate([]) is None

    def test_aggregate_errors(self) -> None:
        """A non-empty error list aggregates to InvalidConfigError."""
        errors = [required(Path("a")), required(Path("b"))]
        aggregate = to_aggregate(errors)
        assert isinstance(aggregate, InvalidConfigError)
        assert aggregate.errors == errors
        assert str(aggregate) == "[a: Required value, b: Required value]"

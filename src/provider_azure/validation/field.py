"""Field paths and field-scoped validation errors.

Every validator in this package returns a list of FieldError records. Each
record points at the offending location of the input document through an
immutable Path, so validators can branch paths freely while descending into
nested structures:

    >>> path = Path("spec", "networks")
    >>> str(path.child("zones").index(1).child("cidr"))
    'spec.networks.zones[1].cidr'
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from provider_azure.errors import InvalidConfigError

HIDDEN_VALUE = "(hidden)"


class Path:
    """Immutable, shareable path into a structured document.

    A path is a chain of segments. Deriving a child returns a new path that
    shares its parent, the parent itself never changes.
    """

    __slots__ = ("_name", "_index", "_parent")

    def __init__(self, name: str, *more_names: str) -> None:
        names = (name, *more_names)
        parent: Path | None = None
        for ancestor in names[:-1]:
            parent = Path._derive(parent, name=ancestor)
        self._name: str | None = names[-1]
        self._index: str | None = None
        self._parent: Path | None = parent

    @classmethod
    def _derive(
        cls, parent: Path | None, *, name: str | None = None, index: str | None = None
    ) -> Path:
        path = cls.__new__(cls)
        path._name = name
        path._index = index
        path._parent = parent
        return path

    def child(self, name: str, *more_names: str) -> Path:
        """Return the path of a named sub-field."""
        path = Path._derive(self, name=name)
        for more in more_names:
            path = Path._derive(path, name=more)
        return path

    def index(self, index: int) -> Path:
        """Return the path of a list element."""
        return Path._derive(self, index=str(index))

    def key(self, key: str) -> Path:
        """Return the path of a map entry."""
        return Path._derive(self, index=key)

    def segments(self) -> list[str | int]:
        """Return the segments from the root down, indices as ints where numeric."""
        chain: list[Path] = []
        path: Path | None = self
        while path is not None:
            chain.append(path)
            path = path._parent
        segments: list[str | int] = []
        for element in reversed(chain):
            if element._name is not None:
                segments.append(element._name)
            elif element._index is not None:
                segments.append(int(element._index) if element._index.isdigit() else element._index)
        return segments

    def __str__(self) -> str:
        chain: list[Path] = []
        path: Path | None = self
        while path is not None:
            chain.append(path)
            path = path._parent
        parts: list[str] = []
        for element in reversed(chain):
            if element._name is not None:
                if parts:
                    parts.append(".")
                parts.append(element._name)
            else:
                parts.append(f"[{element._index}]")
        return "".join(parts)

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))


class ErrorType(str, Enum):
    """Kind of a field error."""

    REQUIRED = "FieldValueRequired"
    INVALID = "FieldValueInvalid"
    FORBIDDEN = "FieldValueForbidden"
    NOT_SUPPORTED = "FieldValueNotSupported"
    TOO_MANY = "FieldValueTooMany"
    DUPLICATE = "FieldValueDuplicate"
    INTERNAL = "InternalError"

    @property
    def description(self) -> str:
        return _ERROR_TYPE_DESCRIPTIONS[self]


_ERROR_TYPE_DESCRIPTIONS = {
    ErrorType.REQUIRED: "Required value",
    ErrorType.INVALID: "Invalid value",
    ErrorType.FORBIDDEN: "Forbidden",
    ErrorType.NOT_SUPPORTED: "Unsupported value",
    ErrorType.TOO_MANY: "Too many",
    ErrorType.DUPLICATE: "Duplicate value",
    ErrorType.INTERNAL: "Internal error",
}

# Kinds whose message carries no bad value.
_OMIT_VALUE_TYPES = frozenset({ErrorType.REQUIRED, ErrorType.FORBIDDEN, ErrorType.INTERNAL})


class FieldError(BaseModel):
    """A single validation finding.

    Attributes:
        type: Kind of the error.
        field: Rendered path of the offending field.
        bad_value: The offending value, or "(hidden)" for sensitive values.
        detail: Human-readable explanation.
        supported_values: Accepted values, only set for NOT_SUPPORTED.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    type: ErrorType
    field: str
    bad_value: Any = None
    detail: str = ""
    supported_values: tuple[str, ...] | None = Field(default=None)

    def __str__(self) -> str:
        message = f"{self.field}: {self.type.description}"
        if self.type not in _OMIT_VALUE_TYPES and self.bad_value is not None:
            message += f": {_format_value(self.bad_value)}"
        if self.detail:
            message += f": {self.detail}"
        return message


ErrorList = list[FieldError]


def _format_value(value: Any) -> str:
    if isinstance(value, str):
        return f'"{value}"'
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def required(path: Path, detail: str = "") -> FieldError:
    return FieldError(type=ErrorType.REQUIRED, field=str(path), detail=detail)


def invalid(path: Path, value: Any, detail: str = "") -> FieldError:
    return FieldError(type=ErrorType.INVALID, field=str(path), bad_value=value, detail=detail)


def forbidden(path: Path, detail: str = "") -> FieldError:
    return FieldError(type=ErrorType.FORBIDDEN, field=str(path), detail=detail)


def not_supported(path: Path, value: Any, supported: Iterable[str] | None = None) -> FieldError:
    """Report a value outside the accepted set.

    Args:
        path: Location of the value.
        value: The unsupported value.
        supported: Accepted values. None means no value is accepted.
    """
    values = tuple(supported) if supported is not None else None
    detail = ""
    if values:
        detail = "supported values: " + ", ".join(f'"{v}"' for v in values)
    return FieldError(
        type=ErrorType.NOT_SUPPORTED,
        field=str(path),
        bad_value=value,
        detail=detail,
        supported_values=values,
    )


def too_many(path: Path, actual: int, maximum: int) -> FieldError:
    return FieldError(
        type=ErrorType.TOO_MANY,
        field=str(path),
        bad_value=actual,
        detail=f"must have at most {maximum} items",
    )


def internal_error(path: Path, err: Exception | str) -> FieldError:
    return FieldError(type=ErrorType.INTERNAL, field=str(path), detail=str(err))


def validate_immutable_field(new_value: Any, old_value: Any, path: Path) -> ErrorList:
    """Report a change of a field that must not change after creation."""
    if new_value == old_value:
        return []
    return [invalid(path, new_value, "field is immutable")]


def to_aggregate(errors: Sequence[FieldError]) -> InvalidConfigError | None:
    """Wrap a non-empty error list into a raisable exception.

    Returns:
        None for an empty list, otherwise an InvalidConfigError holding
        all errors.
    """
    if not errors:
        return None

    from provider_azure.errors import InvalidConfigError

    return InvalidConfigError(list(errors))

"""BackupBucketConfig: immutability and key rotation of backup buckets."""

from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

from provider_azure.schemas.base import ApiModel

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")

_UNIT_NANOSECONDS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,
    "μs": 1_000,
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60_000_000_000,
    "h": 3_600_000_000_000,
}


def parse_duration(value: str) -> timedelta:
    """Parse a duration such as "24h", "1h30m" or "96h0m0s".

    timedelta stores microseconds, so "1500ns" is rejected while "1000ns" is
    accepted.

    Raises:
        ValueError: If the string is not a duration or is not a whole number
            of microseconds.
    """
    text = value.strip()
    sign = 1
    if text[:1] in ("+", "-"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError(f"invalid duration {value!r}")

    nanoseconds = Decimal(0)
    pos = 0
    while pos < len(text):
        match = _DURATION_PART.match(text, pos)
        if match is None:
            raise ValueError(f"invalid duration {value!r}")
        nanoseconds += Decimal(match.group(1)) * _UNIT_NANOSECONDS[match.group(2)]
        pos = match.end()

    microseconds, remainder = divmod(nanoseconds, 1_000)
    if remainder:
        raise ValueError(f"duration {value!r} is finer than a microsecond")
    return sign * timedelta(microseconds=int(microseconds))


def format_duration(value: timedelta) -> str:
    """Format a duration the way the orchestrator prints it, e.g. "48h0m0s"."""
    micros = value // timedelta(microseconds=1)
    if micros == 0:
        return "0s"
    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    hours, micros = divmod(micros, 3_600_000_000)
    minutes, micros = divmod(micros, 60_000_000)
    seconds, micros = divmod(micros, 1_000_000)
    second_text = str(seconds) if micros == 0 else f"{seconds}.{micros:06d}".rstrip("0")

    if hours:
        return f"{sign}{hours}h{minutes}m{second_text}s"
    if minutes:
        return f"{sign}{minutes}m{second_text}s"
    return f"{sign}{second_text}s"


def _coerce_duration(value: Any) -> Any:
    if isinstance(value, str):
        return parse_duration(value)
    return value


Duration = Annotated[
    timedelta,
    BeforeValidator(_coerce_duration),
    PlainSerializer(format_duration, return_type=str),
]


class ImmutableConfig(ApiModel):
    """Retention policy of a backup bucket.

    Attributes:
        retention_type: Scope of the policy; only "bucket" is supported.
        retention_period: How long objects are kept; a multiple of 24h.
        locked: A locked policy can only be extended.
    """

    retention_type: str = ""
    retention_period: Duration = timedelta(0)
    locked: bool = False

    @property
    def is_empty(self) -> bool:
        return self == ImmutableConfig()


class RotationConfig(ApiModel):
    """Key rotation of a backup bucket."""

    rotation_period_days: int = 0
    expiration_period_days: int | None = None


class BackupBucketConfig(ApiModel):
    """Provider config of a backup bucket."""

    api_version: str | None = None
    kind: str | None = None
    immutability: ImmutableConfig | None = None
    rotation_config: RotationConfig | None = None

"""Validation of BackupBucketConfig.

Retention policy lock states and the updates allowed between them:

    absent   -> unlocked, locked
    unlocked -> absent, unlocked (any period), locked
    locked   -> locked with an equal or longer period

An immutability stanza with all fields at their zero value counts as
absent.
"""

from __future__ import annotations

from datetime import timedelta
from enum import Enum

from provider_azure.schemas.backup_bucket_config import (
    BackupBucketConfig,
    ImmutableConfig,
    RotationConfig,
    format_duration,
)
from provider_azure.validation.field import ErrorList, Path, forbidden, invalid, required

BUCKET_RETENTION_TYPE = "bucket"
MIN_RETENTION_PERIOD = timedelta(hours=24)
MIN_ROTATION_PERIOD_DAYS = 2


class RetentionLockState(str, Enum):
    """State of a bucket's retention policy."""

    ABSENT = "absent"
    UNLOCKED = "unlocked"
    LOCKED = "locked"

    @classmethod
    def of(cls, config: BackupBucketConfig | None) -> RetentionLockState:
        immutability = config.immutability if config is not None else None
        if immutability is None or immutability.is_empty:
            return cls.ABSENT
        return cls.LOCKED if immutability.locked else cls.UNLOCKED


def validate_backup_bucket_config(config: BackupBucketConfig, path: Path) -> ErrorList:
    """Validate the immutability and key rotation settings of a bucket."""
    errors: ErrorList = []
    if config.immutability is not None:
        errors.extend(_validate_immutability(config.immutability, path.child("immutability")))
    if config.rotation_config is not None:
        errors.extend(_validate_rotation(config.rotation_config, path.child("rotationConfig")))
    return errors


def _validate_immutability(immutability: ImmutableConfig, path: Path) -> ErrorList:
    errors: ErrorList = []
    if immutability.retention_type != BUCKET_RETENTION_TYPE:
        errors.append(
            invalid(path.child("retentionType"), immutability.retention_type, "must be 'bucket'")
        )

    period = immutability.retention_period
    period_path = path.child("retentionPeriod")
    if period < MIN_RETENTION_PERIOD:
        errors.append(invalid(period_path, format_duration(period), "must be greater than 24h"))
    if period % MIN_RETENTION_PERIOD != timedelta(0):
        errors.append(
            invalid(
                period_path,
                format_duration(period),
                "must be a positive integer multiple of 24h",
            )
        )
    return errors


def _validate_rotation(rotation: RotationConfig, path: Path) -> ErrorList:
    rotation_path = path.child("rotationPeriodDays")

    if rotation.rotation_period_days < 1:
        return [required(rotation_path, "rotationPeriod must be configured if key rotation is enabled")]

    errors: ErrorList = []
    if rotation.rotation_period_days < MIN_ROTATION_PERIOD_DAYS:
        errors.append(
            invalid(rotation_path, rotation.rotation_period_days, "must be equal or greater than 2 days")
        )
    expiration = rotation.expiration_period_days
    if expiration is not None and expiration <= rotation.rotation_period_days:
        errors.append(
            invalid(
                path.child("expirationPeriodDays"),
                expiration,
                "must be greater than the rotation period",
            )
        )
    return errors


def validate_backup_bucket_config_update(
    old_config: BackupBucketConfig | None,
    new_config: BackupBucketConfig | None,
    path: Path,
) -> ErrorList:
    """Validate a change of a bucket's retention policy.

    Only a locked policy restricts updates: it must stay present, stay
    locked and may only extend its retention period.
    """
    if RetentionLockState.of(old_config) is not RetentionLockState.LOCKED:
        return []
    assert old_config is not None and old_config.immutability is not None
    old = old_config.immutability

    immutability_path = path.child("immutability")
    new_state = RetentionLockState.of(new_config)
    if new_state is RetentionLockState.ABSENT:
        return [
            invalid(
                immutability_path,
                None,
                "immutability cannot be disabled once it is locked",
            )
        ]
    if new_state is RetentionLockState.UNLOCKED:
        return [
            forbidden(
                immutability_path.child("locked"),
                "immutable retention policy lock cannot be unlocked once it is locked",
            )
        ]

    assert new_config is not None and new_config.immutability is not None
    new = new_config.immutability
    if new.retention_period < old.retention_period:
        return [
            forbidden(
                immutability_path.child("retentionPeriod"),
                f"reducing the retention period from {format_duration(old.retention_period)} "
                f"to {format_duration(new.retention_period)} is prohibited when the immutable "
                "retention policy is locked",
            )
        ]
    return []

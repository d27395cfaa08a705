"""Validation of WorkerConfig."""

from __future__ import annotations

import re

from provider_azure.schemas.control_plane_config import NodeTemplate, WorkerConfig
from provider_azure.validation.field import ErrorList, Path, invalid, required

NODE_TEMPLATE_CAPACITY_KEYS = ("cpu", "gpu", "memory")

# Kubernetes resource quantity: signed decimal number, then an optional
# binary-SI, decimal-SI or exponent suffix ("500m", "16Gi", "1e3").
_QUANTITY_PATTERN = re.compile(
    r"(?P<number>[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))"
    r"(?P<suffix>Ki|Mi|Gi|Ti|Pi|Ei|n|u|m|k|M|G|T|P|E|[eE][+-]?[0-9]+)?",
    re.ASCII,
)


def parse_quantity_sign(value: str | int | float) -> int:
    """Return -1, 0 or 1 for the sign of a resource quantity.

    Raises:
        ValueError: If the value is not a resource quantity.
    """
    if isinstance(value, bool):
        raise ValueError(f"invalid quantity: {value!r}")
    if isinstance(value, (int, float)):
        return (value > 0) - (value < 0)
    match = _QUANTITY_PATTERN.fullmatch(value.strip())
    if match is None:
        raise ValueError(f"quantities must match the regular expression {_QUANTITY_PATTERN.pattern!r}")
    number = float(match.group("number"))
    return (number > 0) - (number < 0)


def validate_worker_config(config: WorkerConfig | None, path: Path) -> ErrorList:
    """Validate the provider config of a worker pool."""
    if config is None or config.node_template is None:
        return []
    return _validate_node_template(config.node_template, path.child("nodeTemplate"))


def _validate_node_template(node_template: NodeTemplate, path: Path) -> ErrorList:
    errors: ErrorList = []
    capacity_path = path.child("capacity")
    for key in NODE_TEMPLATE_CAPACITY_KEYS:
        if key not in node_template.capacity:
            errors.append(required(capacity_path, f"{key} is a mandatory field"))
            continue
        value = node_template.capacity[key]
        try:
            sign = parse_quantity_sign(value)
        except ValueError as e:
            errors.append(invalid(capacity_path.child(key), value, str(e)))
            continue
        if sign < 0:
            errors.append(invalid(capacity_path.child(key), str(value), f"{key} value must not be negative"))
    return errors

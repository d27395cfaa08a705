"""CIDR parsing and containment checks.

Errors about a relation between two ranges are reported on the path of the
range that violates it: ``nodes.validate_subset(workers)`` complains at the
workers path when workers does not fit into nodes.
"""

from __future__ import annotations

import ipaddress
from collections.abc import Sequence

from provider_azure.validation.field import ErrorList, Path, invalid

IPNetwork = ipaddress.IPv4Network | ipaddress.IPv6Network


class CIDR:
    """A CIDR value together with the path it was read from.

    Args:
        value: The CIDR in prefix notation, e.g. "10.250.0.0/16".
        path: Location of the value in the validated document.
    """

    def __init__(self, value: str, path: Path) -> None:
        self.value = value
        self.path = path
        self._network: IPNetwork | None = None
        self._parse_error: str | None = None
        self._parsed = False

    def __repr__(self) -> str:
        return f"CIDR({self.value!r}, {str(self.path)!r})"

    def parse(self) -> bool:
        """Parse the value once. Returns True if it is a valid CIDR."""
        if not self._parsed:
            self._parsed = True
            if "/" not in self.value:
                self._parse_error = f"missing prefix length in {self.value!r}"
            else:
                try:
                    self._network = ipaddress.ip_network(self.value, strict=False)
                except ValueError as e:
                    self._parse_error = str(e)
        return self._network is not None

    @property
    def network(self) -> IPNetwork | None:
        self.parse()
        return self._network

    def validate_parse(self) -> ErrorList:
        if self.parse():
            return []
        return [invalid(self.path, self.value, f"invalid CIDR address: {self.value}")]

    def validate_canonical(self) -> ErrorList:
        """Reject a CIDR with host bits set, e.g. "10.0.0.3/8"."""
        if not self.parse():
            return []
        address = ipaddress.ip_interface(self.value).ip
        if self._network is not None and address != self._network.network_address:
            return [invalid(self.path, self.value, "must be valid canonical CIDR")]
        return []

    def contains(self, other: CIDR) -> bool:
        mine, theirs = self.network, other.network
        if mine is None or theirs is None or mine.version != theirs.version:
            return False
        return theirs.subnet_of(mine)  # type: ignore[arg-type]

    def overlaps(self, other: CIDR) -> bool:
        mine, theirs = self.network, other.network
        if mine is None or theirs is None or mine.version != theirs.version:
            return False
        return mine.overlaps(theirs)

    def validate_subset(self, *subsets: CIDR | None) -> ErrorList:
        """Every given range must lie inside this one."""
        errors: ErrorList = []
        if not self.parse():
            return errors
        for subset in subsets:
            if subset is None or subset is self or not subset.parse():
                continue
            if not self.contains(subset):
                errors.append(
                    invalid(
                        subset.path,
                        subset.value,
                        f'must be a subset of "{self.path}" ("{self.value}")',
                    )
                )
        return errors

    def validate_not_overlap(self, *others: CIDR | None) -> ErrorList:
        """No given range may overlap this one."""
        errors: ErrorList = []
        if not self.parse():
            return errors
        for other in others:
            if other is None or other is self or not other.parse():
                continue
            if self.overlaps(other):
                errors.append(
                    invalid(
                        other.path,
                        other.value,
                        f'must not be a subset of "{self.path}" ("{self.value}")',
                    )
                )
        return errors


def validate_pairwise_disjoint(cidrs: Sequence[CIDR]) -> ErrorList:
    """Report every range that overlaps another one in the sequence.

    Two overlapping ranges yield one error on each of them.
    """
    errors: ErrorList = []
    for cidr in cidrs:
        errors.extend(cidr.validate_not_overlap(*cidrs))
    return errors

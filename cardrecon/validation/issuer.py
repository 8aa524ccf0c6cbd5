"""Issuer-aware validation: network prefix and length, then the Luhn checksum."""

from dataclasses import dataclass

from cardrecon.validation.base import BaseCardValidator, digits_only
from cardrecon.validation.luhn import luhn_checksum


@dataclass(frozen=True)
class CardNetwork:
    name: str
    prefixes: tuple[tuple[int, int], ...]  # inclusive ranges over leading digits
    lengths: frozenset[int]

    def matches(self, digits: str) -> bool:
        if len(digits) not in self.lengths:
            return False
        for low, high in self.prefixes:
            width = len(str(low))
            if len(digits) >= width and low <= int(digits[:width]) <= high:
                return True
        return False


NETWORKS: tuple[CardNetwork, ...] = (
    CardNetwork("visa", ((4, 4),), frozenset({13, 16, 19})),
    CardNetwork("amex", ((34, 34), (37, 37)), frozenset({15})),
    CardNetwork("mastercard", ((51, 55), (2221, 2720)), frozenset({16})),
    CardNetwork(
        "discover",
        ((6011, 6011), (644, 649), (65, 65)),
        frozenset(range(16, 20)),
    ),
    CardNetwork(
        "diners",
        ((300, 305), (36, 36), (38, 39)),
        frozenset(range(14, 20)),
    ),
    CardNetwork("jcb", ((3528, 3589),), frozenset(range(16, 20))),
    CardNetwork("unionpay", ((62, 62),), frozenset(range(16, 20))),
)


def classify_network(raw: str) -> CardNetwork | None:
    """Return the first network whose prefix and length fit *raw*, if any."""
    digits = digits_only(raw)
    for network in NETWORKS:
        if network.matches(digits):
            return network
    return None


class IssuerValidator(BaseCardValidator):
    """Stricter mode: unknown networks fail before the checksum is computed."""

    def is_valid(self, raw: str) -> bool:
        digits = digits_only(raw)
        if not digits or classify_network(digits) is None:
            return False
        return luhn_checksum(digits) == 0

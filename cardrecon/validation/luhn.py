from cardrecon.validation.base import BaseCardValidator, digits_only


def luhn_checksum(digits: str) -> int:
    """Mod-10 sum of *digits*, doubling every second digit from the right."""
    total = 0
    for position, char in enumerate(reversed(digits)):
        value = int(char)
        if position % 2 == 1:
            value *= 2
            if value > 9:
                value -= 9
        total += value
    return total % 10


class LuhnValidator(BaseCardValidator):
    """Checksum-only validation."""

    def is_valid(self, raw: str) -> bool:
        digits = digits_only(raw)
        if not digits:
            return False
        return luhn_checksum(digits) == 0

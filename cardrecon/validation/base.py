import re
from abc import ABC, abstractmethod

PASS = "Pass"
FAIL = "Fail"

_NON_DIGIT_RE = re.compile(r"\D")


def digits_only(value: str) -> str:
    return _NON_DIGIT_RE.sub("", value or "")


class BaseCardValidator(ABC):
    """Contract for card-number validators."""

    @abstractmethod
    def is_valid(self, raw: str) -> bool:
        """Check a card number after stripping every non-digit character.

        Args:
            raw: Card number as read by OCR or typed by a person. Spaces,
                 hyphens and other separators are ignored.

        Returns:
            False for empty or digit-free input, otherwise the validator's verdict.
        """

    def verdict(self, raw: str) -> str:
        """Spreadsheet form of is_valid: ``Pass`` or ``Fail``."""
        return PASS if self.is_valid(raw) else FAIL


def mask_card_number(value: str) -> str:
    """Hide all but the last four digits; non-numeric values pass through."""
    if not value.isdigit() or len(value) <= 4:
        return value
    return "*" * (len(value) - 4) + value[-4:]

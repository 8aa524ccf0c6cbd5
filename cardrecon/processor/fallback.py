from collections.abc import Callable, Sequence
from dataclasses import dataclass

from cardrecon.logging.logger import Log
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.exceptions import OcrError


@dataclass(frozen=True)
class ExtractionAttempt:
    """One image to try, built lazily so a composite is only made when reached."""

    label: str
    load: Callable[[], bytes]


def first_card_number(
    gateway: BaseOcrGateway,
    attempts: Sequence[ExtractionAttempt],
) -> str | None:
    """Try *attempts* in order and return the first non-empty card number.

    OCR failures move on to the next attempt. Errors raised while building an
    image (for example a decode failure) propagate.
    """
    for attempt in attempts:
        try:
            card_number = gateway.extract_card(attempt.load())
        except OcrError as exc:
            Log.warning(f"OCR failed for {attempt.label}: {exc}")
            continue
        if card_number.strip():
            Log.info(f"Card number found in {attempt.label}")
            return card_number
        Log.warning(f"OCR returned nothing for {attempt.label}")
    return None

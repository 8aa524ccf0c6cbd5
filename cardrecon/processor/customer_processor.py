from collections.abc import Iterator

from cardrecon.folders.models import FolderEntry, ImageFile
from cardrecon.imaging.compositor import composite_vertically
from cardrecon.logging.logger import Log
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.processor.fallback import ExtractionAttempt, first_card_number
from cardrecon.processor.grouping import fetch_card_pairs
from cardrecon.processor.models import FOLDER_NOT_FOUND, NOT_FOUND, CardOutcome, WriteMode
from cardrecon.processor.planner import (
    CardScenario,
    MissingCard,
    PairedCard,
    UngroupedImage,
    plan_cards,
)
from cardrecon.validation.base import FAIL, BaseCardValidator, mask_card_number


class CustomerProcessor:
    """Per-customer state machine: NoFolder, SingleImage or MultiImage, then Done.

    ``process`` yields outcomes one card at a time so the caller can write each
    one back before the next remote call is made. It never reads spreadsheet
    rows; which rows an outcome lands on is the reconciler's decision.
    """

    def __init__(
        self,
        gateway: BaseOcrGateway,
        validator: BaseCardValidator,
        composite_quality: int = 90,
    ) -> None:
        self._gateway = gateway
        self._validator = validator
        self._composite_quality = composite_quality

    def process(
        self,
        customer_name: str,
        folder: FolderEntry | None,
    ) -> Iterator[CardOutcome]:
        """Yield one outcome per physical card of *customer_name*.

        Raises:
            ImagingError: if a composite cannot be built; the caller treats
                          this as a failure of the whole customer.
        """
        if folder is None or not folder.images:
            Log.warning(f"No folder found for '{customer_name}'")
            yield CardOutcome.unfilled(FOLDER_NOT_FOUND)
            return

        if len(folder.images) == 1:
            Log.info(f"Single image for '{customer_name}': {folder.images[0].name}")
            pairs = None
        else:
            pairs = fetch_card_pairs(self._gateway, folder)

        for scenario in plan_cards(folder, pairs):
            yield self._process_card(scenario)

    def _process_card(self, scenario: CardScenario) -> CardOutcome:
        if isinstance(scenario, MissingCard):
            return CardOutcome.missing_files(scenario.references)

        # ungrouped leftovers never replace a row an earlier card already filled
        mode = WriteMode.UNGROUPED if isinstance(scenario, UngroupedImage) else WriteMode.STANDARD

        if isinstance(scenario, PairedCard):
            front, back = scenario.front, scenario.back
            filenames: tuple[str, ...] = (front.name, back.name)
            attempts = [
                ExtractionAttempt(
                    f"merged image ({front.name}, {back.name})",
                    lambda: composite_vertically(
                        [front.content, back.content], self._composite_quality
                    ),
                ),
                self._single_attempt(front, "front image"),
                self._single_attempt(back, "back image"),
            ]
        else:
            filenames = (scenario.image.name,)
            attempts = [self._single_attempt(scenario.image, "image")]

        card_number = first_card_number(self._gateway, attempts)
        if card_number is None:
            Log.warning(f"Could not read a card number from {list(filenames)}")
            return CardOutcome(NOT_FOUND, FAIL, filenames, mode)

        validation = self._validator.verdict(card_number)
        Log.info(
            f"Card OCR result for {list(filenames)}: "
            f"{mask_card_number(card_number)}, validation: {validation}"
        )
        return CardOutcome(card_number, validation, filenames, mode)

    @staticmethod
    def _single_attempt(image: ImageFile, role: str) -> ExtractionAttempt:
        return ExtractionAttempt(f"{role} {image.name}", lambda: image.content)

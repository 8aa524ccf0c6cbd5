from collections.abc import Sequence

from cardrecon.config.settings import Settings
from cardrecon.folders.models import FolderEntry
from cardrecon.imaging.compositor import composite_vertically
from cardrecon.imaging.exceptions import ImagingError
from cardrecon.imaging.redaction import RedactionStyle, redact_pair, redact_single
from cardrecon.logging.logger import Log
from cardrecon.matching.folder_matcher import find_folder
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.exceptions import OcrError
from cardrecon.processor.grouping import fetch_card_pairs
from cardrecon.processor.planner import CardScenario, MissingCard, PairedCard, plan_cards
from cardrecon.redaction.models import RedactedCard


class RedactionPipeline:
    """Masks card numbers and CVCs on every card image of the selected folders.

    Front/back pairs are sent to the service as one composite and the detected
    regions are split back onto the two source images, so each side comes out
    as its own card. Failures skip the card (or folder) and are logged.
    """

    def __init__(
        self,
        gateway: BaseOcrGateway,
        style: RedactionStyle,
        composite_quality: int = 90,
    ) -> None:
        self._gateway = gateway
        self._style = style
        self._composite_quality = composite_quality

    def run(
        self,
        folders: Sequence[FolderEntry],
        customer_names: Sequence[str] | None = None,
    ) -> list[RedactedCard]:
        """Redact all *folders*, or only those matching *customer_names*."""
        selected = self._select_folders(folders, customer_names)
        cards: list[RedactedCard] = []
        for index, folder in enumerate(selected, start=1):
            Log.info(f"Redacting '{folder.customer_name}' ({index}/{len(selected)})")
            try:
                cards.extend(self.process_folder(folder))
            except Exception as exc:
                Log.exception(f"Error processing folder '{folder.folder_name}': {exc}")
        Log.info(f"Redaction complete: {len(cards)} card image(s) from {len(selected)} folder(s)")
        return cards

    def process_folder(self, folder: FolderEntry) -> list[RedactedCard]:
        if not folder.images:
            return []
        pairs = None if len(folder.images) == 1 else fetch_card_pairs(self._gateway, folder)

        cards: list[RedactedCard] = []
        for scenario in plan_cards(folder, pairs):
            try:
                cards.extend(self._redact(folder, scenario, len(cards)))
            except (OcrError, ImagingError) as exc:
                Log.error(f"Redaction failed for a card in '{folder.folder_name}': {exc}")
        return cards

    def _redact(
        self,
        folder: FolderEntry,
        scenario: CardScenario,
        next_index: int,
    ) -> list[RedactedCard]:
        if isinstance(scenario, MissingCard):
            Log.error(f"Skipping missing files {list(scenario.references)} in '{folder.folder_name}'")
            return []

        if isinstance(scenario, PairedCard):
            front, back = scenario.front, scenario.back
            merged = composite_vertically([front.content, back.content], self._composite_quality)
            metadata = self._gateway.extract_card_regions(merged)
            result = redact_pair(front.content, back.content, metadata, self._style)
            return [
                RedactedCard(
                    folder.folder_name, next_index, front.name,
                    result.front_original, result.front_redacted,
                ),
                RedactedCard(
                    folder.folder_name, next_index + 1, back.name,
                    result.back_original, result.back_redacted,
                ),
            ]

        image = scenario.image
        metadata = self._gateway.extract_card_regions(image.content)
        redacted = redact_single(image.content, metadata, self._style, image.name)
        return [RedactedCard(folder.folder_name, next_index, image.name, image.content, redacted)]

    @staticmethod
    def _select_folders(
        folders: Sequence[FolderEntry],
        customer_names: Sequence[str] | None,
    ) -> list[FolderEntry]:
        if customer_names is None:
            return list(folders)
        selected: list[FolderEntry] = []
        for name in dict.fromkeys(customer_names):
            folder = find_folder(name, folders)
            if folder is not None and folder not in selected:
                selected.append(folder)
        return selected


def build_redaction_pipeline(
    settings: Settings,
    gateway: BaseOcrGateway,
) -> RedactionPipeline:
    style = RedactionStyle(
        quality=settings.redaction_jpeg_quality,
        cvc_width_factor=settings.cvc_expand_width,
        cvc_height_factor=settings.cvc_expand_height,
    )
    return RedactionPipeline(
        gateway=gateway,
        style=style,
        composite_quality=settings.composite_jpeg_quality,
    )

from cardrecon.folders.models import FolderEntry
from cardrecon.logging.logger import Log
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.exceptions import OcrError
from cardrecon.ocr.models import CardPair


def fetch_card_pairs(gateway: BaseOcrGateway, folder: FolderEntry) -> list[CardPair] | None:
    """Categorize then group a folder's images; None if either call fails."""
    try:
        categorization = gateway.categorize(folder.images)
        pairs = gateway.group_cards(folder.images, categorization)
    except OcrError as exc:
        Log.warning(
            f"Grouping failed for '{folder.folder_name}': {exc}. "
            "Will process images individually"
        )
        return None
    Log.info(f"Grouping found {len(pairs)} card(s) in '{folder.folder_name}'")
    return pairs

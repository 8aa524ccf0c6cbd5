"""Example OCR gateway.

Use this module as a reference when implementing new service adapters.
Implement BaseOcrGateway and register the provider in OcrGatewayFactory.
"""

from collections.abc import Sequence
from typing import ClassVar

from cardrecon.folders.models import ImageFile
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.models import CardPair, Categorization, RedactionMetadata
from cardrecon.ocr.parser import parse_categorization


class ExampleOcrGateway(BaseOcrGateway):
    """Offline gateway with fixed answers.

    Every image reads as the same valid test number, every image is its own
    card and no regions are detected. Useful for dry runs of the folder and
    spreadsheet plumbing without a service.
    """

    CARD_NUMBER: ClassVar[str] = "4532015112830366"

    def extract_card(self, image: bytes) -> str:
        _ = image
        return self.CARD_NUMBER

    def categorize(self, images: Sequence[ImageFile]) -> Categorization:
        return parse_categorization(
            {
                "categories": [
                    {
                        "type": "credit_card",
                        "files": [{"front": image.name, "back": ""} for image in images],
                    }
                ]
            }
        )

    def group_cards(
        self,
        images: Sequence[ImageFile],
        categorization: Categorization,
    ) -> list[CardPair]:
        _ = categorization
        return [CardPair(front=image.name) for image in images]

    def extract_card_regions(self, image: bytes) -> RedactionMetadata:
        _ = image
        return RedactionMetadata(document_type="credit_card")

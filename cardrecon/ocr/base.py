from abc import ABC, abstractmethod
from collections.abc import Sequence

from cardrecon.folders.models import ImageFile
from cardrecon.ocr.models import CardPair, Categorization, RedactionMetadata


class BaseOcrGateway(ABC):
    """Contract for the remote card OCR service."""

    @abstractmethod
    def extract_card(self, image: bytes) -> str:
        """Read the card number from one image.

        Returns:
            The card number as digits only.

        Raises:
            OcrError: on transport failure, non-success status, or when no
                      digits were found.
        """

    @abstractmethod
    def categorize(self, images: Sequence[ImageFile]) -> Categorization:
        """Categorize a customer's images by document type.

        Raises:
            OcrError: on any failure.
        """

    @abstractmethod
    def group_cards(
        self,
        images: Sequence[ImageFile],
        categorization: Categorization,
    ) -> list[CardPair]:
        """Pair a customer's images into physical cards.

        Returns:
            Front/back pairs of every group, flattened in response order.

        Raises:
            OcrError: on any failure.
        """

    @abstractmethod
    def extract_card_regions(self, image: bytes) -> RedactionMetadata:
        """Detect card-number and CVC regions on one image.

        Raises:
            OcrError: on any failure.
        """

    def close(self) -> None:
        """Release transport resources. Adapters without any may keep this no-op."""

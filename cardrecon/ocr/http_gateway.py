import json
import mimetypes
from collections.abc import Sequence
from typing import Any

import httpx

from cardrecon.folders.models import ImageFile
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.exceptions import OcrApiError, OcrNetworkError, OcrResponseError
from cardrecon.ocr.models import CardPair, Categorization, RedactionMetadata
from cardrecon.ocr.parser import (
    parse_card_number,
    parse_card_pairs,
    parse_categorization,
    parse_redaction_metadata,
)

_MultipartFiles = list[tuple[str, tuple[str, bytes, str]]]


class HttpOcrGateway(BaseOcrGateway):
    """OCR gateway speaking the card service's multipart HTTP API."""

    EXTRACT_PATH = "/credit_card"
    CATEGORIZE_PATH = "/categorize"
    GROUP_PATH = "/group_credit_cards"
    REDACTION_PATH = "/credit_card_redaction"

    UPLOAD_NAME = "credit_card.jpg"

    def __init__(
        self,
        *,
        base_url: str,
        timeout_seconds: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def extract_card(self, image: bytes) -> str:
        data = self._post(self.EXTRACT_PATH, files=self._single_upload(image))
        return parse_card_number(data)

    def categorize(self, images: Sequence[ImageFile]) -> Categorization:
        data = self._post(self.CATEGORIZE_PATH, files=self._batch_upload(images))
        return parse_categorization(data)

    def group_cards(
        self,
        images: Sequence[ImageFile],
        categorization: Categorization,
    ) -> list[CardPair]:
        data = self._post(
            self.GROUP_PATH,
            files=self._batch_upload(images),
            data={"document_structure": json.dumps(categorization.raw)},
        )
        return parse_card_pairs(data)

    def extract_card_regions(self, image: bytes) -> RedactionMetadata:
        data = self._post(self.REDACTION_PATH, files=self._single_upload(image))
        return parse_redaction_metadata(data)

    def _post(
        self,
        path: str,
        *,
        files: _MultipartFiles,
        data: dict[str, str] | None = None,
    ) -> Any:
        try:
            response = self._client.post(path, files=files, data=data)
            response.raise_for_status()
        except (httpx.ConnectError, httpx.TimeoutException) as exc:
            raise OcrNetworkError(f"OCR service network error on {path}: {exc}") from exc
        except httpx.HTTPStatusError as exc:
            raise OcrApiError(
                f"OCR API error on {path}: {exc.response.status_code} "
                f"{exc.response.reason_phrase}"
            ) from exc
        except httpx.HTTPError as exc:
            raise OcrNetworkError(f"OCR service transport error on {path}: {exc}") from exc

        try:
            return response.json()
        except ValueError as exc:
            raise OcrResponseError(f"OCR service returned invalid JSON on {path}") from exc

    def _single_upload(self, image: bytes) -> _MultipartFiles:
        return [("file", (self.UPLOAD_NAME, image, "image/jpeg"))]

    @staticmethod
    def _batch_upload(images: Sequence[ImageFile]) -> _MultipartFiles:
        return [
            (
                "files",
                (
                    image.name,
                    image.content,
                    mimetypes.guess_type(image.name)[0] or "application/octet-stream",
                ),
            )
            for image in images
        ]

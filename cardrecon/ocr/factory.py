from cardrecon.config.settings import Settings
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.example_gateway import ExampleOcrGateway
from cardrecon.ocr.http_gateway import HttpOcrGateway


class OcrGatewayFactory:
    """Creates the configured OCR gateway adapter."""

    @classmethod
    def create(cls, settings: Settings) -> BaseOcrGateway:
        provider = settings.ocr_provider.lower()
        if provider == "example":
            return ExampleOcrGateway()
        if provider == "http":
            base_url = settings.ocr_base_url.strip()
            if not base_url:
                raise ValueError("ocr_base_url is required for ocr_provider=http")
            return HttpOcrGateway(
                base_url=base_url,
                timeout_seconds=settings.ocr_timeout_seconds,
            )
        raise ValueError(
            f"Unknown OCR provider '{provider}'. Choose from: ['example', 'http']"
        )

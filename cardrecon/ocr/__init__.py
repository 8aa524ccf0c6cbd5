from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.factory import OcrGatewayFactory
from cardrecon.ocr.http_gateway import HttpOcrGateway

__all__ = ["BaseOcrGateway", "HttpOcrGateway", "OcrGatewayFactory"]

"""End to end: upload tree + CSV -> HTTP OCR service (mocked transport) -> validated CSV."""

import csv
import io
import json
from pathlib import Path

import httpx
import pytest
from PIL import Image

from cardrecon.config.settings import Settings
from cardrecon.folders.loader import FolderLoader
from cardrecon.ocr.http_gateway import HttpOcrGateway
from cardrecon.processor.pipeline import build_reconciliation_pipeline
from cardrecon.sheet.csv_store import load_sheet, validated_path, write_sheet

VALID = "4532015112830366"
INVALID = "4532015112830367"


def _png(color: tuple[int, int, int]) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (40, 25), color).save(buf, format="PNG")
    return buf.getvalue()


class FakeOcrService:
    """Answers like the card OCR service; records the calls it receives."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        self.calls.append(path)
        body = request.content
        if path == "/categorize":
            return httpx.Response(200, json={"categories": [{"type": "credit_card", "files": []}]})
        if path == "/group_credit_cards":
            assert b"document_structure" in body
            return httpx.Response(
                200,
                json={
                    "credit_cards_group": [
                        {"files": [{"front": "visa_front.png", "back": "visa_back.png"}]}
                    ]
                },
            )
        if path == "/credit_card":
            # composites are JPEG; the lone loose image is a PNG upload
            number = VALID if body.find(b"\xff\xd8\xff") != -1 else INVALID
            return httpx.Response(200, json={"Credit_Card_Number": {"value": number}})
        return httpx.Response(404)


@pytest.fixture()
def upload_tree(tmp_path: Path) -> Path:
    root = tmp_path / "uploads"
    ann = root / "ANN_LEE_0a1b2c3d4e"
    ann.mkdir(parents=True)
    (ann / "visa_front.png").write_bytes(_png((10, 10, 120)))
    (ann / "visa_back.png").write_bytes(_png((10, 120, 10)))
    (ann / "extra.png").write_bytes(_png((120, 10, 10)))
    bob = root / "BOB_STONE_ffffffff"
    bob.mkdir()
    (bob / "card.png").write_bytes(_png((0, 0, 0)))
    return root


class TestReconciliationFlow:
    def test_full_run(self, tmp_path: Path, upload_tree: Path) -> None:
        sheet_path = tmp_path / "cards.csv"
        sheet_path.write_text(
            "Customer name,filename,CCN Expected,Luhn/BIN Expected,Comment\n"
            f"Ann Lee,visa_front.png,{VALID},Pass,first\n"
            f"Ann Lee,extra.png,{VALID},Pass,second\n"
            f"Bob Stone,card.png,{VALID},Pass,third\n"
            f"Cara Diaz,c.png,{VALID},Pass,fourth\n",
            encoding="utf-8",
        )
        service = FakeOcrService()
        gateway = HttpOcrGateway(
            base_url="http://ocr.test",
            timeout_seconds=5,
            transport=httpx.MockTransport(service),
        )

        sheet = load_sheet(sheet_path)
        folders = FolderLoader().load(upload_tree)
        try:
            state = build_reconciliation_pipeline(Settings(), gateway).run(sheet.records, folders)
        finally:
            gateway.close()
        sheet.records = state.rows
        output = validated_path(sheet_path)
        write_sheet(sheet, output)

        with output.open(newline="", encoding="utf-8") as handle:
            rows = list(csv.DictReader(handle))

        assert [row["CCN Actual"] for row in rows] == [VALID, INVALID, INVALID, "FOLDER_NOT_FOUND"]
        assert [row["Luhn/BIN Actual"] for row in rows] == ["Pass", "Fail", "Fail", "Fail"]
        assert [row["Comment"] for row in rows] == ["first", "second", "third", "fourth"]
        assert service.calls.count("/categorize") == 1
        assert service.calls.count("/group_credit_cards") == 1
        assert service.calls.count("/credit_card") == 3

    def test_group_request_echoes_categorization(self, upload_tree: Path) -> None:
        captured: dict[str, bytes] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/categorize":
                return httpx.Response(200, json={"categories": [{"type": "id_card", "files": []}]})
            captured["group"] = request.content
            return httpx.Response(200, json={"credit_cards_group": []})

        gateway = HttpOcrGateway(
            base_url="http://ocr.test",
            timeout_seconds=5,
            transport=httpx.MockTransport(handler),
        )
        folder = next(f for f in FolderLoader().load(upload_tree) if f.customer_name == "ANN LEE")
        try:
            pairs = gateway.group_cards(folder.images, gateway.categorize(folder.images))
        finally:
            gateway.close()

        assert pairs == []
        assert json.dumps({"categories": [{"type": "id_card", "files": []}]}).encode() in captured["group"]

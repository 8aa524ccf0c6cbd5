from collections.abc import Callable
from unittest.mock import MagicMock

from cardrecon.config.settings import Settings
from cardrecon.folders.models import FolderEntry, ImageFile
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.ocr.exceptions import OcrNetworkError
from cardrecon.ocr.models import CardPair
from cardrecon.processor.customer_processor import CustomerProcessor
from cardrecon.processor.models import FOLDER_NOT_FOUND, NOT_FOUND, PROCESSING_ERROR, CustomerProgress
from cardrecon.processor.pipeline import (
    ReconciliationPipeline,
    build_reconciliation_pipeline,
    group_rows_by_customer,
    summarize,
)
from cardrecon.processor.reconciler import RowReconciler
from cardrecon.sheet.models import CustomerRecord
from cardrecon.validation.luhn import LuhnValidator

VALID = "4532015112830366"


def _row(customer: str, filename: str) -> CustomerRecord:
    return CustomerRecord(
        values={
            "Customer name": customer,
            "filename": filename,
            "CCN Expected": VALID,
            "Luhn test Expected": "Pass",
        }
    )


def _make_pipeline() -> tuple[ReconciliationPipeline, MagicMock]:
    gateway = MagicMock(spec=BaseOcrGateway)
    processor = CustomerProcessor(gateway, LuhnValidator())
    return ReconciliationPipeline(processor, RowReconciler()), gateway


class TestGroupRowsByCustomer:
    def test_first_seen_order(self) -> None:
        rows = [_row("B", "1"), _row("A", "2"), _row("B", "3")]
        assert group_rows_by_customer(rows) == {"B": [0, 2], "A": [1]}

    def test_ignores_surrounding_whitespace(self) -> None:
        rows = [_row("Ann", "1"), _row("Ann ", "2"), _row(" Ann", "3")]
        assert group_rows_by_customer(rows) == {"Ann": [0, 1, 2]}


class TestReconciliationPipeline:
    def test_grouping_failure_still_fills_every_row(
        self, make_folder: Callable[..., FolderEntry]
    ) -> None:
        pipeline, gateway = _make_pipeline()
        gateway.categorize.side_effect = OcrNetworkError("down")
        gateway.extract_card.return_value = VALID
        rows = [_row("Ann Lee", "1.jpg"), _row("Ann Lee", "2.jpg"), _row("Ann Lee", "3.jpg")]
        folder = make_folder("ANN LEE", "1.jpg", "2.jpg", "3.jpg")

        state = pipeline.run(rows, [folder])

        assert [r.actual_card_number for r in state.rows] == [VALID, VALID, VALID]
        assert [r.actual_validation for r in state.rows] == ["Pass", "Pass", "Pass"]
        assert gateway.extract_card.call_count == 3

    def test_missing_folder_does_not_stop_next_customer(
        self, make_folder: Callable[..., FolderEntry]
    ) -> None:
        pipeline, gateway = _make_pipeline()
        gateway.extract_card.return_value = VALID
        rows = [_row("Ghost", "g.jpg"), _row("Ghost", "h.jpg"), _row("Bob", "b.jpg")]

        state = pipeline.run(rows, [make_folder("BOB", "b.jpg")])

        assert [r.actual_card_number for r in state.rows] == [
            FOLDER_NOT_FOUND,
            FOLDER_NOT_FOUND,
            VALID,
        ]
        assert state.customers_done == 2
        assert state.rows_processed == 3

    def test_processing_error_marks_remaining_rows(self) -> None:
        pipeline, gateway = _make_pipeline()
        gateway.extract_card.return_value = VALID
        folder = FolderEntry(
            folder_name="CY_12345678",
            customer_name="CY",
            images=(ImageFile("a.jpg", b"junk"), ImageFile("b.jpg", b"junk")),
        )
        # undecodable pair fails while building the composite
        gateway.group_cards.return_value = [CardPair("a.jpg", "b.jpg")]
        rows = [_row("Cy", "a.jpg"), _row("Cy", "b.jpg")]

        state = pipeline.run(rows, [folder])

        assert [r.actual_card_number for r in state.rows] == [PROCESSING_ERROR, PROCESSING_ERROR]

    def test_notifies_listeners_and_survives_their_errors(
        self, make_folder: Callable[..., FolderEntry]
    ) -> None:
        pipeline, gateway = _make_pipeline()
        gateway.extract_card.return_value = VALID
        seen: list[CustomerProgress] = []

        def broken(progress: CustomerProgress) -> None:
            raise RuntimeError("listener down")

        pipeline.subscribe(broken)
        pipeline.subscribe(seen.append)
        rows = [_row("Bob", "b.jpg"), _row("Ann", "a.jpg")]

        pipeline.run(rows, [make_folder("ANN", "a.jpg"), make_folder("BOB", "b.jpg")])

        assert [(p.customer_name, p.index, p.total_customers) for p in seen] == [
            ("Bob", 1, 2),
            ("Ann", 2, 2),
        ]
        assert seen[-1].rows_processed == 2

    def test_input_rows_are_not_modified(self, make_folder: Callable[..., FolderEntry]) -> None:
        pipeline, gateway = _make_pipeline()
        gateway.extract_card.return_value = VALID
        rows = [_row("Bob", "b.jpg")]

        pipeline.run(rows, [make_folder("BOB", "b.jpg")])

        assert rows[0].actual_card_number == ""


    def test_ungrouped_file_does_not_replace_fallback_write(
        self, make_folder: Callable[..., FolderEntry]
    ) -> None:
        pipeline, gateway = _make_pipeline()
        gateway.group_cards.return_value = [CardPair("a.jpg", "b.jpg")]
        gateway.extract_card.side_effect = ["1111", "2222"]
        rows = [_row("Ann", "c.jpg"), _row("Ann", "d.jpg")]

        state = pipeline.run(rows, [make_folder("ANN", "a.jpg", "b.jpg", "c.jpg")])

        assert [r.actual_card_number for r in state.rows] == ["1111", "1111"]
        assert gateway.extract_card.call_count == 2

    def test_names_differing_by_surrounding_spaces_are_one_customer(
        self, make_folder: Callable[..., FolderEntry]
    ) -> None:
        pipeline, gateway = _make_pipeline()
        gateway.extract_card.return_value = VALID
        rows = [_row("Bob", "b.jpg"), _row(" Bob ", "b.jpg")]

        state = pipeline.run(rows, [make_folder("BOB", "b.jpg")])

        assert [r.actual_card_number for r in state.rows] == [VALID, VALID]
        assert gateway.extract_card.call_count == 1
        assert state.customers_done == 1

class TestSummarize:
    def test_counts(self) -> None:
        rows = [
            _row("A", "1").with_actual(VALID, "Pass"),
            _row("A", "2").with_actual(NOT_FOUND, "Fail"),
            _row("B", "3"),
        ]
        summary = summarize(rows)
        assert summary.total_rows == 3
        assert summary.rows_with_actual == 2
        assert summary.passed == 1
        assert summary.sentinel_counts == {NOT_FOUND: 1}
        assert summary.rows_without_actual == [2]


class TestBuildReconciliationPipeline:
    def test_builds_with_configured_validator(self) -> None:
        gateway = MagicMock(spec=BaseOcrGateway)
        pipeline = build_reconciliation_pipeline(Settings(validation_mode="issuer"), gateway)
        assert isinstance(pipeline, ReconciliationPipeline)

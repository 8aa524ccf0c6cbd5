"""Reconciliation run: every customer of the spreadsheet, one at a time.

Flow per customer: match folder -> process cards -> write each outcome back.
A failure inside one customer marks that customer's remaining empty rows with
PROCESSING_ERROR and the run moves on; no customer can stop the run.
"""

from collections.abc import Callable, Sequence

from cardrecon.config.settings import Settings
from cardrecon.folders.models import FolderEntry
from cardrecon.logging.logger import Log
from cardrecon.matching.folder_matcher import find_folder
from cardrecon.ocr.base import BaseOcrGateway
from cardrecon.processor.customer_processor import CustomerProcessor
from cardrecon.processor.models import (
    PROCESSING_ERROR,
    SENTINELS,
    CardOutcome,
    CustomerProgress,
    RunState,
    RunSummary,
)
from cardrecon.processor.reconciler import RowReconciler
from cardrecon.sheet.models import CustomerRecord
from cardrecon.validation.base import PASS
from cardrecon.validation.factory import ValidatorFactory

ProgressListener = Callable[[CustomerProgress], None]


def group_rows_by_customer(rows: Sequence[CustomerRecord]) -> dict[str, list[int]]:
    """Row indices per trimmed customer name, customers in first-seen order."""
    groups: dict[str, list[int]] = {}
    for index, row in enumerate(rows):
        groups.setdefault(row.customer_name.strip(), []).append(index)
    return groups


def summarize(rows: Sequence[CustomerRecord]) -> RunSummary:
    sentinel_counts: dict[str, int] = {}
    for row in rows:
        if row.actual_card_number in SENTINELS:
            sentinel_counts[row.actual_card_number] = (
                sentinel_counts.get(row.actual_card_number, 0) + 1
            )
    return RunSummary(
        total_rows=len(rows),
        rows_with_actual=sum(1 for row in rows if row.has_actual),
        passed=sum(1 for row in rows if row.actual_validation == PASS),
        sentinel_counts=sentinel_counts,
        rows_without_actual=[index for index, row in enumerate(rows) if not row.has_actual],
    )


class ReconciliationPipeline:
    """Drives CustomerProcessor and RowReconciler across all customers."""

    def __init__(
        self,
        processor: CustomerProcessor,
        reconciler: RowReconciler,
    ) -> None:
        self._processor = processor
        self._reconciler = reconciler
        self._listeners: list[ProgressListener] = []

    def subscribe(self, listener: ProgressListener) -> None:
        """Register a callback invoked after each customer completes."""
        self._listeners.append(listener)

    def run(
        self,
        rows: Sequence[CustomerRecord],
        folders: Sequence[FolderEntry],
    ) -> RunState:
        """Process every customer in *rows* against *folders*.

        Returns:
            The final RunState; its rows are the input rows with actual
            card numbers and validation results filled in.
        """
        state = RunState(rows=list(rows))
        groups = group_rows_by_customer(state.rows)
        Log.info(
            f"Processing {len(groups)} customers ({len(state.rows)} rows) "
            f"against {len(folders)} folders"
        )

        for index, (customer_name, row_indices) in enumerate(groups.items(), start=1):
            Log.info(f"Customer '{customer_name}' ({index}/{len(groups)})")
            state = self.process_customer(state, customer_name, row_indices, folders)
            self._notify(
                CustomerProgress(
                    customer_name=customer_name,
                    index=index,
                    total_customers=len(groups),
                    rows_processed=state.rows_processed,
                    total_rows=len(state.rows),
                )
            )

        self._log_summary(summarize(state.rows))
        return state

    def process_customer(
        self,
        state: RunState,
        customer_name: str,
        row_indices: Sequence[int],
        folders: Sequence[FolderEntry],
    ) -> RunState:
        """Match, process and write back one customer; never raises."""
        try:
            folder = find_folder(customer_name, folders)
            for outcome in self._processor.process(customer_name, folder):
                state.rows = self._reconciler.apply(outcome, row_indices, state.rows)
        except Exception as exc:
            Log.exception(f"Error processing '{customer_name}': {exc}")
            state.rows = self._reconciler.apply(
                CardOutcome.unfilled(PROCESSING_ERROR), row_indices, state.rows
            )

        state.customers_done += 1
        state.rows_processed += len(row_indices)
        return state

    def _notify(self, progress: CustomerProgress) -> None:
        for listener in self._listeners:
            try:
                listener(progress)
            except Exception as exc:
                Log.warning(f"Progress listener failed: {exc}")

    @staticmethod
    def _log_summary(summary: RunSummary) -> None:
        Log.info(
            f"Processing complete: {summary.rows_with_actual}/{summary.total_rows} rows "
            f"with a card number, {summary.passed} passed validation"
        )
        if summary.sentinel_counts:
            Log.info(f"Failure markers: {summary.sentinel_counts}")
        if summary.rows_without_actual:
            Log.warning(f"Rows without a card number: {summary.rows_without_actual}")


def build_reconciliation_pipeline(
    settings: Settings,
    gateway: BaseOcrGateway,
) -> ReconciliationPipeline:
    """Build a ReconciliationPipeline with the configured validator."""
    processor = CustomerProcessor(
        gateway=gateway,
        validator=ValidatorFactory.create(settings),
        composite_quality=settings.composite_jpeg_quality,
    )
    return ReconciliationPipeline(processor=processor, reconciler=RowReconciler())

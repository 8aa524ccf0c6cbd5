from collections.abc import Sequence

from cardrecon.logging.logger import Log
from cardrecon.matching.normalizer import normalize
from cardrecon.processor.models import CardOutcome, WriteMode
from cardrecon.sheet.models import CustomerRecord
from cardrecon.validation.base import mask_card_number


class RowReconciler:
    """Writes card outcomes onto a customer's spreadsheet rows.

    Only the actual card number and actual validation columns are ever
    changed. Rows are replaced with updated copies; the input list is not
    modified.
    """

    def apply(
        self,
        outcome: CardOutcome,
        row_indices: Sequence[int],
        rows: Sequence[CustomerRecord],
    ) -> list[CustomerRecord]:
        """Return *rows* with *outcome* written to the rows it belongs to.

        Standard outcomes go to every row whose filename matches one of the
        outcome's filenames (a later match overwrites an earlier one). With no
        match they go to the first rows that have no actual card number yet,
        at most one row per filename. Ungrouped outcomes behave the same but
        only write matching rows that are still empty. Missing-file outcomes
        only use filename matches; unfilled-row outcomes fill every still-empty
        row.
        """
        updated = list(rows)
        targets = self._select_targets(outcome, row_indices, updated)
        for index in targets:
            updated[index] = updated[index].with_actual(outcome.card_number, outcome.validation)
        return updated

    def _select_targets(
        self,
        outcome: CardOutcome,
        row_indices: Sequence[int],
        rows: Sequence[CustomerRecord],
    ) -> list[int]:
        if outcome.mode is WriteMode.UNFILLED_ROWS:
            return [index for index in row_indices if not rows[index].has_actual]

        matched = self._matching_rows(outcome.filenames, row_indices, rows)
        if outcome.mode is WriteMode.UNGROUPED and matched:
            empty = [index for index in matched if not rows[index].has_actual]
            if not empty:
                Log.debug(f"Rows {matched} for ungrouped {list(outcome.filenames)} already filled")
            return empty

        if matched:
            Log.debug(f"Outcome {mask_card_number(outcome.card_number)} matched rows {matched} by filename")
            return matched

        if outcome.mode is WriteMode.MISSING_FILE:
            Log.debug(f"No rows reference missing files {list(outcome.filenames)}")
            return []

        fallback = self._first_empty_rows(row_indices, rows, limit=max(1, len(outcome.filenames)))
        available = [rows[index].expected_filename for index in row_indices]
        Log.warning(
            f"No row filename matches {list(outcome.filenames)} (rows have {available}); "
            f"writing to empty rows {fallback}"
        )
        return fallback

    @staticmethod
    def _matching_rows(
        filenames: Sequence[str],
        row_indices: Sequence[int],
        rows: Sequence[CustomerRecord],
    ) -> list[int]:
        wanted = {normalize(name) for name in filenames if name}
        return [
            index
            for index in row_indices
            if normalize(rows[index].expected_filename) in wanted
        ]

    @staticmethod
    def _first_empty_rows(
        row_indices: Sequence[int],
        rows: Sequence[CustomerRecord],
        limit: int,
    ) -> list[int]:
        empty = [index for index in row_indices if not rows[index].has_actual]
        return empty[:limit]

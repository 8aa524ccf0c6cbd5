from dataclasses import dataclass, field
from enum import Enum

from cardrecon.sheet.models import CustomerRecord
from cardrecon.validation.base import FAIL

NOT_FOUND = "NOT_FOUND"
FOLDER_NOT_FOUND = "FOLDER_NOT_FOUND"
PROCESSING_ERROR = "PROCESSING_ERROR"

SENTINELS = frozenset({NOT_FOUND, FOLDER_NOT_FOUND, PROCESSING_ERROR})


class WriteMode(str, Enum):
    """How the reconciler picks target rows for an outcome."""

    STANDARD = "standard"  # filename match, else first empty rows
    MISSING_FILE = "missing_file"  # filename match only
    UNGROUPED = "ungrouped"  # empty filename matches, else first empty rows
    UNFILLED_ROWS = "unfilled_rows"  # every row of the customer still empty


@dataclass(frozen=True)
class CardOutcome:
    """Result for one physical card (or a customer-wide sentinel)."""

    card_number: str
    validation: str
    filenames: tuple[str, ...] = ()
    mode: WriteMode = WriteMode.STANDARD

    @classmethod
    def not_found(cls, filenames: tuple[str, ...]) -> "CardOutcome":
        return cls(NOT_FOUND, FAIL, filenames)

    @classmethod
    def missing_files(cls, filenames: tuple[str, ...]) -> "CardOutcome":
        return cls(NOT_FOUND, FAIL, filenames, WriteMode.MISSING_FILE)

    @classmethod
    def unfilled(cls, sentinel: str) -> "CardOutcome":
        return cls(sentinel, FAIL, (), WriteMode.UNFILLED_ROWS)


@dataclass
class RunState:
    """Accumulator threaded through a reconciliation run."""

    rows: list[CustomerRecord]
    customers_done: int = 0
    rows_processed: int = 0


@dataclass(frozen=True)
class CustomerProgress:
    """Sent to progress listeners after each customer completes."""

    customer_name: str
    index: int
    total_customers: int
    rows_processed: int
    total_rows: int


@dataclass(frozen=True)
class RunSummary:
    total_rows: int
    rows_with_actual: int
    passed: int
    sentinel_counts: dict[str, int] = field(default_factory=dict)
    rows_without_actual: list[int] = field(default_factory=list)

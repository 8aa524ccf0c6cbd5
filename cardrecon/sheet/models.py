from collections.abc import Sequence
from dataclasses import dataclass, field, replace

CUSTOMER_NAME = "Customer name"
FILENAME = "filename"
CCN_EXPECTED = "CCN Expected"
CCN_ACTUAL = "CCN Actual"
LUHN_EXPECTED_LEGACY = "Luhn test Expected"
LUHN_ACTUAL_LEGACY = "Luhn Test Actual"
LUHN_EXPECTED = "Luhn/BIN Expected"
LUHN_ACTUAL = "Luhn/BIN Actual"


@dataclass(frozen=True)
class SheetLayout:
    """Column names of the fields reconciliation reads and writes."""

    customer_name: str = CUSTOMER_NAME
    filename: str = FILENAME
    expected_card_number: str = CCN_EXPECTED
    actual_card_number: str = CCN_ACTUAL
    expected_validation: str = LUHN_EXPECTED_LEGACY
    actual_validation: str = LUHN_ACTUAL_LEGACY

    @classmethod
    def from_header(cls, fieldnames: Sequence[str]) -> "SheetLayout":
        """Pick legacy or ``Luhn/BIN`` validation column names from a header."""
        if LUHN_EXPECTED in fieldnames or LUHN_ACTUAL in fieldnames:
            return cls(expected_validation=LUHN_EXPECTED, actual_validation=LUHN_ACTUAL)
        return cls()

    @property
    def actual_columns(self) -> tuple[str, str]:
        return (self.actual_card_number, self.actual_validation)


@dataclass(frozen=True)
class SourceRow:
    """A data row as it appeared in the input file.

    ``cells`` are the parsed values and ``raw_cells`` the same cells as written,
    quotes included. Cells past the header width are kept in both.
    """

    line: str
    raw_cells: tuple[str, ...]
    cells: tuple[str, ...]

    @property
    def quote_all(self) -> bool:
        written = [cell for cell in self.raw_cells if cell]
        return bool(written) and all(cell.startswith('"') for cell in written)


@dataclass(frozen=True)
class CustomerRecord:
    """One spreadsheet row.

    ``values`` holds every column of the row, including ones nothing here
    understands. Records are never changed in place; ``with_actual`` returns a
    copy differing only in the two actual-result columns.
    ``source`` keeps the row as read from a file so export can reproduce it.
    """

    values: dict[str, str] = field(default_factory=dict)
    layout: SheetLayout = field(default_factory=SheetLayout)
    source: SourceRow | None = field(default=None, repr=False, compare=False)

    @property
    def customer_name(self) -> str:
        return self.values.get(self.layout.customer_name, "")

    @property
    def expected_filename(self) -> str:
        return self.values.get(self.layout.filename, "")

    @property
    def expected_card_number(self) -> str:
        return self.values.get(self.layout.expected_card_number, "")

    @property
    def expected_validation(self) -> str:
        return self.values.get(self.layout.expected_validation, "")

    @property
    def actual_card_number(self) -> str:
        return self.values.get(self.layout.actual_card_number, "")

    @property
    def actual_validation(self) -> str:
        return self.values.get(self.layout.actual_validation, "")

    @property
    def has_actual(self) -> bool:
        return bool(self.actual_card_number)

    def with_actual(self, card_number: str, validation: str) -> "CustomerRecord":
        values = dict(self.values)
        values[self.layout.actual_card_number] = card_number
        values[self.layout.actual_validation] = validation
        return replace(self, values=values)


@dataclass
class Sheet:
    """A loaded spreadsheet: header order, layout and rows.

    ``header_line`` and ``source_width`` describe the input header before any
    actual-result columns were appended; the remaining fields record the
    file's line ending, byte order mark and final newline.
    """

    fieldnames: list[str]
    layout: SheetLayout
    records: list[CustomerRecord] = field(default_factory=list)
    header_line: str | None = None
    source_width: int = 0
    newline: str = "\n"
    bom: bool = False
    trailing_newline: bool = True

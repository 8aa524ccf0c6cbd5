"""CSV load and export that leaves every column except the actual results untouched.

Each data row keeps its source text. On export a row whose actual columns did
not change is written back exactly as read; otherwise only the actual cells
are re-serialized, following the row's quoting style, and every other cell is
copied as written. Cells beyond the header width are carried along.
"""

import codecs
import csv
import io
from pathlib import Path

from cardrecon.logging.logger import Log
from cardrecon.sheet.exceptions import SheetFormatError
from cardrecon.sheet.models import CustomerRecord, Sheet, SheetLayout, SourceRow


def validated_path(path: Path) -> Path:
    """Default export location: ``<stem>_validated.csv`` next to the input."""
    return path.with_name(f"{path.stem}_validated.csv")


def load_sheet(path: Path) -> Sheet:
    """Read a CSV of expected card records.

    Header names are trimmed for lookup; cell values are kept as written.
    Short rows read as padded with empty cells and blank lines are skipped.
    The two actual-result columns are appended to the header when missing.

    Raises:
        FileNotFoundError: if *path* does not exist.
        SheetFormatError: if the header is missing or lacks the customer-name
                          or filename column.
    """
    data = path.read_bytes()
    bom = data.startswith(codecs.BOM_UTF8)
    text = data.decode("utf-8-sig")
    newline = "\r\n" if "\r\n" in text else "\n"

    raw_records = split_records(text)
    if not raw_records or not raw_records[0].strip():
        raise SheetFormatError(f"{path} has no header row")

    header_line = raw_records[0]
    source_fieldnames = [name.strip() for name in _parse_cells(header_line)]
    fieldnames = list(source_fieldnames)
    layout = SheetLayout.from_header(fieldnames)
    _require_columns(fieldnames, layout, path)

    records: list[CustomerRecord] = []
    for line_number, line in enumerate(raw_records[1:], start=2):
        cells = _parse_cells(line)
        if not any(cell.strip() for cell in cells):
            continue
        if len(cells) > len(fieldnames):
            Log.debug(f"{path}:{line_number} has {len(cells) - len(fieldnames)} cells past the header")
        padded = cells + [""] * (len(fieldnames) - len(cells))
        source = SourceRow(line=line, raw_cells=tuple(split_raw_cells(line)), cells=tuple(cells))
        records.append(
            CustomerRecord(values=dict(zip(fieldnames, padded)), layout=layout, source=source)
        )

    for column in layout.actual_columns:
        if column not in fieldnames:
            fieldnames.append(column)

    Log.info(f"Loaded {len(records)} rows from {path}")
    return Sheet(
        fieldnames=fieldnames,
        layout=layout,
        records=records,
        header_line=header_line,
        source_width=len(source_fieldnames),
        newline=newline,
        bom=bom,
        trailing_newline=text.endswith("\n"),
    )


def write_sheet(sheet: Sheet, path: Path) -> None:
    """Write *sheet* in header order, preserving the source text of every row."""
    lines = [_render_header(sheet)]
    lines.extend(_render_row(sheet, record) for record in sheet.records)

    text = sheet.newline.join(lines)
    if sheet.trailing_newline:
        text += sheet.newline
    if sheet.bom:
        text = "\ufeff" + text
    path.write_bytes(text.encode("utf-8"))
    Log.info(f"Wrote {len(sheet.records)} rows to {path}")


def split_records(text: str) -> list[str]:
    """Split CSV text into records, keeping newlines that sit inside quotes.

    Line endings are removed; the final empty line after a trailing newline is
    dropped.
    """
    records: list[str] = []
    current: list[str] = []
    quotes = 0
    for line in text.split("\n"):
        current.append(line)
        quotes += line.count('"')
        if quotes % 2 == 0:
            records.append("\n".join(current).removesuffix("\r"))
            current, quotes = [], 0
    if current:
        records.append("\n".join(current).removesuffix("\r"))
    if records and records[-1] == "" and text.endswith("\n"):
        records.pop()
    return records


def split_raw_cells(line: str) -> list[str]:
    """Split one record on the commas outside quotes, keeping each cell's quotes."""
    cells: list[str] = []
    start = 0
    in_quotes = False
    for index, char in enumerate(line):
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            cells.append(line[start:index])
            start = index + 1
    cells.append(line[start:])
    return cells


def format_cell(value: str, quote_all: bool = False) -> str:
    """Serialize one cell, quoting always or only when the value needs it."""
    if not value and not quote_all:
        return ""
    buffer = io.StringIO()
    quoting = csv.QUOTE_ALL if quote_all else csv.QUOTE_MINIMAL
    csv.writer(buffer, quoting=quoting, lineterminator="").writerow([value])
    return buffer.getvalue()


def _parse_cells(line: str) -> list[str]:
    return next(csv.reader(io.StringIO(line, newline="")), [])


def _render_header(sheet: Sheet) -> str:
    if sheet.header_line is None:
        return ",".join(format_cell(name) for name in sheet.fieldnames)
    appended = sheet.fieldnames[sheet.source_width:]
    return ",".join([sheet.header_line, *(format_cell(name) for name in appended)])


def _render_row(sheet: Sheet, record: CustomerRecord) -> str:
    source = record.source
    if source is None or sheet.header_line is None:
        return ",".join(format_cell(record.values.get(name, "")) for name in sheet.fieldnames)

    width = sheet.source_width
    cells = list(source.raw_cells[:width])
    cells += [""] * (width - len(cells))
    changed = False
    for index, name in enumerate(sheet.fieldnames[:width]):
        if name not in sheet.layout.actual_columns:
            continue
        value = record.values.get(name, "")
        original = source.cells[index] if index < len(source.cells) else ""
        if value != original:
            cells[index] = format_cell(value, source.quote_all)
            changed = True

    appended = [
        format_cell(record.values.get(name, ""), source.quote_all)
        for name in sheet.fieldnames[width:]
    ]
    if not changed and not appended:
        return source.line
    return ",".join([*cells, *appended, *source.raw_cells[width:]])


def _require_columns(fieldnames: list[str], layout: SheetLayout, path: Path) -> None:
    for column in (layout.customer_name, layout.filename):
        if column not in fieldnames:
            raise SheetFormatError(f"{path} is missing required column '{column}'")

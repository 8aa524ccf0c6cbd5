class SheetError(Exception):
    """Base exception for spreadsheet loading and export."""


class SheetFormatError(SheetError):
    """Raised when a spreadsheet lacks the columns reconciliation needs."""

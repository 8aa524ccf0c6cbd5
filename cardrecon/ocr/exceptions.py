class OcrError(Exception):
    """Raised when an OCR service call fails."""


class OcrNetworkError(OcrError):
    """Raised when the service cannot be reached or the call times out."""


class OcrApiError(OcrError):
    """Raised when the service answers with a non-success HTTP status."""


class OcrResponseError(OcrError):
    """Raised when the response body does not have the expected shape."""


class OcrEmptyResultError(OcrError):
    """Raised when extraction succeeds but yields no card number digits."""

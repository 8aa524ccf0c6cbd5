class ImagingError(Exception):
    """Base exception for compositing and redaction rendering."""


class ImageDecodeError(ImagingError):
    """Raised when image bytes cannot be decoded into a raster."""


class ImageEncodeError(ImagingError):
    """Raised when a raster cannot be encoded for output."""

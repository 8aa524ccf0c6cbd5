from dataclasses import dataclass, field
from pathlib import PurePosixPath

_JPEG_MAGIC = b"\xff\xd8\xff"


@dataclass(frozen=True)
class RedactedCard:
    """One source image and its masked copy, as written to the output tree."""

    folder_name: str
    card_index: int
    source_filename: str
    original: bytes = field(repr=False)
    redacted: bytes = field(repr=False)

    @property
    def original_name(self) -> str:
        return self._name(self.original)

    @property
    def redacted_name(self) -> str:
        return self._name(self.redacted)

    def _name(self, data: bytes) -> str:
        suffix = ".jpg" if data.startswith(_JPEG_MAGIC) else PurePosixPath(self.source_filename).suffix
        return f"card{self.card_index + 1}{suffix or '.jpg'}"

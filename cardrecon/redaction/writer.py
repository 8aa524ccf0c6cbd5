import zipfile
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from cardrecon.logging.logger import Log
from cardrecon.redaction.models import RedactedCard


class ArchiveContents(str, Enum):
    ALL = "all"
    ORIGINAL = "original"
    REDACTED = "redacted"


class RedactionWriter:
    """Lays redacted cards out as ``original/<folder>/cardN`` and ``redacted/<folder>/cardN``."""

    def write(self, cards: Sequence[RedactedCard], output_dir: Path) -> list[Path]:
        """Write every card's original and redacted image under *output_dir*."""
        written: list[Path] = []
        for relative, data in self._entries(cards, ArchiveContents.ALL):
            path = output_dir / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            written.append(path)
        Log.info(f"Wrote {len(written)} images to {output_dir}")
        return written

    def archive(
        self,
        cards: Sequence[RedactedCard],
        path: Path,
        contents: ArchiveContents = ArchiveContents.ALL,
    ) -> Path:
        """Write the tree of ``write``, or only its original or redacted half, into a zip."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
            for relative, data in self._entries(cards, contents):
                archive.writestr(relative, data)
        Log.info(f"Archived {contents.value} images of {len(cards)} cards to {path}")
        return path

    @staticmethod
    def _entries(
        cards: Sequence[RedactedCard],
        contents: ArchiveContents,
    ) -> list[tuple[str, bytes]]:
        entries: list[tuple[str, bytes]] = []
        for card in cards:
            if contents is not ArchiveContents.REDACTED:
                entries.append((f"original/{card.folder_name}/{card.original_name}", card.original))
            if contents is not ArchiveContents.ORIGINAL:
                entries.append((f"redacted/{card.folder_name}/{card.redacted_name}", card.redacted))
        return entries

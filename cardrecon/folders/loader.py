from pathlib import Path

from cardrecon.folders.models import FolderEntry, ImageFile
from cardrecon.logging.logger import Log
from cardrecon.matching.normalizer import extract_customer_name

IMAGE_EXTENSIONS = frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp"})


def is_image_file(path: Path) -> bool:
    return path.is_file() and path.suffix.lower() in IMAGE_EXTENSIONS


class FolderLoader:
    """Reads a two-level upload tree: ``{root}/{customer_folder}/{image}``."""

    def load(self, root: Path) -> list[FolderEntry]:
        """Build one FolderEntry per customer subfolder of *root*.

        Only image files directly inside a subfolder are kept. Loose files at
        the root and deeper nesting are ignored. Subfolders without images are
        still returned so the matcher can report them as empty.

        Raises:
            FileNotFoundError: if *root* is not an existing directory.
        """
        if not root.is_dir():
            raise FileNotFoundError(f"Folder root not found: {root}")

        entries = [
            self._load_folder(path)
            for path in sorted(root.iterdir())
            if path.is_dir()
        ]
        entries.sort(key=lambda entry: entry.customer_name)

        image_count = sum(len(entry.images) for entry in entries)
        Log.info(f"Found {len(entries)} customer folders with {image_count} images in {root}")
        return entries

    def _load_folder(self, path: Path) -> FolderEntry:
        image_paths = sorted(
            (child for child in path.iterdir() if is_image_file(child)),
            key=lambda child: child.name,
        )
        images = tuple(
            ImageFile(name=child.name, content=child.read_bytes())
            for child in image_paths
        )
        return FolderEntry(
            folder_name=path.name,
            customer_name=extract_customer_name(path.name),
            images=images,
        )

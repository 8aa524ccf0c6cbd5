"""Turns a customer folder plus the service's card pairs into per-card scenarios.

Each scenario variant is handled on its own by the validation and redaction
pipelines:

- SingleImage: the folder holds exactly one image, no grouping involved.
- PairedCard: both sides of a pair were found; they are composited.
- UnpairedCard: a pair with one side, or the located half of a broken pair.
- MissingCard: pair references that match no file in the folder.
- UngroupedImage: a folder image no pair referenced.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from cardrecon.folders.models import FolderEntry, ImageFile
from cardrecon.logging.logger import Log
from cardrecon.matching.normalizer import normalize
from cardrecon.ocr.models import CardPair


@dataclass(frozen=True)
class SingleImage:
    image: ImageFile


@dataclass(frozen=True)
class PairedCard:
    front: ImageFile
    back: ImageFile


@dataclass(frozen=True)
class UnpairedCard:
    image: ImageFile


@dataclass(frozen=True)
class MissingCard:
    references: tuple[str, ...]


@dataclass(frozen=True)
class UngroupedImage:
    image: ImageFile


CardScenario = SingleImage | PairedCard | UnpairedCard | MissingCard | UngroupedImage


def find_image(folder: FolderEntry, reference: str) -> ImageFile | None:
    """Resolve a filename reported by the service: exact name first, then normalized."""
    if not reference:
        return None
    for image in folder.images:
        if image.name == reference:
            return image
    wanted = normalize(reference)
    for image in folder.images:
        if normalize(image.name) == wanted:
            return image
    return None


def degenerate_pairs(folder: FolderEntry) -> list[CardPair]:
    """One front-only pair per image, used when grouping is unavailable."""
    return [CardPair(front=image.name) for image in folder.images]


def plan_cards(
    folder: FolderEntry,
    pairs: Sequence[CardPair] | None,
) -> list[CardScenario]:
    """Classify a folder's cards.

    Args:
        folder: The customer's folder.
        pairs: Grouping result, or None when grouping failed. Ignored for
               single-image folders. None or empty means every image is
               treated as its own card.

    Returns:
        Scenarios in processing order: one per declared pair (two for a pair
        with a missing side), then one per image no pair referenced.
    """
    if not folder.images:
        return []
    if len(folder.images) == 1:
        return [SingleImage(folder.images[0])]

    if not pairs:
        Log.warning(
            f"No card pairs for '{folder.folder_name}'; "
            f"processing all {len(folder.images)} images individually"
        )
        pairs = degenerate_pairs(folder)

    scenarios: list[CardScenario] = []
    referenced: set[str] = set()

    for pair in pairs:
        referenced.update(pair.references)
        resolved = [(ref, find_image(folder, ref)) for ref in pair.references]
        referenced.update(image.name for _ref, image in resolved if image is not None)

        missing = tuple(ref for ref, image in resolved if image is None)
        located = [image for _ref, image in resolved if image is not None]

        if missing:
            Log.error(
                f"Files not found in '{folder.folder_name}': {list(missing)}. "
                f"Available files: {folder.image_names}"
            )
            scenarios.append(MissingCard(missing))

        if len(located) == 2:
            scenarios.append(PairedCard(front=located[0], back=located[1]))
        elif len(located) == 1:
            scenarios.append(UnpairedCard(located[0]))

    leftovers = [image for image in folder.images if image.name not in referenced]
    if leftovers:
        Log.warning(
            f"Found {len(leftovers)} ungrouped file(s) in '{folder.folder_name}': "
            f"{[image.name for image in leftovers]}"
        )
    scenarios.extend(UngroupedImage(image) for image in leftovers)
    return scenarios

"""Best-effort matching of spreadsheet customer names to uploaded folders.

Two phases over the whole candidate set: exact equality of normalized names,
then substring containment in either direction. Within a phase, folder order
(the loader's sort order) breaks ties, so when several folders partially match
the first one wins even if a later one is a closer fit.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum

from cardrecon.folders.models import FolderEntry
from cardrecon.logging.logger import Log
from cardrecon.matching.normalizer import normalize_customer_name


class MatchKind(str, Enum):
    EXACT = "exact"
    PARTIAL = "partial"


@dataclass(frozen=True)
class FolderCandidate:
    folder: FolderEntry
    kind: MatchKind


def rank_folders(
    customer_name: str,
    folders: Sequence[FolderEntry],
) -> list[FolderCandidate]:
    """Return every plausible folder for *customer_name*, best first.

    Exact matches come before partial ones; each group keeps folder order.
    A blank customer name only ever matches blank folder names exactly.
    """
    wanted = normalize_customer_name(customer_name)
    exact: list[FolderCandidate] = []
    partial: list[FolderCandidate] = []

    for folder in folders:
        candidate_name = normalize_customer_name(folder.customer_name)
        if candidate_name == wanted:
            exact.append(FolderCandidate(folder, MatchKind.EXACT))
        elif wanted and candidate_name and (
            wanted in candidate_name or candidate_name in wanted
        ):
            partial.append(FolderCandidate(folder, MatchKind.PARTIAL))

    return exact + partial


def find_folder(
    customer_name: str,
    folders: Sequence[FolderEntry],
) -> FolderEntry | None:
    """Pick the top-ranked folder, or None when nothing usable matches.

    A matched folder with no images counts as not found.
    """
    candidates = rank_folders(customer_name, folders)
    if not candidates:
        Log.warning(
            f"No folder match for '{customer_name}'. "
            f"Available folders: {[f.customer_name for f in folders]}"
        )
        return None

    best = candidates[0]
    if len(candidates) > 1:
        Log.debug(
            f"{len(candidates)} folder candidates for '{customer_name}': "
            f"{[(c.folder.folder_name, c.kind.value) for c in candidates]}"
        )
    if not best.folder.images:
        Log.warning(f"Folder '{best.folder.folder_name}' for '{customer_name}' has no images")
        return None

    Log.info(
        f"{best.kind.value.capitalize()} match: '{customer_name}' -> "
        f"'{best.folder.folder_name}' ({len(best.folder.images)} image(s))"
    )
    return best.folder

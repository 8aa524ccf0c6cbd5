from cardrecon.folders.models import FolderEntry, ImageFile
from cardrecon.matching.folder_matcher import MatchKind, find_folder, rank_folders


def _folder(customer_name: str, images: int = 1) -> FolderEntry:
    return FolderEntry(
        folder_name=customer_name.replace(" ", "_") + "_0123abcd",
        customer_name=customer_name,
        images=tuple(ImageFile(name=f"img{i}.jpg", content=b"x") for i in range(images)),
    )


class TestRankFolders:
    def test_exact_before_partial(self) -> None:
        folders = [_folder("JOHN SMITH JR"), _folder("JOHN SMITH")]
        ranked = rank_folders("John Smith", folders)
        assert [c.folder.customer_name for c in ranked] == ["JOHN SMITH", "JOHN SMITH JR"]
        assert [c.kind for c in ranked] == [MatchKind.EXACT, MatchKind.PARTIAL]

    def test_partial_in_either_direction(self) -> None:
        folders = [_folder("SMITH")]
        ranked = rank_folders("John Smith", folders)
        assert len(ranked) == 1
        assert ranked[0].kind is MatchKind.PARTIAL

    def test_no_match(self) -> None:
        assert rank_folders("Alice", [_folder("BOB")]) == []

    def test_blank_name_never_partially_matches(self) -> None:
        assert rank_folders("", [_folder("BOB")]) == []


class TestFindFolder:
    def test_insensitive_to_case_underscores_and_hyphens(self) -> None:
        folder = _folder("MARY-ANN O_BRIEN")
        assert find_folder("mary ann o brien", [folder]) is folder

    def test_first_partial_match_wins(self) -> None:
        first, second = _folder("ANN LEE"), _folder("ANN LEE SMITH")
        assert find_folder("Lee", [first, second]) is first

    def test_empty_folder_counts_as_not_found(self) -> None:
        assert find_folder("Bob", [_folder("BOB", images=0)]) is None

    def test_returns_none_without_candidates(self) -> None:
        assert find_folder("Carol", [_folder("BOB")]) is None

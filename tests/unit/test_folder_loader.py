from pathlib import Path

import pytest

from cardrecon.folders.loader import FolderLoader, is_image_file


class TestIsImageFile:
    def test_accepts_known_extensions_case_insensitive(self, tmp_path: Path) -> None:
        path = tmp_path / "card.JPG"
        path.write_bytes(b"x")
        assert is_image_file(path) is True

    def test_rejects_other_files(self, tmp_path: Path) -> None:
        path = tmp_path / "notes.txt"
        path.write_bytes(b"x")
        assert is_image_file(path) is False

    def test_rejects_directories(self, tmp_path: Path) -> None:
        path = tmp_path / "nested.jpg"
        path.mkdir()
        assert is_image_file(path) is False


class TestFolderLoader:
    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="not found"):
            FolderLoader().load(tmp_path / "missing")

    def test_loads_direct_images_sorted(self, tmp_path: Path) -> None:
        folder = tmp_path / "JOHN_SMITH_a1b2c3d4"
        folder.mkdir()
        (folder / "b.png").write_bytes(b"B")
        (folder / "a.jpg").write_bytes(b"A")
        (folder / "readme.txt").write_bytes(b"ignored")
        (folder / "deeper").mkdir()
        (folder / "deeper" / "c.jpg").write_bytes(b"C")

        entries = FolderLoader().load(tmp_path)

        assert len(entries) == 1
        entry = entries[0]
        assert entry.folder_name == "JOHN_SMITH_a1b2c3d4"
        assert entry.customer_name == "JOHN SMITH"
        assert entry.image_names == ["a.jpg", "b.png"]
        assert entry.images[0].content == b"A"

    def test_keeps_empty_folders_and_ignores_root_files(self, tmp_path: Path) -> None:
        (tmp_path / "ZED_ffffffff").mkdir()
        (tmp_path / "AMY_00000000").mkdir()
        (tmp_path / "loose.jpg").write_bytes(b"x")

        entries = FolderLoader().load(tmp_path)

        assert [e.customer_name for e in entries] == ["AMY", "ZED"]
        assert all(e.images == () for e in entries)

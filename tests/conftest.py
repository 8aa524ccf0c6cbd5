import io
from collections.abc import Callable

import pytest
from PIL import Image

from cardrecon.folders.models import FolderEntry, ImageFile


def make_image_bytes(
    size: tuple[int, int] = (40, 20),
    color: tuple[int, int, int] = (200, 30, 30),
    fmt: str = "JPEG",
    mode: str = "RGB",
) -> bytes:
    buf = io.BytesIO()
    if mode == "RGBA":
        Image.new("RGBA", size, (*color, 255)).save(buf, format=fmt)
    else:
        Image.new(mode, size, color).save(buf, format=fmt)
    return buf.getvalue()


@pytest.fixture()
def image_bytes() -> Callable[..., bytes]:
    """Factory for small solid-color images."""
    return make_image_bytes


@pytest.fixture()
def front_bytes() -> bytes:
    return make_image_bytes((40, 20), (255, 255, 255), fmt="PNG")


@pytest.fixture()
def back_bytes() -> bytes:
    return make_image_bytes((30, 10), (255, 255, 255), fmt="PNG")


@pytest.fixture()
def make_folder() -> Callable[..., FolderEntry]:
    """Build a FolderEntry whose images are tiny valid PNGs."""

    def _make(customer_name: str, *names: str, folder_name: str | None = None) -> FolderEntry:
        content = make_image_bytes(fmt="PNG")
        return FolderEntry(
            folder_name=folder_name or customer_name.replace(" ", "_") + "_abcdef12",
            customer_name=customer_name,
            images=tuple(ImageFile(name=name, content=content) for name in names),
        )

    return _make

import io
from collections.abc import Callable

import pytest
from PIL import Image

from cardrecon.imaging.compositor import composite_vertically, decode_image, image_size
from cardrecon.imaging.exceptions import ImageDecodeError


def _open(data: bytes) -> Image.Image:
    return Image.open(io.BytesIO(data))


class TestDecodeImage:
    def test_raises_for_garbage(self) -> None:
        with pytest.raises(ImageDecodeError, match="broken.jpg"):
            decode_image(b"not an image", "broken.jpg")

    def test_image_size(self, image_bytes: Callable[..., bytes]) -> None:
        assert image_size(image_bytes((33, 17))) == (33, 17)


class TestCompositeVertically:
    def test_dimensions_are_max_width_and_summed_height(
        self, image_bytes: Callable[..., bytes]
    ) -> None:
        merged = composite_vertically(
            [image_bytes((40, 20), fmt="PNG"), image_bytes((30, 10), fmt="PNG")]
        )
        with _open(merged) as result:
            assert result.format == "JPEG"
            assert result.size == (40, 30)

    def test_narrow_image_leaves_white_background(
        self, image_bytes: Callable[..., bytes]
    ) -> None:
        merged = composite_vertically(
            [
                image_bytes((40, 20), (0, 0, 0), fmt="PNG"),
                image_bytes((10, 20), (0, 0, 0), fmt="PNG"),
            ]
        )
        with _open(merged) as result:
            rgb = result.convert("RGB")
            red, green, blue = rgb.getpixel((35, 30))
            assert min(red, green, blue) > 230
            red, green, blue = rgb.getpixel((2, 30))
            assert max(red, green, blue) < 25

    def test_accepts_alpha_images(self, image_bytes: Callable[..., bytes]) -> None:
        merged = composite_vertically([image_bytes((8, 8), fmt="PNG", mode="RGBA")])
        with _open(merged) as result:
            assert result.size == (8, 8)

    def test_empty_input_raises(self) -> None:
        with pytest.raises(ValueError, match="at least one image"):
            composite_vertically([])

    def test_undecodable_input_raises(self, image_bytes: Callable[..., bytes]) -> None:
        with pytest.raises(ImageDecodeError, match="composite input 1"):
            composite_vertically([image_bytes(), b"garbage"])

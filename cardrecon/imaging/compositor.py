import io
from collections.abc import Sequence

from PIL import Image, ImageOps, UnidentifiedImageError

from cardrecon.imaging.exceptions import ImageDecodeError, ImageEncodeError

BACKGROUND = (255, 255, 255)


def decode_image(data: bytes, name: str = "image") -> Image.Image:
    """Decode *data* into a fully loaded, EXIF-upright raster.

    The caller owns the returned image and must close it.

    Raises:
        ImageDecodeError: if the bytes are not a readable image.
    """
    try:
        with Image.open(io.BytesIO(data)) as opened:
            return ImageOps.exif_transpose(opened)
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise ImageDecodeError(f"Cannot decode {name}: {exc}") from exc


def image_size(data: bytes, name: str = "image") -> tuple[int, int]:
    """Pixel (width, height) of *data* after EXIF orientation is applied."""
    image = decode_image(data, name)
    try:
        return image.size
    finally:
        image.close()


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    """Encode *image* as JPEG, flattening alpha and palette modes to RGB."""
    buffer = io.BytesIO()
    try:
        if image.mode == "RGB":
            image.save(buffer, format="JPEG", quality=quality)
        else:
            with image.convert("RGB") as rgb:
                rgb.save(buffer, format="JPEG", quality=quality)
    except (OSError, ValueError) as exc:
        raise ImageEncodeError(f"JPEG encoding failed: {exc}") from exc
    return buffer.getvalue()


def composite_vertically(images: Sequence[bytes], quality: int = 90) -> bytes:
    """Stack *images* top to bottom into one JPEG.

    Output width is the widest input, height the sum of all heights. Each
    image is pasted unscaled at x=0 directly under the previous one; space to
    the right of narrower images stays white.

    Raises:
        ValueError: if *images* is empty.
        ImageDecodeError: if any input cannot be decoded.
    """
    if not images:
        raise ValueError("composite_vertically needs at least one image")

    decoded: list[Image.Image] = []
    try:
        for index, data in enumerate(images):
            decoded.append(decode_image(data, f"composite input {index}"))

        width = max(image.width for image in decoded)
        height = sum(image.height for image in decoded)
        with Image.new("RGB", (width, height), BACKGROUND) as canvas:
            offset_y = 0
            for image in decoded:
                if image.mode in ("RGBA", "LA", "P"):
                    with image.convert("RGBA") as rgba:
                        canvas.paste(rgba, (0, offset_y), rgba)
                else:
                    canvas.paste(image, (0, offset_y))
                offset_y += image.height
            return encode_jpeg(canvas, quality)
    finally:
        for image in decoded:
            image.close()

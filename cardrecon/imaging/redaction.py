"""Projects detected redaction regions onto source images and masks them.

A front/back pair is submitted to the service as one vertical composite, so the
regions come back in the composite page's coordinate space, which the service
may report at a different scale than the real pixels. Splitting works in that
API space: the boundary between front and back is placed at the same fraction
of the page height that the front occupies in the real composite, each region
goes to the side its mean y falls on, and back regions are shifted up by the
boundary. Rendering then rescales each side from its API sub-page to the real
image.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from PIL import ImageDraw

from cardrecon.imaging.compositor import decode_image, encode_jpeg, image_size
from cardrecon.ocr.models import Point, RedactionMetadata, RedactionRegion, RegionKind

MASK_COLOR = (0, 0, 0)


@dataclass(frozen=True)
class RedactionStyle:
    quality: int = 95
    cvc_width_factor: float = 4.0
    cvc_height_factor: float = 2.0


@dataclass(frozen=True)
class SplitRegions:
    """Regions of a composite reassigned to its front and back source images."""

    front: list[RedactionRegion]
    back: list[RedactionRegion]
    api_width: float
    api_front_height: float
    api_back_height: float


@dataclass(frozen=True)
class RedactedPair:
    front_original: bytes
    front_redacted: bytes
    back_original: bytes
    back_redacted: bytes


def split_regions(
    metadata: RedactionMetadata,
    front_size: tuple[int, int],
    back_size: tuple[int, int],
) -> SplitRegions:
    """Assign every region of a front-over-back composite to exactly one side.

    Args:
        metadata: Regions detected on the composite, in API page coordinates.
        front_size: True (width, height) of the front source image.
        back_size: True (width, height) of the back source image.

    Raises:
        ValueError: if both source images have zero height.
    """
    front_width, front_height = front_size
    back_width, back_height = back_size
    total_height = front_height + back_height
    if total_height <= 0:
        raise ValueError("Cannot split regions between two zero-height images")

    page = metadata.first_page
    api_width = page.width if page and page.width > 0 else float(max(front_width, back_width))
    api_height = page.height if page and page.height > 0 else float(total_height)
    api_front_height = api_height * (front_height / total_height)

    front: list[RedactionRegion] = []
    back: list[RedactionRegion] = []
    for region in metadata.regions:
        if region.mean_y < api_front_height:
            front.append(region)
        else:
            back.append(region.shifted(-api_front_height))

    return SplitRegions(
        front=front,
        back=back,
        api_width=api_width,
        api_front_height=api_front_height,
        api_back_height=api_height - api_front_height,
    )


def expand_cvc_polygon(
    polygon: Sequence[Point],
    width_factor: float,
    height_factor: float,
) -> tuple[Point, ...]:
    """Grow a CVC box rightward and downward from its min-x/min-y corner."""
    if len(polygon) < 3:
        return tuple(polygon)
    min_x = min(point.x for point in polygon)
    min_y = min(point.y for point in polygon)
    return tuple(
        Point(
            min_x + (point.x - min_x) * width_factor,
            min_y + (point.y - min_y) * height_factor,
        )
        for point in polygon
    )


def render_regions(
    data: bytes,
    regions: Sequence[RedactionRegion],
    page_width: float,
    page_height: float,
    style: RedactionStyle,
    name: str = "image",
) -> bytes:
    """Fill *regions* solid black on a copy of *data*.

    Coordinates are scaled from a page of ``page_width`` x ``page_height`` to
    the image's pixel size. Without regions the original bytes are returned
    untouched.

    Raises:
        ImageDecodeError: if *data* cannot be decoded.
    """
    if not regions:
        return data

    source = decode_image(data, name)
    try:
        with source.convert("RGB") as canvas:
            scale_x = canvas.width / page_width if page_width > 0 else 1.0
            scale_y = canvas.height / page_height if page_height > 0 else 1.0
            draw = ImageDraw.Draw(canvas)
            for region in regions:
                polygon = region.polygon
                if len(polygon) < 3:
                    continue
                if region.kind is RegionKind.CVC:
                    polygon = expand_cvc_polygon(
                        polygon, style.cvc_width_factor, style.cvc_height_factor
                    )
                draw.polygon(
                    [(point.x * scale_x, point.y * scale_y) for point in polygon],
                    fill=MASK_COLOR,
                )
            return encode_jpeg(canvas, style.quality)
    finally:
        source.close()


def redact_single(
    data: bytes,
    metadata: RedactionMetadata,
    style: RedactionStyle,
    name: str = "image",
) -> bytes:
    """Mask regions detected on *data* itself (no composite involved)."""
    page = metadata.first_page
    if page is not None and page.width > 0 and page.height > 0:
        page_width, page_height = page.width, page.height
    else:
        width, height = image_size(data, name)
        page_width, page_height = float(width), float(height)
    return render_regions(data, metadata.regions, page_width, page_height, style, name)


def redact_pair(
    front: bytes,
    back: bytes,
    metadata: RedactionMetadata,
    style: RedactionStyle,
) -> RedactedPair:
    """Project composite regions back onto the two source images and mask them."""
    front_size = image_size(front, "front image")
    back_size = image_size(back, "back image")
    split = split_regions(metadata, front_size, back_size)

    front_redacted = render_regions(
        front, split.front, split.api_width, split.api_front_height, style, "front image"
    )
    back_redacted = render_regions(
        back, split.back, split.api_width, split.api_back_height, style, "back image"
    )
    return RedactedPair(
        front_original=front,
        front_redacted=front_redacted,
        back_original=back,
        back_redacted=back_redacted,
    )

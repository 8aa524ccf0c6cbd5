"""Builds domain models from raw OCR service JSON, rejecting malformed bodies."""

from typing import Any

from cardrecon.logging.logger import Log
from cardrecon.ocr.exceptions import OcrEmptyResultError, OcrResponseError
from cardrecon.ocr.models import (
    CardPair,
    Categorization,
    DocumentCategory,
    PageInfo,
    Point,
    RedactionMetadata,
    RedactionRegion,
    RegionKind,
)
from cardrecon.validation.base import digits_only, mask_card_number


def parse_card_number(data: Any) -> str:
    """Pull ``Credit_Card_Number.value`` and keep its digits.

    Raises:
        OcrResponseError: if the body is not an object.
        OcrEmptyResultError: if the field is missing or holds no digits.
    """
    _require_object(data, "credit card response")
    field = data.get("Credit_Card_Number")
    value = field.get("value") if isinstance(field, dict) else None
    if value is None or value == "":
        raise OcrEmptyResultError("No credit card number found in image")
    digits = digits_only(str(value))
    if not digits:
        raise OcrEmptyResultError(f"Credit card value {value!r} contains no digits")
    Log.debug(f"OCR extracted {mask_card_number(digits)}")
    return digits


def parse_categorization(data: Any) -> Categorization:
    """Raises OcrResponseError unless ``categories`` is a list of groups."""
    _require_object(data, "categorize response")
    categories = [
        DocumentCategory(type=str(group.get("type", "")), files=pairs)
        for group, pairs in _iter_groups(data, "categories")
    ]
    return Categorization(categories=categories, raw=data)


def parse_card_pairs(data: Any) -> list[CardPair]:
    """Flatten every group's file pairs from a grouping response, in order."""
    _require_object(data, "group response")
    pairs: list[CardPair] = []
    for _group, group_pairs in _iter_groups(data, "credit_cards_group"):
        pairs.extend(group_pairs)
    return pairs


def parse_redaction_metadata(data: Any) -> RedactionMetadata:
    """Build RedactionMetadata from a ``redaction_metadata`` envelope.

    Polygons with fewer than three points cannot be filled and are dropped.
    """
    _require_object(data, "redaction response")
    metadata = data.get("redaction_metadata")
    _require_object(metadata, "redaction_metadata")

    pages = [_build_page(raw, index) for index, raw in enumerate(_list(metadata, "pages"))]
    return RedactionMetadata(
        document_type=str(metadata.get("document_type") or ""),
        pages=pages,
        card_number_regions=_build_regions(metadata, "card_number_boxes", RegionKind.CARD_NUMBER),
        cvc_regions=_build_regions(metadata, "cvc_boxes", RegionKind.CVC),
    )


def _require_object(data: Any, label: str) -> None:
    if not isinstance(data, dict):
        raise OcrResponseError(f"{label} must be a JSON object")


def _list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise OcrResponseError(f"'{key}' must be a list")
    return value


def _iter_groups(
    data: dict[str, Any],
    key: str,
) -> list[tuple[dict[str, Any], list[CardPair]]]:
    if key not in data:
        raise OcrResponseError(f"Missing required field: {key}")
    groups: list[tuple[dict[str, Any], list[CardPair]]] = []
    for index, group in enumerate(_list(data, key)):
        if not isinstance(group, dict):
            raise OcrResponseError(f"'{key}[{index}]' must be an object")
        groups.append((group, _build_pairs(group, f"{key}[{index}]")))
    return groups


def _build_pairs(group: dict[str, Any], label: str) -> list[CardPair]:
    pairs: list[CardPair] = []
    for index, raw in enumerate(_list(group, "files")):
        if not isinstance(raw, dict):
            raise OcrResponseError(f"'{label}.files[{index}]' must be an object")
        pair = CardPair(front=str(raw.get("front") or ""), back=str(raw.get("back") or ""))
        if not pair.references:
            Log.warning(f"Ignoring empty file pair at {label}.files[{index}]")
            continue
        pairs.append(pair)
    return pairs


def _build_page(raw: Any, index: int) -> PageInfo:
    if not isinstance(raw, dict):
        raise OcrResponseError(f"'pages[{index}]' must be an object")
    try:
        return PageInfo(
            page=int(raw.get("page", index + 1)),
            width=float(raw.get("width") or 0),
            height=float(raw.get("height") or 0),
            unit=str(raw.get("unit") or "pixel"),
        )
    except (TypeError, ValueError) as exc:
        raise OcrResponseError(f"'pages[{index}]' has non-numeric dimensions") from exc


def _build_regions(
    metadata: dict[str, Any],
    key: str,
    kind: RegionKind,
) -> list[RedactionRegion]:
    regions: list[RedactionRegion] = []
    for index, box in enumerate(_list(metadata, key)):
        if not isinstance(box, dict):
            raise OcrResponseError(f"'{key}[{index}]' must be an object")
        polygon = tuple(
            _build_point(point, f"{key}[{index}]") for point in _list(box, "polygon")
        )
        if len(polygon) < 3:
            Log.debug(f"Skipping degenerate polygon {key}[{index}] with {len(polygon)} points")
            continue
        regions.append(RedactionRegion(kind=kind, polygon=polygon))
    return regions


def _build_point(raw: Any, label: str) -> Point:
    if not isinstance(raw, dict):
        raise OcrResponseError(f"'{label}.polygon' points must be objects")
    x, y = raw.get("x"), raw.get("y")
    if not _is_number(x) or not _is_number(y):
        raise OcrResponseError(f"'{label}.polygon' points need numeric x and y")
    return Point(float(x), float(y))


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)

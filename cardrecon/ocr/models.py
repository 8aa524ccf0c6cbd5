from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True)
class CardPair:
    """Front/back filenames of one physical card. Either side may be empty."""

    front: str = ""
    back: str = ""

    @property
    def is_paired(self) -> bool:
        return bool(self.front and self.back)

    @property
    def references(self) -> tuple[str, ...]:
        return tuple(name for name in (self.front, self.back) if name)


@dataclass(frozen=True)
class DocumentCategory:
    """One category reported by the categorization call."""

    type: str
    files: list[CardPair] = field(default_factory=list)


@dataclass(frozen=True)
class Categorization:
    """Categorization result; ``raw`` is sent back verbatim to the grouping call."""

    categories: list[DocumentCategory] = field(default_factory=list)
    raw: dict[str, object] = field(default_factory=dict)


@dataclass(frozen=True)
class Point:
    x: float
    y: float


class RegionKind(str, Enum):
    CARD_NUMBER = "card_number"
    CVC = "cvc"


@dataclass(frozen=True)
class RedactionRegion:
    """A polygon to mask, in the coordinate space of the page it was detected on."""

    kind: RegionKind
    polygon: tuple[Point, ...]

    @property
    def mean_y(self) -> float:
        return sum(point.y for point in self.polygon) / len(self.polygon)

    def shifted(self, dy: float) -> "RedactionRegion":
        return RedactionRegion(
            kind=self.kind,
            polygon=tuple(Point(point.x, point.y + dy) for point in self.polygon),
        )


@dataclass(frozen=True)
class PageInfo:
    page: int
    width: float
    height: float
    unit: str = "pixel"


@dataclass(frozen=True)
class RedactionMetadata:
    """Regions the service detected on one submitted image."""

    document_type: str = ""
    pages: list[PageInfo] = field(default_factory=list)
    card_number_regions: list[RedactionRegion] = field(default_factory=list)
    cvc_regions: list[RedactionRegion] = field(default_factory=list)

    @property
    def regions(self) -> list[RedactionRegion]:
        return [*self.card_number_regions, *self.cvc_regions]

    @property
    def first_page(self) -> PageInfo | None:
        return self.pages[0] if self.pages else None

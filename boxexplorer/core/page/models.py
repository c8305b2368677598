import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

# 2D affine matrix in PDF order: (a, b, c, d, e, f)
Transform = Tuple[float, float, float, float, float, float]

IDENTITY: Transform = (1.0, 0.0, 0.0, 1.0, 0.0, 0.0)


# ==============================================================================
# Types
# ==============================================================================


class PageRenderState(Enum):
    """Materialization state of one page slot."""

    UNRENDERED = "unrendered"
    LOADING = "loading"
    RENDERED = "rendered"


# ==============================================================================
# Geometry
# ==============================================================================


def compose_transform(m1: Sequence[float], m2: Sequence[float]) -> Transform:
    """Matrix product ``m1 x m2`` (apply ``m2`` first, then ``m1``)."""
    return (
        m1[0] * m2[0] + m1[2] * m2[1],
        m1[1] * m2[0] + m1[3] * m2[1],
        m1[0] * m2[2] + m1[2] * m2[3],
        m1[1] * m2[2] + m1[3] * m2[3],
        m1[0] * m2[4] + m1[2] * m2[5] + m1[4],
        m1[1] * m2[4] + m1[3] * m2[5] + m1[5],
    )


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +inf."""
    return int(math.floor(value + 0.5))


@dataclass(frozen=True)
class Rect:
    """Edge-based rectangle used for hit testing."""

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def from_points(cls, x0: float, y0: float, x1: float, y1: float) -> "Rect":
        """Normalized rectangle spanned by two corner points."""
        return cls(min(x0, x1), min(y0, y1), max(x0, x1), max(y0, y1))

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    def intersects(self, other: "Rect") -> bool:
        """Open-interval overlap: rectangles that only touch do not intersect."""
        return (
            self.left < other.right
            and self.right > other.left
            and self.top < other.bottom
            and self.bottom > other.top
        )

    def translated(self, dx: float, dy: float) -> "Rect":
        return Rect(self.left + dx, self.top + dy, self.right + dx, self.bottom + dy)


@dataclass(frozen=True)
class BBox:
    """Glyph box in page-local pixels at the current render scale."""

    x: float
    y: float
    width: float
    height: float

    @property
    def rect(self) -> Rect:
        return Rect(self.x, self.y, self.x + self.width, self.y + self.height)

    def contains_point(self, x: float, y: float) -> bool:
        return self.x <= x <= self.x + self.width and self.y <= y <= self.y + self.height

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}


# ==============================================================================
# Text Layer Objects
# ==============================================================================


@dataclass(frozen=True)
class TextRun:
    """
    One text item of a page's layout, as produced by the text extractor.

    ``transform`` places the run's baseline origin in page space; ``width``
    and ``height`` are unscaled page-space extents.
    """

    text: str
    transform: Transform
    width: float
    height: float


@dataclass(frozen=True)
class Glyph:
    """One visible character with its box on a rendered page."""

    page: int  # 1-based
    id: int  # reading-order index within the page
    char: str
    bbox: BBox

    @property
    def key(self) -> str:
        return f"{self.page}-{self.id}"

from dataclasses import dataclass, field
from typing import Optional, Tuple

from ..page.models import BBox, Glyph, Rect

# Manhattan distance a press must travel before it becomes a drag
DRAG_THRESHOLD = 4


def selection_key(page: int, glyph_id: int) -> str:
    return f"{page}-{glyph_id}"


@dataclass(frozen=True)
class SelectionEntry:
    """
    Snapshot of a selected glyph.

    Kept independently of the text layer so the selection survives a
    re-render that invalidates the glyph it was taken from.
    """

    page: int
    id: int
    char: str
    bbox: BBox

    @classmethod
    def from_glyph(cls, glyph: Glyph) -> "SelectionEntry":
        return cls(page=glyph.page, id=glyph.id, char=glyph.char, bbox=glyph.bbox)

    @property
    def key(self) -> str:
        return selection_key(self.page, self.id)

    @property
    def sort_key(self) -> Tuple[int, float, float]:
        return (self.page, self.bbox.y, self.bbox.x)


@dataclass
class DragGesture:
    """Tracks one press-move-release sequence in content coordinates."""

    start_x: float
    start_y: float
    current_x: float = field(init=False)
    current_y: float = field(init=False)
    is_dragging: bool = False

    def __post_init__(self):
        self.current_x = self.start_x
        self.current_y = self.start_y

    def move(self, x: float, y: float) -> bool:
        """Record pointer movement; returns True once the drag has started."""
        self.current_x = x
        self.current_y = y
        if not self.is_dragging:
            dx = abs(x - self.start_x)
            dy = abs(y - self.start_y)
            if dx + dy > DRAG_THRESHOLD:
                self.is_dragging = True
        return self.is_dragging

    @property
    def rect(self) -> Optional[Rect]:
        """Rubber-band rectangle, only while dragging."""
        if not self.is_dragging:
            return None
        return Rect.from_points(self.start_x, self.start_y, self.current_x, self.current_y)

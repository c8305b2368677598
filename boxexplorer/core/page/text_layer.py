"""
Glyph-level text index for a rendered page.
"""

from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .models import BBox, Glyph, Rect, TextRun, Transform, compose_transform, round_half_up


def extract_glyphs(
    runs: Iterable[TextRun],
    viewport_transform: Sequence[float],
    scale: float,
    page: int,
) -> List[Glyph]:
    """
    Split text runs into one glyph per non-whitespace character.

    Each run's transform is composed with the viewport transform to find its
    on-screen baseline origin. The run's scaled width is divided evenly over
    its characters, so every character of a run gets the same box width.
    Whitespace is dropped without consuming an id, but still occupies its
    slot in the run so the following characters keep their x positions.

    Ids are assigned sequentially across the page in run order.
    """
    glyphs: List[Glyph] = []
    running_index = 0

    for run in runs:
        text = run.text
        if not text or not text.strip():
            continue

        tx = compose_transform(viewport_transform, run.transform)
        height = run.height * scale
        width = run.width * scale
        char_width = width / len(text)
        base_x = tx[4]
        base_y = tx[5] - height

        for i, char in enumerate(text):
            if not char.strip():
                continue
            glyphs.append(
                Glyph(
                    page=page,
                    id=running_index,
                    char=char,
                    bbox=BBox(
                        x=round_half_up(base_x + i * char_width),
                        y=round_half_up(base_y),
                        width=round_half_up(char_width),
                        height=round_half_up(height),
                    ),
                )
            )
            running_index += 1

    return glyphs


class PageTextLayer:
    """
    Ordered glyphs of one rendered page with a grid index for hit testing.

    Read-only once built; a re-render at another scale builds a new layer.
    """

    def __init__(self, page: int, glyphs: Sequence[Glyph], grid_size: int = 50):
        self.page = page
        self.glyphs: List[Glyph] = sorted(glyphs, key=lambda g: g.id)
        self._grid: Dict[Tuple[int, int], List[Glyph]] = {}
        self._grid_size = grid_size  # Grid cell size for spatial lookup

        self._build_spatial_index()

    @classmethod
    def from_runs(
        cls,
        page: int,
        runs: Iterable[TextRun],
        viewport_transform: Transform,
        scale: float,
    ) -> "PageTextLayer":
        return cls(page, extract_glyphs(runs, viewport_transform, scale, page))

    @classmethod
    def empty(cls, page: int) -> "PageTextLayer":
        return cls(page, [])

    def _build_spatial_index(self):
        """Build a grid-based spatial index for fast glyph lookup."""
        self._grid.clear()

        for glyph in self.glyphs:
            rect = glyph.bbox.rect
            min_col = int(rect.left // self._grid_size)
            max_col = int(rect.right // self._grid_size)
            min_row = int(rect.top // self._grid_size)
            max_row = int(rect.bottom // self._grid_size)

            for row in range(min_row, max_row + 1):
                for col in range(min_col, max_col + 1):
                    self._grid.setdefault((row, col), []).append(glyph)

    def glyph_at_point(self, x: float, y: float) -> Optional[Glyph]:
        """Find the glyph whose box contains a page-local pixel point."""
        cell = (int(y // self._grid_size), int(x // self._grid_size))
        for glyph in self._grid.get(cell, []):
            if glyph.bbox.contains_point(x, y):
                return glyph
        return None

    def glyphs_in_rect(self, rect: Rect) -> List[Glyph]:
        """Glyphs whose boxes strictly overlap a page-local rectangle."""
        min_row = int(rect.top // self._grid_size)
        max_row = int(rect.bottom // self._grid_size)
        min_col = int(rect.left // self._grid_size)
        max_col = int(rect.right // self._grid_size)

        found: Dict[int, Glyph] = {}
        for row in range(min_row, max_row + 1):
            for col in range(min_col, max_col + 1):
                for glyph in self._grid.get((row, col), []):
                    if glyph.id not in found and glyph.bbox.rect.intersects(rect):
                        found[glyph.id] = glyph

        return [found[i] for i in sorted(found)]

    @property
    def text(self) -> str:
        """Linear character stream: every glyph in id order, no separators."""
        return "".join(g.char for g in self.glyphs)

    def __iter__(self):
        return iter(self.glyphs)

    def __len__(self) -> int:
        return len(self.glyphs)

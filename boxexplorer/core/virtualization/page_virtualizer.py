"""
Lazy page materialization for single-page and continuous-scroll modes.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterator, List, Optional, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from ...utils.logger import logger
from ..page.models import Glyph, PageRenderState, Rect
from ..page.page_model import PageModel

# Fit-width layout
FIT_PADDING = 80
FIT_MIN_WIDTH = 320
FIT_MAX_WIDTH = 900

# Manual zoom
MIN_SCALE = 0.5
MAX_SCALE = 4.0
ZOOM_STEP = 0.1

# Continuous-scroll layout and visibility window
PAGE_SPACING = 32
VISIBILITY_MARGIN = 400
VISIBILITY_THRESHOLD = 0.15
SCROLL_ANCHOR_OFFSET = 24


class ViewMode(Enum):
    SINGLE = "single"
    SCROLL = "scroll"


class ScaleMode(Enum):
    FIT_WIDTH = "fitWidth"
    MANUAL = "manual"


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def clamp_manual_scale(scale: float) -> float:
    return clamp(scale, MIN_SCALE, MAX_SCALE)


def compute_fit_width_scale(
    page_width: float,
    viewer_width: float,
    padding: float = FIT_PADDING,
    min_width: float = FIT_MIN_WIDTH,
    max_width: float = FIT_MAX_WIDTH,
) -> float:
    """
    Scale at which a page of unscaled ``page_width`` fills the viewer.

    The viewer width minus padding is clamped into ``[min_width, max_width]``
    before dividing, so very narrow or very wide windows still produce a
    readable page.
    """
    if page_width <= 0:
        return 1.0
    available = max(0.0, viewer_width - padding)
    target = min(max_width, max(min_width, available))
    return target / page_width


@dataclass
class PageSlot:
    """Layout slot of one page; holds the materialized model once rendered."""

    page: int
    top: int = 0
    width: int = 0
    height: int = 0
    state: PageRenderState = PageRenderState.UNRENDERED
    observed: bool = False
    model: Optional[PageModel] = None

    @property
    def bottom(self) -> int:
        return self.top + self.height

    @property
    def is_rendered(self) -> bool:
        return self.state is PageRenderState.RENDERED


class PageVirtualizer(QObject):
    """
    Owns page render state and the glyph layers of materialized pages.

    Any change of document, mode or scale tears every slot down and starts a
    new generation; nothing is rescaled in place. In scroll mode every page
    gets a placeholder slot sized after the first page, and a page is
    materialized at most once per generation, either when it comes near the
    viewport or when a consumer forces it.
    """

    page_materialized = pyqtSignal(int)
    layout_changed = pyqtSignal()

    def __init__(self, reader, renderer: Optional[Callable[..., PageModel]] = None, parent=None):
        super().__init__(parent)
        self.reader = reader
        self._renderer = renderer or PageModel.render

        self.mode = ViewMode.SINGLE
        self.scale_mode = ScaleMode.FIT_WIDTH
        self.manual_scale = 1.2
        self.viewer_width = 0
        self.invert = False

        self.generation = 0
        self.scale = 1.0
        self.current_page = 1
        self._slots: Dict[int, PageSlot] = {}

    # ===== Scale =====

    def effective_scale(self, page: int) -> float:
        """Scale a page would be rendered at with the current settings."""
        if self.scale_mode is ScaleMode.MANUAL:
            return clamp_manual_scale(self.manual_scale)
        width, _ = self.reader.get_page_size(page)
        return compute_fit_width_scale(width, self.viewer_width)

    # ===== Lifecycle =====

    def teardown(self):
        """Discard every page state and start a new generation."""
        self.generation += 1
        self._slots.clear()

    def rebuild(self, current_page: Optional[int] = None):
        """
        Recreate all page state for the current mode and scale.

        Single-page mode materializes ``current_page`` immediately. Scroll
        mode lays out placeholders and leaves materialization to
        :meth:`update_visibility`.
        """
        if current_page is not None:
            self.current_page = current_page

        self.teardown()
        page_count = self.reader.get_page_count()
        if page_count <= 0:
            self.layout_changed.emit()
            return

        self.current_page = int(clamp(self.current_page, 1, page_count))

        if self.mode is ViewMode.SINGLE:
            self.scale = self.effective_scale(self.current_page)
            width, height = self.reader.get_page_size(self.current_page)
            slot = PageSlot(
                page=self.current_page,
                width=round(width * self.scale),
                height=round(height * self.scale),
            )
            self._slots[slot.page] = slot
            self._materialize(slot)
        else:
            self.scale = self.effective_scale(1)
            width, height = self.reader.get_page_size(1)
            placeholder_height = round(height * self.scale)
            placeholder_width = round(width * self.scale)
            for page in range(1, page_count + 1):
                self._slots[page] = PageSlot(
                    page=page,
                    width=placeholder_width,
                    height=placeholder_height,
                    observed=True,
                )
            self._relayout()

        logger.debug(
            "Rebuilt pages: mode=%s scale=%.3f generation=%d",
            self.mode.value,
            self.scale,
            self.generation,
        )
        self.layout_changed.emit()

    # ===== Materialization =====

    def update_visibility(self, view_top: float, view_height: float) -> List[int]:
        """
        Materialize observed pages that intersect the expanded viewport.

        The viewport is grown by ``VISIBILITY_MARGIN`` above and below. A page
        qualifies when at least ``VISIBILITY_THRESHOLD`` of its height lies
        inside that window, or when it covers the whole window.

        Returns:
            Pages materialized by this call
        """
        if self.mode is not ViewMode.SCROLL:
            return []

        window_top = view_top - VISIBILITY_MARGIN
        window_bottom = view_top + view_height + VISIBILITY_MARGIN
        window_height = window_bottom - window_top

        materialized = []
        for slot in list(self._slots.values()):
            if not slot.observed or slot.state is not PageRenderState.UNRENDERED:
                continue

            overlap = min(slot.bottom, window_bottom) - max(slot.top, window_top)
            if overlap <= 0 or slot.height <= 0:
                continue

            ratio = overlap / slot.height
            if ratio >= VISIBILITY_THRESHOLD or overlap >= window_height:
                slot.observed = False
                if self._materialize(slot):
                    materialized.append(slot.page)

        return materialized

    def ensure_materialized(self, page: int) -> Optional[PageModel]:
        """
        Force a page to be materialized regardless of visibility.

        Returns:
            The page model, or None if the page has no slot in this mode
        """
        slot = self._slots.get(page)
        if slot is None:
            return None
        if slot.state is PageRenderState.UNRENDERED:
            slot.observed = False
            self._materialize(slot)
        return slot.model

    def _materialize(self, slot: PageSlot) -> bool:
        if slot.state is not PageRenderState.UNRENDERED:
            return False

        generation = self.generation
        slot.state = PageRenderState.LOADING
        model = self._renderer(self.reader, slot.page, self.scale, self.invert)

        if generation != self.generation or self._slots.get(slot.page) is not slot:
            # Superseded by a reset while rendering
            return False

        slot.model = model
        if model.height > 0:
            slot.width = model.width
            slot.height = model.height
        slot.state = PageRenderState.RENDERED
        self._relayout()

        logger.debug("Materialized page %d (%d glyphs)", slot.page, len(model.text_layer))
        self.page_materialized.emit(slot.page)
        return True

    # ===== Layout =====

    def _relayout(self):
        top = 0
        for page in sorted(self._slots):
            slot = self._slots[page]
            slot.top = top
            top += slot.height + PAGE_SPACING

    def page_offset(self, page: int) -> Tuple[int, int]:
        """Top-left corner of a page in content coordinates (pages are centred)."""
        slot = self._slots.get(page)
        if slot is None:
            return 0, 0
        left = max(0, (self.content_width - slot.width) // 2)
        return left, slot.top

    @property
    def content_width(self) -> int:
        widest = max((s.width for s in self._slots.values()), default=0)
        return max(self.viewer_width, widest)

    @property
    def content_height(self) -> int:
        if not self._slots:
            return 0
        last = self._slots[max(self._slots)]
        return last.bottom + PAGE_SPACING

    def page_at_scroll(self, scroll_top: float) -> int:
        """Last page whose top lies at or above ``scroll_top`` plus a small offset."""
        anchor = scroll_top + SCROLL_ANCHOR_OFFSET
        current = min(self._slots) if self._slots else self.current_page
        for page in sorted(self._slots):
            if self._slots[page].top <= anchor:
                current = page
            else:
                break
        return current

    # ===== Accessors =====

    def slot(self, page: int) -> Optional[PageSlot]:
        return self._slots.get(page)

    def slots(self) -> List[PageSlot]:
        return [self._slots[p] for p in sorted(self._slots)]

    def page_model(self, page: int) -> Optional[PageModel]:
        slot = self._slots.get(page)
        return slot.model if slot is not None else None

    def rendered_pages(self) -> List[int]:
        return [p for p in sorted(self._slots) if self._slots[p].is_rendered]

    def glyphs_in_rect(self, rect: Rect) -> Iterator[Tuple[Glyph, Rect]]:
        """
        Materialized glyphs overlapping a content-space rectangle.

        The rectangle is moved into each page's local space and answered by
        that page's grid index. Boxes are returned in content coordinates.
        """
        for page in self.rendered_pages():
            slot = self._slots[page]
            if rect.bottom <= slot.top or rect.top >= slot.bottom:
                continue
            dx, dy = self.page_offset(page)
            local = rect.translated(-dx, -dy)
            for glyph in slot.model.text_layer.glyphs_in_rect(local):
                yield glyph, glyph.bbox.rect.translated(dx, dy)

    def glyph_at(self, x: float, y: float) -> Optional[Glyph]:
        """Glyph under a point in content coordinates."""
        for page in self.rendered_pages():
            slot = self._slots[page]
            dx, dy = self.page_offset(page)
            if not (slot.top <= y <= slot.bottom):
                continue
            return slot.model.text_layer.glyph_at_point(x - dx, y - dy)
        return None

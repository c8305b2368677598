"""
Glyph selection state shared across all pages.
"""

from typing import Dict, Iterable, List, Tuple

from PyQt5.QtCore import QObject, pyqtSignal

from ..page.models import Glyph, Rect
from .models import SelectionEntry, selection_key


class SelectionManager(QObject):
    """
    Set of selected glyphs keyed by ``"page-id"``.

    Supports:
    - Click toggling of single glyphs
    - Rubber-band selection over every materialized page
    - A deterministic signature of the selected key set

    Only this class mutates the selection.
    """

    # Signals
    selection_changed = pyqtSignal()
    selection_cleared = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._entries: Dict[str, SelectionEntry] = {}

    def toggle(self, glyph: Glyph) -> bool:
        """
        Add the glyph if absent, remove it if present.

        Returns:
            True if the glyph is selected afterwards
        """
        key = selection_key(glyph.page, glyph.id)
        if key in self._entries:
            del self._entries[key]
            selected = False
        else:
            self._entries[key] = SelectionEntry.from_glyph(glyph)
            selected = True

        self.selection_changed.emit()
        return selected

    def select_in_rect(self, rect: Rect, screen_glyphs: Iterable[Tuple[Glyph, Rect]]) -> int:
        """
        Replace the selection with every glyph whose box overlaps ``rect``.

        Args:
            rect: Selection rectangle in content coordinates
            screen_glyphs: ``(glyph, box)`` pairs with boxes in the same space

        Returns:
            Number of selected glyphs
        """
        self._entries.clear()
        for glyph, box in screen_glyphs:
            if box.intersects(rect):
                entry = SelectionEntry.from_glyph(glyph)
                self._entries[entry.key] = entry

        self.selection_changed.emit()
        return len(self._entries)

    def clear(self):
        """Clear the selection."""
        had_selection = bool(self._entries)
        self._entries.clear()
        if had_selection:
            self.selection_cleared.emit()
            self.selection_changed.emit()

    def is_selected(self, page: int, glyph_id: int) -> bool:
        return selection_key(page, glyph_id) in self._entries

    def selected_ids(self, page: int) -> List[int]:
        """Ids of selected glyphs on one page."""
        return [e.id for e in self._entries.values() if e.page == page]

    def sorted_entries(self) -> List[SelectionEntry]:
        """Entries in reading order: page, then top, then left."""
        return sorted(self._entries.values(), key=lambda e: e.sort_key)

    def pages(self) -> List[int]:
        """Distinct pages touched by the selection, ascending."""
        return sorted({e.page for e in self._entries.values()})

    def signature(self) -> str:
        """Sorted selection keys joined by ``|``; independent of insertion order."""
        return "|".join(sorted(self._entries))

    @property
    def count(self) -> int:
        return len(self._entries)

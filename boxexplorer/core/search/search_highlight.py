from dataclasses import dataclass, field
from typing import Optional, Set

from ..page.models import Glyph
from ..page.text_layer import PageTextLayer
from .models import SearchSession


@dataclass
class SearchHighlight:
    """Glyph ids to mark on one page for the current search session."""

    matched: Set[int] = field(default_factory=set)
    active: Set[int] = field(default_factory=set)
    anchor: Optional[Glyph] = None

    @classmethod
    def for_page(cls, session: SearchSession, text_layer: PageTextLayer) -> "SearchHighlight":
        """
        Map match offsets back onto glyphs.

        Offsets index the page's glyphs in id order. A session computed for
        another page highlights nothing.
        """
        highlight = cls()
        if not session.is_active or session.page != text_layer.page:
            return highlight

        glyphs = text_layer.glyphs
        for match in session.matches:
            for offset in range(match.start, min(match.end, len(glyphs))):
                highlight.matched.add(glyphs[offset].id)

        active = session.active_match
        if active is not None:
            for offset in range(active.start, min(active.end, len(glyphs))):
                highlight.active.add(glyphs[offset].id)
            if active.start < len(glyphs):
                highlight.anchor = glyphs[active.start]

        return highlight

    @property
    def is_empty(self) -> bool:
        return not self.matched

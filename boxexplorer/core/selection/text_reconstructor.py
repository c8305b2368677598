"""
Rebuilds readable text from selected glyph geometry.
"""

from typing import Iterable, List

from .models import SelectionEntry

# A glyph further than this fraction of the previous glyph's height starts a new line
LINE_BREAK_RATIO = 0.6
# A horizontal gap wider than this fraction of the previous glyph's width is a space
WORD_GAP_RATIO = 0.35
MIN_WORD_GAP = 2


def build_selected_text(entries: Iterable[SelectionEntry]) -> str:
    """
    Join glyphs into lines, inferring spaces from horizontal gaps.

    ``entries`` is sorted here by ``(page, y, x)``, so callers may pass the
    selection in any order. A new line starts on a page change or when the
    vertical offset exceeds ``LINE_BREAK_RATIO`` of the previous glyph's
    height.
    """
    ordered = sorted(entries, key=lambda e: e.sort_key)
    if not ordered:
        return ""

    lines: List[str] = []
    prev = ordered[0]
    buffer = prev.char

    for item in ordered[1:]:
        same_page = item.page == prev.page
        same_line = abs(item.bbox.y - prev.bbox.y) <= prev.bbox.height * LINE_BREAK_RATIO

        if not same_page or not same_line:
            lines.append(buffer)
            buffer = item.char
        else:
            gap = item.bbox.x - (prev.bbox.x + prev.bbox.width)
            if gap > max(MIN_WORD_GAP, prev.bbox.width * WORD_GAP_RATIO):
                buffer += " " + item.char
            else:
                buffer += item.char
        prev = item

    lines.append(buffer)
    return "\n".join(lines)

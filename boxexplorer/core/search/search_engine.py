"""
Substring search over a page's glyph stream with cyclic navigation.
"""

import re
from typing import List

from ...utils.logger import logger
from .models import SearchMatch, SearchSession

_WHITESPACE = re.compile(r"\s+")


def normalize_query(text: str) -> str:
    """Strip all whitespace; glyph streams carry none."""
    return _WHITESPACE.sub("", text or "")


def find_matches(text: str, query: str) -> List[SearchMatch]:
    """
    Sequential scan for ``query`` in ``text``.

    The cursor advances ``max(1, len(query))`` past each match start, so
    matches never overlap and an empty query cannot stall the scan.
    """
    matches: List[SearchMatch] = []
    step = max(1, len(query))
    idx = 0
    while idx <= len(text):
        found = text.find(query, idx)
        if found == -1:
            break
        matches.append(SearchMatch(start=found, length=len(query)))
        idx = found + step
    return matches


class GlyphSearchEngine:
    """
    Handles search within the current page's glyph stream.

    Matches are cached per (query, page); navigating with the same query on
    the same page reuses them. The target page is materialized on demand.
    """

    def __init__(self, virtualizer):
        self._virtualizer = virtualizer
        self.session = SearchSession()

    def clear_search(self) -> None:
        """Reset all search state."""
        self.session = SearchSession()

    def page_text(self, page: int) -> str:
        """Linear character stream of a page, forcing materialization."""
        model = self._virtualizer.ensure_materialized(page)
        if model is None:
            return ""
        return model.text_layer.text

    def run(self, raw_query: str, page: int, direction: int = 1, reset: bool = False) -> SearchSession:
        """
        Search ``page`` and advance the active match.

        The first run after a (re)compute activates match 0; later runs move
        by ``direction`` and wrap around. Without matches this is a no-op.

        Args:
            raw_query: Query as typed; whitespace is removed
            page: 1-based page to search
            direction: 1 for next, -1 for previous
            reset: Recompute even if query and page are unchanged

        Returns:
            The current search session
        """
        query = normalize_query(raw_query)
        if not query:
            self.clear_search()
            return self.session

        changed = query != self.session.query or page != self.session.page
        if reset or changed:
            text = self.page_text(page)
            self.session = SearchSession(query=query, page=page, matches=find_matches(text, query))
            logger.debug("Search %r on page %d: %d matches", query, page, len(self.session.matches))

        count = len(self.session.matches)
        if count == 0:
            return self.session

        if self.session.index == -1:
            self.session.index = 0
        else:
            self.session.index = (self.session.index + direction) % count

        return self.session

    def next_result(self, raw_query: str, page: int) -> SearchSession:
        return self.run(raw_query, page, direction=1)

    def previous_result(self, raw_query: str, page: int) -> SearchSession:
        return self.run(raw_query, page, direction=-1)

    @property
    def match_count(self) -> int:
        return len(self.session.matches)

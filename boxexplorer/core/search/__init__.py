"""Per-page glyph search."""

from .models import SearchMatch, SearchSession
from .search_engine import GlyphSearchEngine, find_matches, normalize_query
from .search_highlight import SearchHighlight

__all__ = [
    "GlyphSearchEngine",
    "SearchHighlight",
    "SearchMatch",
    "SearchSession",
    "find_matches",
    "normalize_query",
]

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class SearchMatch:
    """Occurrence of the query in a page's character stream."""

    start: int
    length: int

    @property
    def end(self) -> int:
        return self.start + self.length


@dataclass
class SearchSession:
    """Matches of one normalized query against one page."""

    query: str = ""
    page: int = 0
    matches: List[SearchMatch] = field(default_factory=list)
    index: int = -1  # -1 means no active match

    @property
    def is_active(self) -> bool:
        return bool(self.query)

    @property
    def active_match(self) -> Optional[SearchMatch]:
        if 0 <= self.index < len(self.matches):
            return self.matches[self.index]
        return None

"""
Markdown rendering of annotation output with versioned, coalesced renders.
"""

import html
from typing import Callable, Optional, Tuple

import markdown
from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from ...utils.logger import logger

PLACEHOLDER = "—"
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "sane_lists"]


def render_markdown(text: str) -> str:
    """Markdown to an HTML fragment; raw HTML in the input is escaped first."""
    return markdown.markdown(html.escape(text, quote=False), extensions=MARKDOWN_EXTENSIONS)


def _default_dispatch(fn: Callable[[], None]):
    QTimer.singleShot(0, fn)


class RenderScheduler(QObject):
    """
    Coalesces render requests and drops stale results.

    Every request is stamped with a new version. Only one render runs at a
    time; requests made meanwhile overwrite a single pending slot, which is
    rendered once the running one completes. A completed render is shown
    only if no newer version was stamped after it.

    ``rendered`` carries ``(content, is_html)``. Plain content is shown
    verbatim when formatting fails or the text is blank.
    """

    rendered = pyqtSignal(str, bool)

    def __init__(
        self,
        formatter: Callable[[str], str] = render_markdown,
        dispatch: Optional[Callable[[Callable[[], None]], None]] = None,
        parent=None,
    ):
        super().__init__(parent)
        self._formatter = formatter
        self._dispatch = dispatch or _default_dispatch
        self.version = 0
        self.in_flight = False
        self._pending: Optional[Tuple[str, int]] = None

    def request(self, snapshot: str) -> int:
        """Stamp and schedule a render of ``snapshot``; returns its version."""
        self.version += 1
        version = self.version

        if self.in_flight:
            self._pending = (snapshot, version)
            return version

        self.in_flight = True
        self._dispatch(lambda: self._run(snapshot, version))
        return version

    def reset(self):
        """Invalidate every outstanding render."""
        self.version += 1
        self._pending = None

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def _run(self, snapshot: str, version: int):
        try:
            content, is_html = self._format(snapshot)
            if version == self.version:
                self.rendered.emit(content, is_html)
        finally:
            self.in_flight = False
            if self._pending is not None:
                pending_snapshot, _ = self._pending
                self._pending = None
                self.request(pending_snapshot)

    def _format(self, snapshot: str) -> Tuple[str, bool]:
        if not snapshot.strip():
            return PLACEHOLDER, False
        try:
            formatted = self._formatter(snapshot)
        except Exception as e:
            logger.warning("Markdown rendering failed: %s", e)
            return snapshot, False
        if not formatted:
            return snapshot, False
        return formatted, True

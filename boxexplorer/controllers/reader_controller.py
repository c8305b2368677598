"""
Controller owning the reading session and dispatching user commands.
"""

import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import pyperclip
from PyQt5.QtCore import QObject, pyqtSignal

from ..core.annotation import STATUS_SELECTION_CHANGED, AiConfig, AnnotationPipeline
from ..core.document import PDFDocumentReader
from ..core.page import Glyph, Rect
from ..core.search import GlyphSearchEngine, SearchHighlight
from ..core.selection import SelectionManager, build_selected_text
from ..core.virtualization import (
    ZOOM_STEP,
    PageVirtualizer,
    ScaleMode,
    ViewMode,
    clamp,
    clamp_manual_scale,
)
from ..styles import ThemeManager
from ..utils.debounce import Debouncer
from ..utils.logger import logger
from ..utils.settings_store import DEFAULT_INSTRUCTION, SettingsStore

RESIZE_DEBOUNCE_MS = 300
SCROLL_DEBOUNCE_MS = 120
SEARCH_INPUT_DEBOUNCE_MS = 120
READING_PAGE_SAVE_DEBOUNCE_MS = 350
INSTRUCTION_SAVE_DEBOUNCE_MS = 250


@dataclass
class ReaderSession:
    """State tied to the open document; replaced wholesale on open and close."""

    doc_key: Optional[str] = None
    doc_path: Optional[str] = None
    doc_state: Dict[str, Any] = field(default_factory=dict)
    current_page: int = 1


class ReaderController(QObject):
    """
    Single owner of document, view settings, selection, search and the
    annotation pipeline.

    Widgets call the command methods and redraw from the signals; none of
    them hold document state of their own.
    """

    # Signals
    document_changed = pyqtSignal(bool)  # has document
    page_changed = pyqtSignal(int)
    overlays_changed = pyqtSignal()  # selection or search markers
    selection_preview_changed = pyqtSignal(int, str)  # count, text
    analyze_enabled_changed = pyqtSignal(bool)
    search_updated = pyqtSignal(int, int)  # active index, match count (-1: no search)
    scroll_to_page_requested = pyqtSignal(int)
    scroll_to_point_requested = pyqtSignal(int, int)
    settings_changed = pyqtSignal()
    theme_changed = pyqtSignal(str)
    ai_config_changed = pyqtSignal()
    error_occurred = pyqtSignal(str)

    def __init__(
        self,
        store: Optional[SettingsStore] = None,
        reader: Optional[PDFDocumentReader] = None,
        virtualizer: Optional[PageVirtualizer] = None,
        pipeline: Optional[AnnotationPipeline] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.store = store or SettingsStore()
        self.settings = self.store.load_settings()

        self.reader = reader or PDFDocumentReader()
        self.virtualizer = virtualizer or PageVirtualizer(self.reader, parent=self)
        self.selection = SelectionManager(self)
        self.search = GlyphSearchEngine(self.virtualizer)
        self.pipeline = pipeline or AnnotationPipeline(parent=self)
        self.pipeline.config = AiConfig.from_dict(self.store.load_ai_config())

        self.session = ReaderSession()
        self._apply_view_settings()

        self._resize_debouncer = Debouncer(self._on_resize_settled, RESIZE_DEBOUNCE_MS, self)
        self._scroll_debouncer = Debouncer(self._on_scroll_settled, SCROLL_DEBOUNCE_MS, self)
        self._search_input_debouncer = Debouncer(self.clear_search, SEARCH_INPUT_DEBOUNCE_MS, self)
        self._reading_page_debouncer = Debouncer(
            self._save_reading_page, READING_PAGE_SAVE_DEBOUNCE_MS, self
        )
        self._instruction_debouncer = Debouncer(
            self._save_settings, INSTRUCTION_SAVE_DEBOUNCE_MS, self
        )

        self.selection.selection_changed.connect(self._on_selection_changed)
        self.pipeline.busy_changed.connect(self._on_pipeline_busy_changed)

    # ===== Properties =====

    @property
    def has_document(self) -> bool:
        return self.reader.is_loaded()

    @property
    def current_page(self) -> int:
        return self.session.current_page

    @property
    def page_count(self) -> int:
        return self.reader.get_page_count()

    @property
    def mode(self) -> ViewMode:
        return ViewMode(self.settings.mode)

    @property
    def show_boxes(self) -> bool:
        return self.pipeline.config.show_boxes

    @property
    def ai_config(self) -> AiConfig:
        return self.pipeline.config

    def zoom_label(self) -> str:
        if not self.has_document:
            return "—"
        if self.settings.scale_mode == ScaleMode.FIT_WIDTH.value:
            return "Fit"
        return f"{round(clamp_manual_scale(self.settings.manual_scale) * 100)}%"

    # ===== Document lifecycle =====

    def open_path(self, path: str) -> bool:
        """
        Open a file, restoring its last-read page.

        The page stored for this path takes precedence over the per-document
        state. On success the path becomes the last opened file.
        """
        preferred_page = self.store.load_last_reading_page(path)
        ok, _ = self.reader.load_pdf(path)
        if not ok:
            self.error_occurred.emit(f"Could not open {path}")
            return False

        self._on_document_loaded(preferred_page, path)
        self.store.save_last_opened_path(path)
        return True

    def close_document(self):
        """Close the document and reset every component to its initial state."""
        self._reading_page_debouncer.flush()
        self._resize_debouncer.cancel()
        self._scroll_debouncer.cancel()
        self._search_input_debouncer.cancel()

        self.pipeline.reset()
        self.reader.close_document()
        self.virtualizer.rebuild(1)
        self.selection.clear()
        self.session = ReaderSession()
        self.clear_search()
        self._refresh_selection_preview()
        self.document_changed.emit(False)

    def last_opened_path(self) -> Optional[str]:
        """Stored last-opened path, if the file still exists."""
        path = self.store.load_last_opened_path()
        if path and os.path.exists(path):
            return path
        return None

    def _on_document_loaded(self, preferred_page: Optional[int], path: Optional[str]):
        self._reading_page_debouncer.cancel()
        self.selection.clear()
        self.search.clear_search()

        doc_key = self.reader.fingerprint
        doc_state = self.store.load_doc_state(doc_key) or {}
        page = preferred_page or doc_state.get("lastPage") or 1
        try:
            page = int(clamp(int(page), 1, max(1, self.page_count)))
        except (TypeError, ValueError):
            page = 1

        self.session = ReaderSession(
            doc_key=doc_key,
            doc_path=path,
            doc_state=dict(doc_state),
            current_page=page,
        )
        logger.info("Document ready: %s, %d pages, page %d", path or "<memory>", self.page_count, page)

        self.virtualizer.rebuild(page)
        self.document_changed.emit(True)
        self.page_changed.emit(page)
        self.search_updated.emit(-1, -1)
        if self.mode is ViewMode.SCROLL:
            self.scroll_to_page_requested.emit(page)

    # ===== Navigation =====

    def set_current_page(self, page: int, render: bool = True):
        """
        Make ``page`` current (clamped to the document).

        Single-page mode re-materializes the page and, if the page changed,
        drops selection and search markers. Scroll mode only scrolls.
        """
        if not self.has_document:
            return

        next_page = int(clamp(page, 1, self.page_count))
        page_changed = next_page != self.session.current_page
        self._set_page(next_page)

        if not render:
            return

        if self.mode is ViewMode.SCROLL:
            self.scroll_to_page_requested.emit(next_page)
        else:
            if page_changed:
                self.selection.clear()
                self.clear_search()
            self.virtualizer.rebuild(next_page)

    def next_page(self):
        self.set_current_page(self.session.current_page + 1)

    def previous_page(self):
        self.set_current_page(self.session.current_page - 1)

    def _set_page(self, page: int):
        self.session.current_page = page
        self._update_doc_state(lastPage=page)
        self._reading_page_debouncer.trigger()
        self.page_changed.emit(page)

    # ===== View settings =====

    def zoom_in(self):
        self._set_manual_scale(self.settings.manual_scale + ZOOM_STEP)

    def zoom_out(self):
        self._set_manual_scale(self.settings.manual_scale - ZOOM_STEP)

    def _set_manual_scale(self, scale: float):
        self.settings.scale_mode = ScaleMode.MANUAL.value
        self.settings.manual_scale = round(clamp_manual_scale(scale), 2)
        self._save_settings()
        self._apply_view_settings()
        self._rerender()

    def fit_width(self):
        self.settings.scale_mode = ScaleMode.FIT_WIDTH.value
        self._save_settings()
        self._apply_view_settings()
        self._rerender()

    def toggle_mode(self):
        self.settings.mode = "single" if self.mode is ViewMode.SCROLL else "scroll"
        self._save_settings()
        self._apply_view_settings()
        self._rerender()

    def cycle_theme(self):
        self.settings.theme = ThemeManager.next_theme(self.settings.theme)
        self._save_settings()
        invert_before = self.virtualizer.invert
        self._apply_view_settings()
        self.theme_changed.emit(self.settings.theme)
        if self.virtualizer.invert != invert_before:
            self._rerender()

    def viewport_resized(self, width: int):
        """Record the viewer width; the rebuild runs once resizing settles."""
        if width == self.virtualizer.viewer_width:
            return
        self.virtualizer.viewer_width = width
        if self.has_document:
            self._resize_debouncer.trigger()

    def _on_resize_settled(self):
        self._rerender()

    def _apply_view_settings(self):
        self.virtualizer.mode = self.mode
        self.virtualizer.scale_mode = ScaleMode(self.settings.scale_mode)
        self.virtualizer.manual_scale = self.settings.manual_scale
        self.virtualizer.invert = ThemeManager.get_theme_colors(self.settings.theme).invert_pages
        self.settings_changed.emit()

    def _rerender(self):
        """Full rebuild of page state for the current mode and scale."""
        if not self.has_document:
            return
        self.virtualizer.rebuild(self.session.current_page)
        if self.mode is ViewMode.SCROLL:
            self.scroll_to_page_requested.emit(self.session.current_page)
        self.clear_search()

    # ===== Scrolling =====

    def scrolled(self, scroll_top: float, viewport_height: float):
        """Materialize pages near the viewport and track the current page."""
        if not self.has_document or self.mode is not ViewMode.SCROLL:
            return
        self.virtualizer.update_visibility(scroll_top, viewport_height)
        self._scroll_debouncer.trigger(scroll_top)

    def _on_scroll_settled(self, scroll_top: float):
        if not self.has_document or self.mode is not ViewMode.SCROLL:
            return
        best = self.virtualizer.page_at_scroll(scroll_top)
        if best != self.session.current_page:
            self._set_page(best)

    # ===== Selection =====

    def click_at(self, x: float, y: float) -> Optional[Glyph]:
        """Toggle the glyph under a content-space point."""
        glyph = self.virtualizer.glyph_at(x, y)
        if glyph is not None:
            self.selection.toggle(glyph)
        return glyph

    def select_rect(self, rect: Rect) -> int:
        return self.selection.select_in_rect(rect, self.virtualizer.glyphs_in_rect(rect))

    def clear_selection(self):
        self.selection.clear()

    def selected_text(self) -> str:
        return build_selected_text(self.selection.sorted_entries())

    def copy_selection(self) -> bool:
        """Copy the reconstructed selection text to the clipboard."""
        text = self.selected_text()
        if not text:
            return False
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            logger.warning("Clipboard unavailable: %s", e)
            self.error_occurred.emit("Clipboard is not available")
            return False
        return True

    def _on_selection_changed(self):
        self.overlays_changed.emit()
        self._refresh_selection_preview()

    def _on_pipeline_busy_changed(self, _busy: bool):
        self._refresh_selection_preview()

    def _refresh_selection_preview(self):
        count = self.selection.count
        self.selection_preview_changed.emit(count, self.selected_text() or "—")
        self.analyze_enabled_changed.emit(count > 0 and not self.pipeline.in_progress)

        signature = self.selection.signature()
        if count > 0 and self.pipeline.is_stale(signature) and not self.pipeline.in_progress:
            self.pipeline.set_status(STATUS_SELECTION_CHANGED)

    # ===== Search =====

    def search_highlight(self, page: int) -> SearchHighlight:
        model = self.virtualizer.page_model(page)
        if model is None:
            return SearchHighlight()
        return SearchHighlight.for_page(self.search.session, model.text_layer)

    def run_search(self, query: str, direction: int = 1, reset: bool = False):
        """Search the current page and bring the active match into view."""
        if not self.has_document:
            return
        self._search_input_debouncer.cancel()
        page = self.session.current_page
        session = self.search.run(query, page, direction, reset)
        self.overlays_changed.emit()
        if session.is_active:
            self.search_updated.emit(session.index, len(session.matches))
        else:
            self.search_updated.emit(-1, -1)

        anchor = self.search_highlight(page).anchor
        if anchor is not None:
            dx, dy = self.virtualizer.page_offset(page)
            rect = anchor.bbox.rect.translated(dx, dy)
            self.scroll_to_point_requested.emit(
                int((rect.left + rect.right) / 2), int((rect.top + rect.bottom) / 2)
            )

    def search_text_edited(self):
        """Typing in the search box drops stale markers once input pauses."""
        self._search_input_debouncer.trigger()

    def clear_search(self):
        self.search.clear_search()
        self.overlays_changed.emit()
        self.search_updated.emit(-1, -1)

    # ===== Annotation =====

    def analyze(self, instruction: str) -> bool:
        return self.pipeline.start(
            instruction,
            self.selection.sorted_entries(),
            self.selection.signature(),
            self.settings.ai_instruction or DEFAULT_INSTRUCTION,
        )

    def set_instruction(self, text: str):
        self.settings.ai_instruction = text
        self._instruction_debouncer.trigger()

    def update_ai_config(self, config: AiConfig) -> bool:
        """Apply and persist new service settings; returns False if saving failed."""
        self.pipeline.config = config
        saved = self.store.save_ai_config(config.to_dict())
        self.ai_config_changed.emit()
        return saved

    # ===== Persistence =====

    def _update_doc_state(self, **values):
        if not self.session.doc_key:
            return
        self.session.doc_state.update(values)
        self.store.save_doc_state(self.session.doc_key, self.session.doc_state)

    def _save_reading_page(self):
        if self.session.doc_path:
            self.store.save_last_reading_page(self.session.doc_path, self.session.current_page)

    def _save_settings(self):
        self.store.save_settings(self.settings)

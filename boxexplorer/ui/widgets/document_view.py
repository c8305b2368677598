"""
Scrollable document canvas hosting page widgets.
"""

from typing import Dict, Optional

from PyQt5.QtCore import QRect, Qt
from PyQt5.QtWidgets import QRubberBand, QScrollArea, QWidget

from ...core.page import Rect
from ...core.virtualization import ViewMode
from ...styles import ThemeManager
from .page_widget import PageWidget


class DocumentCanvas(QWidget):
    """
    Content widget of the scroll area.

    Its coordinate system is the content space used by the virtualizer,
    so mouse positions are passed on unchanged.
    """

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("DocumentCanvas")
        self.setMouseTracking(False)
        self.input_handler = None
        self._rubber_band = QRubberBand(QRubberBand.Rectangle, self)

    def set_rubber_band(self, rect: Optional[Rect]):
        if rect is None:
            self._rubber_band.hide()
            return
        self._rubber_band.setGeometry(
            QRect(int(rect.left), int(rect.top), int(rect.width), int(rect.height))
        )
        self._rubber_band.show()
        self._rubber_band.raise_()

    def mousePressEvent(self, event):
        if self.input_handler:
            self.input_handler.handle_mouse_press(self, event.x(), event.y(), event.button())
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self.input_handler:
            self.input_handler.handle_mouse_move(self, event.x(), event.y())
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self.input_handler:
            self.input_handler.handle_mouse_release(self, event.x(), event.y(), event.button())
        super().mouseReleaseEvent(event)


class DocumentView(QScrollArea):
    """
    Shows the virtualizer's page slots and feeds scroll and resize events
    back to the controller.
    """

    def __init__(self, controller, parent=None):
        super().__init__(parent)
        self.controller = controller
        self.virtualizer = controller.virtualizer
        self.page_widgets: Dict[int, PageWidget] = {}

        self.canvas = DocumentCanvas()
        self.setWidget(self.canvas)
        self.setWidgetResizable(False)
        self.setAlignment(Qt.AlignHCenter | Qt.AlignTop)

        self.verticalScrollBar().valueChanged.connect(self._on_scroll)

        self.virtualizer.layout_changed.connect(self.rebuild_pages)
        self.virtualizer.page_materialized.connect(self._on_page_materialized)
        controller.overlays_changed.connect(self.refresh_overlays)
        controller.ai_config_changed.connect(self.refresh_overlays)
        controller.theme_changed.connect(lambda _name: self.refresh_overlays())
        controller.scroll_to_page_requested.connect(self.scroll_to_page)
        controller.scroll_to_point_requested.connect(self.scroll_to_point)

    def set_input_handler(self, handler):
        self.canvas.input_handler = handler

    # ===== Page widgets =====

    def rebuild_pages(self):
        """Recreate one widget per slot after a full reset."""
        for widget in self.page_widgets.values():
            widget.hide()
            widget.setParent(None)
            widget.deleteLater()
        self.page_widgets.clear()

        for slot in self.virtualizer.slots():
            widget = PageWidget(slot.page, self.canvas)
            widget.set_model(slot.model)
            widget.show()
            self.page_widgets[slot.page] = widget

        self._sync_geometry()
        self.refresh_overlays()

        if self.virtualizer.mode is ViewMode.SINGLE:
            self.verticalScrollBar().setValue(0)
        self._materialize_visible()

    def _on_page_materialized(self, page: int):
        widget = self.page_widgets.get(page)
        if widget is not None:
            widget.set_model(self.virtualizer.page_model(page))
        self._sync_geometry()
        self.refresh_overlays()

    def _sync_geometry(self):
        self.canvas.resize(
            max(self.virtualizer.content_width, self.viewport().width()),
            max(self.virtualizer.content_height, 1),
        )
        for page, widget in self.page_widgets.items():
            slot = self.virtualizer.slot(page)
            if slot is None:
                continue
            x, y = self.virtualizer.page_offset(page)
            widget.setGeometry(x, y, slot.width, slot.height)

    def refresh_overlays(self):
        colors = ThemeManager.get_theme_colors(self.controller.settings.theme)
        show_boxes = self.controller.show_boxes
        for page, widget in self.page_widgets.items():
            widget.set_overlays(
                self.controller.selection.selected_ids(page),
                self.controller.search_highlight(page),
                show_boxes,
                colors,
            )

    # ===== Scrolling =====

    def _on_scroll(self, value: int):
        self.controller.scrolled(value, self.viewport().height())

    def _materialize_visible(self):
        self.controller.scrolled(self.verticalScrollBar().value(), self.viewport().height())

    def scroll_to_page(self, page: int):
        slot = self.virtualizer.slot(page)
        if slot is None:
            return
        self.verticalScrollBar().setValue(slot.top)
        self._materialize_visible()

    def scroll_to_point(self, x: int, y: int):
        """Center a content-space point in the viewport."""
        self.ensureVisible(x, y, self.viewport().width() // 2, self.viewport().height() // 2)

    def keyPressEvent(self, event):
        # Page keys would otherwise scroll the area instead of paging.
        handler = self.canvas.input_handler
        if handler is not None and handler.handle_key_press(event):
            event.accept()
            return
        super().keyPressEvent(event)

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.controller.viewport_resized(self.viewport().width())
        self._sync_geometry()

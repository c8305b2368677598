"""
Paints one page slot: the raster image and its glyph overlays.
"""

from typing import Optional

from PyQt5.QtCore import QRectF, Qt
from PyQt5.QtGui import QBrush, QColor, QPainter, QPen, QPixmap
from PyQt5.QtWidgets import QWidget

from ...core.search import SearchHighlight
from ...styles import ThemeColors


class PageWidget(QWidget):
    """
    Page display inside the document canvas.

    Shows a placeholder until the page is materialized. Overlay layers, in
    paint order: glyph outlines (optional), search matches, the active match
    and selected glyphs. Mouse input goes to the canvas underneath.
    """

    def __init__(self, page: int, parent=None):
        super().__init__(parent)
        self.page = page
        self._pixmap: Optional[QPixmap] = None
        self._model = None

        self.selected_ids = set()
        self.highlight = SearchHighlight()
        self.show_boxes = True
        self.colors: Optional[ThemeColors] = None

        self.setAttribute(Qt.WA_TransparentForMouseEvents)

    def set_model(self, model):
        """Attach a materialized page model (None for a placeholder)."""
        self._model = model
        self._pixmap = None
        if model is not None and model.image is not None:
            self._pixmap = QPixmap.fromImage(model.image)
        self.update()

    def set_overlays(self, selected_ids, highlight: SearchHighlight, show_boxes: bool, colors: ThemeColors):
        self.selected_ids = set(selected_ids)
        self.highlight = highlight
        self.show_boxes = show_boxes
        self.colors = colors
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            if self._model is None:
                self._paint_placeholder(painter)
                return

            if self._pixmap is not None:
                painter.drawPixmap(0, 0, self._pixmap)
            else:
                painter.fillRect(self.rect(), QColor("white"))

            if self.colors is not None:
                self._paint_glyph_overlays(painter)
        finally:
            painter.end()

    def _paint_placeholder(self, painter: QPainter):
        painter.fillRect(self.rect(), QColor(0, 0, 0, 20))
        painter.setPen(QColor(120, 120, 120))
        painter.drawText(self.rect(), Qt.AlignCenter, f"Loading page {self.page}…")

    def _paint_glyph_overlays(self, painter: QPainter):
        colors = self.colors
        outline_pen = QPen(QColor(*colors.box_outline))
        outline_pen.setWidthF(1.0)

        for glyph in self._model.text_layer:
            bbox = glyph.bbox
            rect = QRectF(bbox.x, bbox.y, bbox.width, bbox.height)

            fill = None
            if glyph.id in self.selected_ids:
                fill = colors.box_selected
            elif glyph.id in self.highlight.active:
                fill = colors.box_search_active
            elif glyph.id in self.highlight.matched:
                fill = colors.box_search

            if fill is not None:
                painter.fillRect(rect, QBrush(QColor(*fill)))
            if self.show_boxes:
                painter.setPen(outline_pen)
                painter.setBrush(Qt.NoBrush)
                painter.drawRect(rect)

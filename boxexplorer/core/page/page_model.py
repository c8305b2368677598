"""
Materialized page: raster image plus glyph text layer.
"""

from typing import Optional

from PyQt5.QtGui import QImage

from ...utils.logger import logger
from .text_layer import PageTextLayer


class PageModel:
    """
    One page rendered at a fixed scale.

    A page model is built once per materialization and never rescaled. A new
    scale means a new model with new glyph ids.
    """

    def __init__(self, page: int, scale: float, image: Optional[QImage], text_layer: PageTextLayer):
        self.page = page
        self.scale = scale
        self.image = image
        self.text_layer = text_layer

    @classmethod
    def render(cls, reader, page: int, scale: float, invert: bool = False) -> "PageModel":
        """
        Rasterize ``page`` and build its text layer.

        Failures are logged and yield a blank image or an empty text layer so
        the page can still be marked rendered.
        """
        image: Optional[QImage] = None
        try:
            image = reader.render_image(page, scale, invert)
        except Exception as e:
            logger.warning("Rendering page %d failed: %s", page, e)

        try:
            runs = reader.get_text_runs(page)
            text_layer = PageTextLayer.from_runs(page, runs, reader.viewport_transform(scale), scale)
        except Exception as e:
            logger.warning("Text extraction on page %d failed: %s", page, e)
            text_layer = PageTextLayer.empty(page)

        return cls(page, scale, image, text_layer)

    @property
    def width(self) -> int:
        return self.image.width() if self.image is not None else 0

    @property
    def height(self) -> int:
        return self.image.height() if self.image is not None else 0

    def __repr__(self) -> str:
        return f"PageModel(page={self.page}, scale={self.scale:.2f}, glyphs={len(self.text_layer)})"

"""
PDF document loading, rasterization and text layout extraction.
"""

from typing import List, Optional, Tuple

import fitz  # PyMuPDF
from PyQt5.QtGui import QImage

from ...utils.logger import logger
from ...utils.settings_store import document_fingerprint
from ..page.models import TextRun, Transform


class PDFDocumentReader:
    """Handles PDF document loading, rendering, and basic operations."""

    def __init__(self):
        self.doc: Optional[fitz.Document] = None
        self.total_pages: int = 0
        self.fingerprint: Optional[str] = None

    def load_pdf(self, file_path: str) -> Tuple[bool, int]:
        """
        Load a PDF document from disk.

        Args:
            file_path: Path to the PDF file

        Returns:
            Tuple of (success flag, number of pages)
        """
        try:
            with open(file_path, "rb") as fh:
                data = fh.read()
        except OSError as e:
            logger.error("Cannot read %s: %s", file_path, e)
            return False, 0

        return self.load_bytes(data)

    def load_bytes(self, data: bytes) -> Tuple[bool, int]:
        """
        Load a PDF document from an in-memory buffer.

        The current document stays open if the new one cannot be parsed.
        """
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except Exception as e:
            logger.error("Error loading PDF: %s", e)
            return False, 0

        if self.doc:
            self.close_document()
        self.doc = doc
        self.total_pages = self.doc.page_count
        self.fingerprint = document_fingerprint(data)
        logger.info("Opened document %s (%d pages)", self.fingerprint[:12], self.total_pages)
        return True, self.total_pages

    def close_document(self) -> None:
        """Close the current PDF document and clear all state."""
        if self.doc:
            self.doc.close()
            self.doc = None
            logger.info("Closed document")

        self.total_pages = 0
        self.fingerprint = None

    def get_page(self, page_number: int) -> Optional[fitz.Page]:
        """PyMuPDF page for a 1-based page number, or None if out of range."""
        if not self.doc or not 1 <= page_number <= self.total_pages:
            return None
        return self.doc.load_page(page_number - 1)

    def get_page_size(self, page_number: int) -> Tuple[float, float]:
        """
        Get the unscaled size of a page in points.

        Returns:
            Tuple of (width, height); zeros for an invalid page
        """
        page = self.get_page(page_number)
        if page:
            rect = page.rect
            return rect.width, rect.height
        return 0.0, 0.0

    def render_image(self, page_number: int, scale: float, invert: bool = False) -> QImage:
        """
        Rasterize a page at the given scale.

        The returned image owns its pixel buffer, so it stays valid after the
        PyMuPDF pixmap is released.
        """
        page = self.get_page(page_number)
        if page is None:
            raise ValueError(f"No page {page_number}")

        pix = page.get_pixmap(matrix=fitz.Matrix(scale, scale), alpha=False)
        img = QImage(pix.samples, pix.width, pix.height, pix.stride, QImage.Format_RGB888).copy()

        if invert:
            img.invertPixels()

        return img

    def get_text_runs(self, page_number: int) -> List[TextRun]:
        """
        Text layout of a page as runs in reading order.

        One run per span of ``get_text("dict")``. The run transform places its
        origin at the span's bottom-left corner in top-left page space, which
        is what the glyph indexer expects.
        """
        page = self.get_page(page_number)
        if page is None:
            return []

        runs: List[TextRun] = []
        text_data = page.get_text("dict", sort=True)
        for block in text_data.get("blocks", []):
            if block.get("type") != 0:  # Skip image blocks
                continue
            for line in block.get("lines", []):
                for span in line.get("spans", []):
                    text = span.get("text", "")
                    x0, y0, x1, y1 = span["bbox"]
                    runs.append(
                        TextRun(
                            text=text,
                            transform=(1.0, 0.0, 0.0, 1.0, x0, y1),
                            width=x1 - x0,
                            height=y1 - y0,
                        )
                    )
        return runs

    @staticmethod
    def viewport_transform(scale: float) -> Transform:
        """Viewport transform for a page rendered at ``scale``."""
        return (scale, 0.0, 0.0, scale, 0.0, 0.0)

    def is_loaded(self) -> bool:
        """Check if a document is currently loaded."""
        return self.doc is not None

    def get_page_count(self) -> int:
        """Get the total number of pages."""
        return self.total_pages

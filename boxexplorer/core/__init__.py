"""
Core logic for BoxExplorer: documents, glyph layers, virtualization,
selection, search and AI annotation.
"""

from .annotation import AiConfig, AnnotationPipeline, AnnotationState
from .document import PDFDocumentReader
from .page import Glyph, PageModel, PageTextLayer, Rect
from .search import GlyphSearchEngine, SearchHighlight
from .selection import SelectionManager, build_selected_text
from .virtualization import PageVirtualizer, ScaleMode, ViewMode

__all__ = [
    "AiConfig",
    "AnnotationPipeline",
    "AnnotationState",
    "Glyph",
    "GlyphSearchEngine",
    "PDFDocumentReader",
    "PageModel",
    "PageTextLayer",
    "PageVirtualizer",
    "Rect",
    "ScaleMode",
    "SearchHighlight",
    "SelectionManager",
    "ViewMode",
    "build_selected_text",
]

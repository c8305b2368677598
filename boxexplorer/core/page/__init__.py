"""
Page-level models: glyph geometry, text layers and materialized pages.
"""

from .models import (
    IDENTITY,
    BBox,
    Glyph,
    PageRenderState,
    Rect,
    TextRun,
    Transform,
    compose_transform,
    round_half_up,
)
from .page_model import PageModel
from .text_layer import PageTextLayer, extract_glyphs

__all__ = [
    "IDENTITY",
    "BBox",
    "Glyph",
    "PageModel",
    "PageRenderState",
    "PageTextLayer",
    "Rect",
    "TextRun",
    "Transform",
    "compose_transform",
    "extract_glyphs",
    "round_half_up",
]

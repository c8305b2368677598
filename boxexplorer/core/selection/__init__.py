"""
Glyph selection: the selection set, drag gestures and text reconstruction.
"""

from .models import DRAG_THRESHOLD, DragGesture, SelectionEntry, selection_key
from .selection_manager import SelectionManager
from .text_reconstructor import build_selected_text

__all__ = [
    "DRAG_THRESHOLD",
    "DragGesture",
    "SelectionEntry",
    "SelectionManager",
    "build_selected_text",
    "selection_key",
]

"""Page virtualization: which pages are materialized, at what scale."""

from .page_virtualizer import (
    MAX_SCALE,
    MIN_SCALE,
    ZOOM_STEP,
    PageSlot,
    PageVirtualizer,
    ScaleMode,
    ViewMode,
    clamp,
    clamp_manual_scale,
    compute_fit_width_scale,
)

__all__ = [
    "MAX_SCALE",
    "MIN_SCALE",
    "ZOOM_STEP",
    "PageSlot",
    "PageVirtualizer",
    "ScaleMode",
    "ViewMode",
    "clamp",
    "clamp_manual_scale",
    "compute_fit_width_scale",
]

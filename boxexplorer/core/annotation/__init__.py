"""
AI annotation of the selected text: request building, streaming, pacing and
markdown rendering.
"""

from .completion_worker import CompletionResult, CompletionWorker, fetch_completion
from .config import AiConfig
from .errors import AnnotationConfigError, AnnotationError, AnnotationHttpError
from .markdown_render import PLACEHOLDER, RenderScheduler, render_markdown
from .payload import build_request
from .pipeline import STATUS_SELECTION_CHANGED, AnnotationPipeline, AnnotationState
from .response_parser import SseEventParser, parse_response_text, split_sse_events
from .stream_display import StreamPacer

__all__ = [
    "AiConfig",
    "AnnotationConfigError",
    "AnnotationError",
    "AnnotationHttpError",
    "AnnotationPipeline",
    "AnnotationState",
    "CompletionResult",
    "CompletionWorker",
    "PLACEHOLDER",
    "RenderScheduler",
    "STATUS_SELECTION_CHANGED",
    "SseEventParser",
    "StreamPacer",
    "build_request",
    "fetch_completion",
    "parse_response_text",
    "render_markdown",
    "split_sse_events",
]

"""
Streaming annotation pipeline: request, paced reveal and rendering.
"""

from enum import Enum
from typing import Callable, Optional, Sequence

from PyQt5.QtCore import QObject, QThread, pyqtSignal

from ...utils.debounce import Debouncer
from ...utils.logger import logger
from ...utils.settings_store import DEFAULT_INSTRUCTION
from ..selection.models import SelectionEntry
from .completion_worker import CompletionWorker
from .config import AiConfig
from .errors import AnnotationConfigError
from .markdown_render import PLACEHOLDER, RenderScheduler
from .payload import build_request
from .stream_display import StreamPacer

STATUS_HINT = "Fill in the service details in AI settings."
STATUS_RUNNING = "Analysing..."
STATUS_DONE = "Analysis complete."
STATUS_NETWORK_ERROR = "Request failed, check network or configuration."
STATUS_SELECTION_CHANGED = "Selection changed, run the analysis again."

NON_STREAM_RENDER_DELAY_MS = 120


class AnnotationState(Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    FAILED = "failed"


class AnnotationPipeline(QObject):
    """
    Sends the reconstructed selection to the completion service and shows
    the answer as it arrives.

    Text flows through three stages:
    - ``accumulated``: everything received so far
    - the pacer's displayed buffer, revealed one character per tick
    - the render scheduler, which formats snapshots of the displayed text

    Only one run may be active. The selection signature taken at the start
    of a run lets callers tell whether the result still matches the
    selection; runs are never cancelled.
    """

    # Signals
    status_changed = pyqtSignal(str, bool)  # message, is_error
    output_rendered = pyqtSignal(str, bool)  # content, is_html
    state_changed = pyqtSignal(object)
    busy_changed = pyqtSignal(bool)

    def __init__(
        self,
        worker_factory: Optional[Callable[..., QObject]] = None,
        scheduler: Optional[RenderScheduler] = None,
        pacer: Optional[StreamPacer] = None,
        parent=None,
    ):
        super().__init__(parent)
        self.config = AiConfig()
        self._worker_factory = worker_factory or CompletionWorker
        self._worker = None

        self.scheduler = scheduler or RenderScheduler(parent=self)
        self.scheduler.rendered.connect(self.output_rendered)

        self.pacer = pacer or StreamPacer(parent=self)
        self.pacer.revealed.connect(self._on_revealed)

        self._render_debouncer = Debouncer(self._render_accumulated, NON_STREAM_RENDER_DELAY_MS, self)

        self.state = AnnotationState.IDLE
        self.in_progress = False
        self.accumulated = ""
        self.request_signature = ""
        self.status = STATUS_HINT
        self.status_is_error = False

    # ===== Public API =====

    def start(
        self,
        instruction: str,
        entries: Sequence[SelectionEntry],
        signature: str,
        default_instruction: str = DEFAULT_INSTRUCTION,
    ) -> bool:
        """
        Start a run for the given selection.

        Rejected runs only update the status: one already active, an empty
        selection, missing service settings or blank reconstructed text.

        Returns:
            True if a request was sent
        """
        if self.in_progress:
            return False

        try:
            url, headers, body = build_request(self.config, instruction, entries, default_instruction)
        except AnnotationConfigError as e:
            self.set_status(str(e), True)
            return False

        self.in_progress = True
        self.request_signature = signature
        self.accumulated = ""
        self._render_debouncer.cancel()
        self.scheduler.reset()
        self.output_rendered.emit(PLACEHOLDER, False)
        self._set_state(AnnotationState.REQUESTING)
        self.set_status(STATUS_RUNNING)
        self.busy_changed.emit(True)
        self.pacer.start()

        logger.info("Annotation request: %d glyphs, model %s", len(entries), self.config.model)

        worker = self._worker_factory(url, headers, body, parent=self)
        worker.stream_started.connect(self.on_stream_started)
        worker.delta.connect(self.on_delta)
        worker.completed.connect(self.on_completed)
        worker.http_error.connect(self.on_http_error)
        worker.failed.connect(self.on_failed)
        worker.done.connect(self.on_done)
        if isinstance(worker, QThread):
            worker.finished.connect(worker.deleteLater)
        self._worker = worker
        worker.start()
        return True

    def is_stale(self, signature: str) -> bool:
        """
        True if ``signature`` differs from the selection of the last run.

        Before the first run (or after a reset) the stored signature is
        empty, so every non-empty selection is stale.
        """
        return signature != self.request_signature

    def set_output(self, text: str):
        """Replace the output with a finished text, rendered after a short delay."""
        self.accumulated = text or ""
        if not self.accumulated.strip():
            self._render_debouncer.cancel()
            self.scheduler.reset()
            self.output_rendered.emit(PLACEHOLDER, False)
            return
        self.pacer.stop()
        self._render_debouncer.trigger()

    def reset(self):
        """Back to the initial state; an active worker keeps running but its output is ignored."""
        self.pacer.stop()
        self._render_debouncer.cancel()
        self.scheduler.reset()
        self._detach_worker()
        self.in_progress = False
        self.accumulated = ""
        self.request_signature = ""
        self._set_state(AnnotationState.IDLE)
        self.set_status(STATUS_HINT)
        self.output_rendered.emit(PLACEHOLDER, False)
        self.busy_changed.emit(False)

    # ===== Worker callbacks =====

    def on_stream_started(self):
        self.accumulated = ""
        self._set_state(AnnotationState.STREAMING)

    def on_delta(self, text: str):
        if not text:
            return
        self.accumulated += text
        if self.pacer.active:
            self.pacer.enqueue(text)
        else:
            self._render_debouncer.trigger()

    def on_completed(self, text: str, streamed: bool):
        self.pacer.stop()
        if streamed:
            self.scheduler.request(self.accumulated)
        else:
            self.set_output(text or PLACEHOLDER)
        self.set_status(STATUS_DONE)

    def on_http_error(self, status_code: int, body: str):
        self.pacer.stop()
        self._set_state(AnnotationState.FAILED)
        self.set_status(f"Request failed: {status_code}", True)
        self.set_output(body or PLACEHOLDER)

    def on_failed(self, message: str):
        self.pacer.stop()
        self._set_state(AnnotationState.FAILED)
        self.set_status(STATUS_NETWORK_ERROR, True)

    def on_done(self):
        """Terminal step of every run: final unpaced render and back to idle."""
        self.pacer.stop()
        self._render_debouncer.cancel()
        self.scheduler.request(self.accumulated)
        self._detach_worker()
        self.in_progress = False
        self._set_state(AnnotationState.IDLE)
        self.busy_changed.emit(False)

    # ===== Internals =====

    def _on_revealed(self, displayed: str):
        self.scheduler.request(displayed)

    def _render_accumulated(self):
        self.scheduler.request(self.accumulated)

    def _detach_worker(self):
        worker, self._worker = self._worker, None
        if worker is None:
            return
        for signal in (
            worker.stream_started,
            worker.delta,
            worker.completed,
            worker.http_error,
            worker.failed,
            worker.done,
        ):
            try:
                signal.disconnect()
            except (TypeError, RuntimeError):
                pass

    def _set_state(self, state: AnnotationState):
        if state is not self.state:
            self.state = state
            self.state_changed.emit(state)

    def set_status(self, message: str, is_error: bool = False):
        self.status = message
        self.status_is_error = is_error
        self.status_changed.emit(message, is_error)

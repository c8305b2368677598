from PyQt5.QtCore import QObject, pyqtSignal

from boxexplorer.core.annotation import (
    AiConfig,
    AnnotationPipeline,
    AnnotationState,
    PLACEHOLDER,
    RenderScheduler,
)
from boxexplorer.core.annotation import pipeline as pipeline_module
from boxexplorer.core.annotation.payload import EMPTY_TEXT, MISSING_CONFIG, MISSING_SELECTION

from conftest import make_entry


class FakeWorker(QObject):
    stream_started = pyqtSignal()
    delta = pyqtSignal(str)
    completed = pyqtSignal(str, bool)
    http_error = pyqtSignal(int, str)
    failed = pyqtSignal(str)
    done = pyqtSignal()

    def __init__(self, url, headers, body, parent=None):
        super().__init__(parent)
        self.url = url
        self.headers = headers
        self.body = body
        self.started = False

    def start(self):
        self.started = True


class Harness:
    def __init__(self):
        self.workers = []
        self.statuses = []
        self.outputs = []
        self.busy = []
        scheduler = RenderScheduler(formatter=lambda text: f"<p>{text}</p>", dispatch=lambda fn: fn())
        self.pipeline = AnnotationPipeline(worker_factory=self._make_worker, scheduler=scheduler)
        self.pipeline.config = AiConfig(api_key="secret")
        self.pipeline.status_changed.connect(lambda msg, err: self.statuses.append((msg, err)))
        self.pipeline.output_rendered.connect(lambda content, is_html: self.outputs.append((content, is_html)))
        self.pipeline.busy_changed.connect(self.busy.append)

    def _make_worker(self, url, headers, body, parent=None):
        worker = FakeWorker(url, headers, body, parent)
        self.workers.append(worker)
        return worker

    @property
    def worker(self):
        return self.workers[-1]


def _entries():
    return [make_entry(1, 0, "H", x=0), make_entry(1, 1, "i", x=10)]


def test_rejects_empty_selection(qapp):
    h = Harness()

    assert h.pipeline.start("", [], "") is False
    assert h.statuses[-1] == (MISSING_SELECTION, True)
    assert h.workers == []


def test_rejects_incomplete_config(qapp):
    h = Harness()
    h.pipeline.config = AiConfig(api_key="")

    assert h.pipeline.start("", _entries(), "1-0|1-1") is False
    assert h.statuses[-1] == (MISSING_CONFIG, True)


def test_rejects_blank_text(qapp):
    h = Harness()

    assert h.pipeline.start("", [make_entry(1, 0, " ")], "1-0") is False
    assert h.statuses[-1] == (EMPTY_TEXT, True)


def test_request_body(qapp):
    h = Harness()
    h.pipeline.config = AiConfig(api_key="secret", base_url="http://svc/v1/", temperature=None)

    assert h.pipeline.start("  ", _entries(), "1-0|1-1", default_instruction="Explain.") is True

    worker = h.worker
    assert worker.started
    assert worker.url == "http://svc/v1/chat/completions"
    assert worker.headers["Authorization"] == "Bearer secret"
    assert worker.body["stream"] is True
    assert worker.body["max_tokens"] == 1024
    assert "temperature" not in worker.body
    system, user = worker.body["messages"]
    assert system == {"role": "system", "content": "Explain."}
    assert user["content"] == '【Selected content】\nHi\n\n【Meta】\n{"pages":[1],"count":2}'


def test_streamed_run(qapp):
    h = Harness()
    assert h.pipeline.start("Explain", _entries(), "1-0|1-1") is True
    assert h.pipeline.start("Explain", _entries(), "1-0|1-1") is False
    assert len(h.workers) == 1
    assert h.outputs[-1] == (PLACEHOLDER, False)
    assert h.statuses[-1] == (pipeline_module.STATUS_RUNNING, False)

    h.worker.stream_started.emit()
    assert h.pipeline.state is AnnotationState.STREAMING
    h.worker.delta.emit("Hel")
    h.worker.delta.emit("lo")
    assert h.pipeline.pacer.queued == "Hello"

    h.pipeline.pacer.tick()
    assert h.outputs[-1] == ("<p>H</p>", True)

    h.worker.completed.emit("Hello", True)
    h.worker.done.emit()

    assert h.outputs[-1] == ("<p>Hello</p>", True)
    assert h.statuses[-1] == (pipeline_module.STATUS_DONE, False)
    assert h.pipeline.state is AnnotationState.IDLE
    assert not h.pipeline.in_progress
    assert h.busy == [True, False]


def test_non_streamed_run(qapp):
    h = Harness()
    h.pipeline.start("", _entries(), "1-0|1-1")

    h.worker.completed.emit("answer", False)
    assert h.statuses[-1] == (pipeline_module.STATUS_DONE, False)
    assert h.pipeline.in_progress

    h.worker.done.emit()

    assert h.outputs[-1] == ("<p>answer</p>", True)
    assert h.pipeline.state is AnnotationState.IDLE
    assert not h.pipeline.in_progress
    assert h.busy == [True, False]


def test_http_error_shows_status_and_body(qapp):
    h = Harness()
    h.pipeline.start("", _entries(), "1-0|1-1")

    h.worker.http_error.emit(401, "invalid key")
    h.worker.done.emit()

    assert ("Request failed: 401", True) in h.statuses
    assert h.outputs[-1] == ("<p>invalid key</p>", True)
    assert not h.pipeline.in_progress


def test_transport_failure(qapp):
    h = Harness()
    h.pipeline.start("", _entries(), "1-0|1-1")

    h.worker.failed.emit("connection refused")
    h.worker.done.emit()

    assert h.statuses[-1] == (pipeline_module.STATUS_NETWORK_ERROR, True)
    assert h.pipeline.start("", _entries(), "1-0|1-1") is True


def test_staleness_follows_signature(qapp):
    h = Harness()
    assert h.pipeline.is_stale("1-0")
    assert not h.pipeline.is_stale("")

    h.pipeline.start("", _entries(), "1-0|1-1")
    assert not h.pipeline.is_stale("1-0|1-1")
    assert h.pipeline.is_stale("1-0")


def test_reset_ignores_late_worker_output(qapp):
    h = Harness()
    h.pipeline.start("", _entries(), "1-0|1-1")
    worker = h.worker

    h.pipeline.reset()
    outputs = list(h.outputs)
    worker.delta.emit("late")
    worker.done.emit()

    assert h.outputs == outputs
    assert h.pipeline.accumulated == ""
    assert h.pipeline.state is AnnotationState.IDLE

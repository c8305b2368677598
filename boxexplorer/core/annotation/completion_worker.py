"""
Background request to the completion service.
"""

import codecs
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import requests
from PyQt5.QtCore import QThread, pyqtSignal

from ...utils.logger import logger
from .errors import AnnotationHttpError
from .response_parser import SseEventParser, parse_response_text

EVENT_STREAM = "text/event-stream"
REQUEST_TIMEOUT = (10, 120)  # connect, read


@dataclass
class CompletionResult:
    text: str
    streamed: bool


def fetch_completion(
    url: str,
    headers: Dict[str, str],
    body: Dict[str, Any],
    on_stream_start: Optional[Callable[[], None]] = None,
    on_delta: Optional[Callable[[str], None]] = None,
    post: Callable[..., Any] = requests.post,
    timeout=REQUEST_TIMEOUT,
) -> CompletionResult:
    """
    POST ``body`` and consume the answer.

    An event-stream response is decoded incrementally and every text delta is
    passed to ``on_delta`` as it arrives. Any other response is read as one
    JSON document.

    Raises:
        AnnotationHttpError: the service answered with a non-success status
        requests.RequestException, ValueError: transport or decoding failures
    """
    response = post(url, headers=headers, json=body, stream=True, timeout=timeout)
    try:
        if not response.ok:
            raise AnnotationHttpError(response.status_code, response.text or "")

        content_type = response.headers.get("content-type", "") or ""
        if EVENT_STREAM in content_type:
            if on_stream_start:
                on_stream_start()

            parser = SseEventParser()
            decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
            parts = []
            for chunk in response.iter_content(chunk_size=None):
                if not chunk:
                    continue
                for delta in parser.feed(decoder.decode(chunk)):
                    parts.append(delta)
                    if on_delta:
                        on_delta(delta)
            for delta in parser.feed(decoder.decode(b"", final=True)):
                parts.append(delta)
                if on_delta:
                    on_delta(delta)
            return CompletionResult(text="".join(parts), streamed=True)

        return CompletionResult(text=parse_response_text(response.json()), streamed=False)
    finally:
        response.close()


class CompletionWorker(QThread):
    """Worker thread running one completion request without freezing the UI."""

    # Signals
    stream_started = pyqtSignal()
    delta = pyqtSignal(str)
    completed = pyqtSignal(str, bool)  # text, streamed
    http_error = pyqtSignal(int, str)  # status, body
    failed = pyqtSignal(str)
    done = pyqtSignal()

    def __init__(self, url: str, headers: Dict[str, str], body: Dict[str, Any], parent=None):
        super().__init__(parent)
        self.url = url
        self.headers = headers
        self.body = body

    def run(self):
        """Execute the request in a background thread."""
        try:
            result = fetch_completion(
                self.url,
                self.headers,
                self.body,
                on_stream_start=self.stream_started.emit,
                on_delta=self.delta.emit,
            )
            logger.info("Completion finished (%d chars, streamed=%s)", len(result.text), result.streamed)
            self.completed.emit(result.text, result.streamed)
        except AnnotationHttpError as e:
            logger.warning("Completion request failed with status %d", e.status_code)
            self.http_error.emit(e.status_code, e.body)
        except Exception as e:
            logger.warning("Completion request raised: %s", e)
            self.failed.emit(str(e))
        finally:
            self.done.emit()

"""
Parsing of completion responses, whole or as a server-sent event stream.
"""

import json
from typing import Any, List, Optional, Tuple

DONE_SENTINEL = "[DONE]"


def parse_response_text(data: Any) -> str:
    """
    Answer text from a non-streamed response.

    Checked in order: ``choices[0].message.content``, ``choices[0].text``,
    ``output_text``, ``output[0].content[0].text``. The first non-empty one
    wins; an unknown shape yields an empty string.
    """
    if not isinstance(data, dict):
        return ""

    choices = data.get("choices")
    if isinstance(choices, list) and choices:
        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message")
        if isinstance(message, dict) and message.get("content"):
            return message["content"]
        if first.get("text"):
            return first["text"]

    if data.get("output_text"):
        return data["output_text"]

    try:
        text = data["output"][0]["content"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return ""
    return text or ""


def split_sse_events(buffer: str) -> Tuple[List[str], str]:
    """
    Cut complete frames off the front of ``buffer``.

    Frames are separated by a blank line. Within a frame only ``data:`` lines
    count; their payloads are joined with newlines. The incomplete tail is
    returned for the next read.
    """
    chunks = buffer.split("\n\n")
    rest = chunks.pop()
    events = []
    for chunk in chunks:
        data_lines = [
            line[5:].strip()
            for line in chunk.split("\n")
            if line and line.startswith("data:")
        ]
        if data_lines:
            events.append("\n".join(data_lines))
    return events, rest


def parse_delta(event: str) -> Optional[str]:
    """
    Text delta carried by one event, or None.

    The end-of-stream sentinel and malformed JSON both yield None.
    """
    if event == DONE_SENTINEL:
        return None
    try:
        data = json.loads(event)
    except ValueError:
        return None
    try:
        delta = data["choices"][0]["delta"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    return delta or None


class SseEventParser:
    """Incremental event-stream parser fed with decoded text chunks."""

    def __init__(self):
        self._buffer = ""

    def feed(self, text: str) -> List[str]:
        """Append text and return the deltas of every completed frame."""
        self._buffer = (self._buffer + text).replace("\r\n", "\n")
        events, self._buffer = split_sse_events(self._buffer)
        deltas = []
        for event in events:
            delta = parse_delta(event)
            if delta:
                deltas.append(delta)
        return deltas

    @property
    def pending(self) -> str:
        return self._buffer

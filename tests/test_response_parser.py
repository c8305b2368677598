import json

from boxexplorer.core.annotation import SseEventParser, parse_response_text, split_sse_events
from boxexplorer.core.annotation.response_parser import parse_delta


def _frame(content):
    return "data: " + json.dumps({"choices": [{"delta": {"content": content}}]}) + "\n\n"


def test_split_keeps_incomplete_tail():
    events, rest = split_sse_events("data: a\n\ndata: b\ndata: c\n\ndata: par")

    assert events == ["a", "b\nc"]
    assert rest == "data: par"


def test_split_ignores_frames_without_data_lines():
    events, rest = split_sse_events(": keep-alive\n\nevent: ping\n\n")
    assert events == []
    assert rest == ""


def test_parse_delta():
    assert parse_delta('{"choices":[{"delta":{"content":"hi"}}]}') == "hi"
    assert parse_delta("[DONE]") is None
    assert parse_delta("{not json") is None
    assert parse_delta('{"choices":[{"delta":{}}]}') is None
    assert parse_delta('{"choices":[]}') is None


def test_parser_handles_split_frames_and_crlf():
    parser = SseEventParser()
    frame = _frame("Hel").replace("\n", "\r\n")

    assert parser.feed(frame[:10]) == []
    assert parser.feed(frame[10:]) == ["Hel"]
    assert parser.feed(_frame("lo") + "data: [DONE]\n\n") == ["lo"]
    assert parser.pending == ""


def test_bad_frame_does_not_stop_the_stream():
    parser = SseEventParser()
    assert parser.feed("data: {oops\n\n" + _frame("ok")) == ["ok"]


def test_response_text_priority():
    assert parse_response_text({"choices": [{"message": {"content": "m"}, "text": "t"}], "output_text": "o"}) == "m"
    assert parse_response_text({"choices": [{"message": {"content": ""}, "text": "t"}]}) == "t"
    assert parse_response_text({"choices": [], "output_text": "o"}) == "o"
    assert parse_response_text({"output": [{"content": [{"text": "deep"}]}]}) == "deep"
    assert parse_response_text({"unexpected": True}) == ""
    assert parse_response_text(["not", "a", "dict"]) == ""

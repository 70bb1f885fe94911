"""Tests for the Coze event interpreter."""
import json

import pytest

from travelflow.features.itinerary.app.events import (
    FRAGMENT_RULES,
    find_text_content,
    first_match,
    interpret_event,
    unescape_json_text,
)
from travelflow.features.itinerary.app.sse import RawFrame
from travelflow.features.itinerary.app.state import StreamState
from travelflow.features.itinerary.domain.errors import ProtocolError

from stream_helpers import DELTA, FULL_PLAN


def _frame(event, obj):
    return RawFrame(event, json.dumps(obj, ensure_ascii=False))


def _answer(content=None, **extra):
    obj = {"type": "answer", **extra}
    if content is not None:
        obj["content"] = content
    return _frame(DELTA, obj)


def test_fragment_rules_priority():
    obj = {"message": {"content": "m"}, "object": {"value": "o"}, "content": "c", "text": "t"}
    assert first_match(FRAGMENT_RULES, obj) == "m"
    del obj["message"]
    assert first_match(FRAGMENT_RULES, obj) == "o"
    assert first_match(FRAGMENT_RULES, {"delta": {"content": "d"}, "content": "c"}) == "d"
    assert first_match(FRAGMENT_RULES, {"answer": {"x": 1}, "text": "t"}) == "t"


def test_recursive_search_prefers_field_name_over_position():
    obj = {"data": {"items": [{"id": "1"}, {"meta": {"text": "deep"}}]}, "extra": {"value": "later"}}
    assert find_text_content(obj) == "deep"
    assert find_text_content({"value": "  ", "nested": {"answer": "a"}}) == "a"


def test_unescape_handles_newline_quote_backslash():
    assert unescape_json_text(r'a\nb \"q\" c\\d') == 'a\nb "q" c\\d'


def test_message_delta_fragments_accumulate():
    state = StreamState()
    interpret_event(RawFrame("message", json.dumps({"message": {"content": "你好"}})), state)
    interpret_event(RawFrame("message", json.dumps({"type": "message.delta", "delta": {"content": "，世界"}})), state)
    assert state.accumulated_text == "你好，世界"
    assert not state.finished


def test_unknown_shape_uses_recursive_search():
    state = StreamState()
    interpret_event(RawFrame("message", json.dumps({"type": "answer", "payload": {"chunk": {"text": "x"}}})), state)
    assert state.accumulated_text == "x"


def test_complete_answer_on_second_delta_only():
    state = StreamState()
    interpret_event(_answer(FULL_PLAN), state)
    assert state.delta_count == 1
    assert state.complete_response is None
    assert not state.finished

    interpret_event(_answer(FULL_PLAN), state)
    assert state.delta_count == 2
    assert state.finished
    assert state.complete_response == FULL_PLAN


def test_complete_answer_never_on_third_delta():
    state = StreamState()
    interpret_event(_answer("旅"), state)
    interpret_event(_answer(id="no-text"), state)
    assert state.complete_response is None
    interpret_event(_answer(FULL_PLAN), state)
    assert state.delta_count == 3
    assert state.complete_response is None
    assert not state.finished
    assert state.accumulated_text == "旅" + FULL_PLAN


def test_second_delta_falls_back_to_content_field():
    state = StreamState()
    interpret_event(_answer("first"), state)
    interpret_event(_answer('line1\nsay "hi"'), state)
    assert state.finished
    assert state.complete_response == 'line1\nsay "hi"'


def test_second_delta_falls_back_to_object_value():
    state = StreamState()
    interpret_event(_answer("first"), state)
    interpret_event(_answer(object={"value": "from object"}), state)
    assert state.complete_response == "from object"


def test_complete_delta_index_zero_disables_shortcut():
    state = StreamState()
    for _ in range(3):
        interpret_event(_answer(FULL_PLAN), state, complete_delta_index=0)
    assert state.complete_response is None
    assert state.accumulated_text == FULL_PLAN * 3


def test_complete_response_is_not_overwritten():
    state = StreamState()
    assert state.set_complete("first")
    assert not state.set_complete("second")
    assert state.complete_response == "first"


@pytest.mark.parametrize(
    "event, obj",
    [
        ("message", {"type": "generate_answer_finish"}),
        ("message", {"type": "follow_up", "message": {"is_finish": True}}),
        ("done", "[DONE]"),
    ],
)
def test_finish_signals(event, obj):
    state = StreamState()
    interpret_event(_frame(event, obj), state)
    assert state.finished


def test_completed_event_is_ignored():
    state = StreamState()
    interpret_event(_frame("message", {"content": "ab"}), state)
    interpret_event(_frame("conversation.message.completed", {"type": "answer", "content": "ab"}), state)
    assert state.accumulated_text == "ab"
    assert not state.finished


def test_completed_function_call_adds_no_text():
    state = StreamState()
    call = {"type": "function_call", "content": json.dumps({"name": "weather", "arguments": {}})}
    interpret_event(_frame("conversation.message.completed", call), state)
    assert state.accumulated_text == ""
    assert not state.finished


def test_ping_and_chat_events_are_ignored():
    state = StreamState()
    interpret_event(_frame("ping", {}), state)
    interpret_event(_frame("conversation.chat.created", {"content": "should not count"}), state)
    interpret_event(_frame("something.new", {"content": "ignored"}), state)
    assert state.accumulated_text == ""
    assert not state.finished


def test_malformed_json_is_skipped():
    state = StreamState()
    interpret_event(RawFrame(DELTA, '{"type": "answer", "content": "cut'), state)
    assert state.delta_count == 0
    assert state.accumulated_text == ""


def test_error_event_raises_protocol_error():
    with pytest.raises(ProtocolError) as exc:
        interpret_event(_frame("error", {"code": 4100, "msg": "bad token"}), StreamState())
    assert exc.value.code == 4100
    assert exc.value.message == "bad token"


def test_error_message_subtype_raises_protocol_error():
    with pytest.raises(ProtocolError) as exc:
        interpret_event(_frame("message", {"type": "error", "error": {"code": "E1", "message": "boom"}}), StreamState())
    assert exc.value.code == "E1"
    assert "boom" in str(exc.value)

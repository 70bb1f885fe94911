"""
Event interpreter for Coze streaming payloads.

The upstream payload shape is not stable, so text is located through
ordered rule tables (first hit wins) with a recursive field search as the
last resort. Only malformed JSON is tolerated here; protocol errors and
anything unexpected propagate.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, NamedTuple, Optional, Sequence

from travelflow.features.itinerary.app.sse import RawFrame
from travelflow.features.itinerary.app.state import StreamState
from travelflow.features.itinerary.domain.errors import ProtocolError
from travelflow.shared.logging.logger import preview

logger = logging.getLogger("coze.events")

DELTA_EVENT = "conversation.message.delta"
COMPLETED_EVENT = "conversation.message.completed"
CHAT_EVENT = "conversation.chat"
ANSWER_TYPE = "answer"
DELTA_TYPE = "message.delta"
FINISH_TYPE = "generate_answer_finish"

DEFAULT_COMPLETE_DELTA_INDEX = 2

# Anchors are matched inside the raw JSON text, so every gap is confined to one string literal.
_JSON_CHARS = r'(?:[^"\\]|\\.)'
TRAVEL_SECTIONS_IN_JSON = re.compile(
    rf"旅行推荐[：:]{_JSON_CHARS}*?行程规划[：:]{_JSON_CHARS}*?旅行红黑榜[：:]{_JSON_CHARS}*"
)
CONTENT_FIELD_IN_JSON = re.compile(rf'"content"\s*:\s*"({_JSON_CHARS}+)"')

_ESCAPE = re.compile(r'\\([n"\\])')
_ESCAPE_MAP = {"n": "\n", '"': '"', "\\": "\\"}

TEXT_KEYS = ("content", "text", "value", "answer", "message")

Extractor = Callable[[Dict[str, Any], str], Optional[str]]


class Rule(NamedTuple):
    name: str
    extract: Extractor


def unescape_json_text(text: str) -> str:
    return _ESCAPE.sub(lambda m: _ESCAPE_MAP[m.group(1)], text)


def _str_at(obj: Dict[str, Any], *path: str) -> Optional[str]:
    cur: Any = obj
    for key in path:
        if not isinstance(cur, dict):
            return None
        cur = cur.get(key)
    if isinstance(cur, str) and cur:
        return cur
    return None


def _field(*path: str) -> Extractor:
    def extract(obj: Dict[str, Any], raw: str) -> Optional[str]:
        return _str_at(obj, *path)
    return extract


def _content_literal(obj: Dict[str, Any], raw: str) -> Optional[str]:
    m = CONTENT_FIELD_IN_JSON.search(raw)
    return unescape_json_text(m.group(1)) if m else None


# Where the complete answer may sit inside the designated answer delta.
COMPLETE_ANSWER_RULES: Sequence[Rule] = (
    Rule("content literal", _content_literal),
    Rule("object.value", _field("object", "value")),
    Rule("message.content", _field("message", "content")),
)

# Where an incremental fragment may sit inside a delta/message payload.
FRAGMENT_RULES: Sequence[Rule] = (
    Rule("message.content", _field("message", "content")),
    Rule("object.value", _field("object", "value")),
    Rule("delta.content", _field("delta", "content")),
    Rule("content", _field("content")),
    Rule("answer", _field("answer")),
    Rule("text", _field("text")),
)


def first_match(rules: Sequence[Rule], obj: Dict[str, Any], raw: str = "") -> Optional[str]:
    for rule in rules:
        found = rule.extract(obj, raw)
        if found:
            return found
    return None


def find_text_content(node: Any) -> str:
    """Depth-first search for the first non-blank string under a known text key."""
    if isinstance(node, dict):
        for key in TEXT_KEYS:
            value = node.get(key)
            if isinstance(value, str) and value.strip():
                return value
        children = list(node.values())
    elif isinstance(node, list):
        children = node
    else:
        return ""
    for child in children:
        if isinstance(child, (dict, list)):
            found = find_text_content(child)
            if found:
                return found
    return ""


def _is_finish(event_type: str, msg_type: str, payload: Dict[str, Any]) -> bool:
    if msg_type == FINISH_TYPE or COMPLETED_EVENT in event_type:
        return True
    message = payload.get("message")
    return isinstance(message, dict) and message.get("is_finish") is True


def _take_complete_answer(raw: str, payload: Dict[str, Any], state: StreamState, log: logging.Logger) -> bool:
    m = TRAVEL_SECTIONS_IN_JSON.search(raw)
    if m:
        text = unescape_json_text(m.group(0))
        log.info(f"complete travel plan found in answer delta #{state.delta_count} ({len(text)} chars)")
    else:
        text = first_match(COMPLETE_ANSWER_RULES, payload, raw) or ""
        if text:
            log.info(f"content taken from answer delta #{state.delta_count} ({len(text)} chars)")
    if not text:
        return False
    state.set_complete(text)
    state.finish()
    return True


def _handle_message(event_type: str, obj: Any, payload: Dict[str, Any], state: StreamState, log: logging.Logger) -> None:
    msg_type = payload.get("type") or DELTA_TYPE

    if msg_type in (DELTA_TYPE, ANSWER_TYPE):
        fragment = first_match(FRAGMENT_RULES, payload) or find_text_content(obj)
        if fragment:
            state.append(fragment)
            log.debug(f"delta fragment ({len(fragment)} chars)")
        elif "delta" in event_type:
            log.warning(f"no content found in delta event: {preview(json.dumps(obj, ensure_ascii=False))}")
    elif _is_finish(event_type, msg_type, payload):
        log.info("answer generation completed")
        state.finish()
    elif msg_type == "error":
        error = payload.get("error") if isinstance(payload.get("error"), dict) else {}
        log.error(f"Coze message error: {error.get('code')} {error.get('message')}")
        raise ProtocolError(code=error.get("code"), message=error.get("message"), payload=obj)
    else:
        log.debug(f"other message type: {msg_type}")


def interpret_event(
    frame: RawFrame,
    state: StreamState,
    *,
    complete_delta_index: int = DEFAULT_COMPLETE_DELTA_INDEX,
    log: Optional[logging.Logger] = None,
) -> None:
    """
    Apply one frame to `state`.

    The `complete_delta_index`-th answer delta of a `conversation.message.delta`
    event is expected to carry the whole answer; when it does, the stream
    is short-circuited. Set the index to 0 to disable that shortcut.
    """
    log = log or logger
    if not frame.data:
        return
    try:
        obj = json.loads(frame.data)
    except json.JSONDecodeError as e:
        log.warning(f"JSON parse error, frame skipped: {e} data={preview(frame.data)}")
        return

    payload: Dict[str, Any] = obj if isinstance(obj, dict) else {}
    event_type = frame.event_type
    log.debug(f"{event_type} event, type={payload.get('type') or 'unknown'}")

    if event_type == DELTA_EVENT and payload.get("type") == ANSWER_TYPE:
        state.delta_count += 1
        if complete_delta_index and state.delta_count == complete_delta_index:
            if _take_complete_answer(frame.data, payload, state, log):
                return

    if event_type == "message" or DELTA_EVENT in event_type:
        _handle_message(event_type, obj, payload, state, log)
    elif event_type == "error":
        log.error(f"stream error event: {preview(frame.data)}")
        raise ProtocolError(
            code=payload.get("code"),
            message=payload.get("msg") or payload.get("message"),
            payload=obj,
        )
    elif event_type in ("ping", "done") or CHAT_EVENT in event_type:
        if event_type == "done":
            state.finish()
    else:
        log.debug(f"ignoring event type {event_type}")

"""
Last-chance extraction from the unparsed stream tail, used only when the
accumulator produced no text.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Optional

from travelflow.features.itinerary.app.events import unescape_json_text
from travelflow.features.itinerary.domain.errors import EmptyResponseError
from travelflow.shared.logging.logger import preview

logger = logging.getLogger("coze.recovery")

JSON_OBJECT = re.compile(r"\{[\s\S]*?\}")
TRAVEL_SECTIONS = re.compile(r"旅行推荐[：:][\s\S]*?行程规划[：:][\s\S]*?旅行红黑榜[：:][\s\S]*")
TOP_LEVEL_TEXT_FIELDS = ("content", "text", "answer", "value", "message")
MIN_NESTED_TEXT_LEN = 20


def find_long_text(node: Any) -> str:
    # short strings are usually ids or keys, not answer text
    if isinstance(node, dict):
        children = list(node.values())
    elif isinstance(node, list):
        children = node
    else:
        return ""
    for child in children:
        if isinstance(child, str) and len(child.strip()) > MIN_NESTED_TEXT_LEN:
            return child
        if isinstance(child, (dict, list)):
            found = find_long_text(child)
            if found:
                return found
    return ""


def _text_from_objects(buffer: str, log: logging.Logger) -> Optional[str]:
    for candidate in JSON_OBJECT.findall(buffer):
        try:
            obj = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if not isinstance(obj, dict):
            continue
        log.debug(f"JSON object in buffer, keys={list(obj)}")
        for name in TOP_LEVEL_TEXT_FIELDS:
            value = obj.get(name)
            if isinstance(value, str) and value.strip():
                log.info(f"recovered text from field '{name}'")
                return value
        nested = find_long_text(obj)
        if nested:
            log.info("recovered text from a nested field")
            return nested
    return None


def recover_text(buffer: str, *, log: Optional[logging.Logger] = None) -> str:
    """
    Recover answer text from the raw buffer: JSON objects first, then the
    three section anchors, then the buffer verbatim.

    Raises EmptyResponseError when nothing was received at all.
    """
    log = log or logger
    if not buffer.strip():
        raise EmptyResponseError()

    log.info(f"recovering from raw buffer: {preview(buffer)}")
    text = _text_from_objects(buffer, log)
    if text:
        return text

    m = TRAVEL_SECTIONS.search(buffer)
    if m:
        log.info("recovered travel sections from raw buffer")
        return unescape_json_text(m.group(0))

    log.info("no structure found, using raw buffer")
    return buffer

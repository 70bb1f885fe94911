"""
Frame reader for the Coze server-sent-event stream.

Bytes are decoded incrementally so multi-byte characters split across
transport chunks survive. Complete frames (terminated by a blank line)
are emitted; the unterminated tail stays in `state.buffer`.
"""
from __future__ import annotations

import codecs
from dataclasses import dataclass
from typing import List, Optional

from travelflow.features.itinerary.app.state import StreamState

FRAME_DELIMITER = "\n\n"
DEFAULT_EVENT_TYPE = "message"


@dataclass(frozen=True)
class RawFrame:
    event_type: str
    data: str


def parse_frame(block: str) -> Optional[RawFrame]:
    if not block.strip():
        return None
    event_type = DEFAULT_EVENT_TYPE
    data = ""
    for line in block.split("\n"):
        if line.startswith("event:"):
            event_type = line[len("event:"):].strip()
        elif line.startswith("data:"):
            data = line[len("data:"):].strip()
    return RawFrame(event_type=event_type, data=data)


class FrameReader:
    def __init__(self, state: StreamState, encoding: str = "utf-8") -> None:
        self._state = state
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def feed(self, chunk: bytes) -> List[RawFrame]:
        self._state.buffer += self._decoder.decode(chunk)
        return self._drain()

    def close(self) -> None:
        # flush a dangling partial character into the buffer for recovery
        self._state.buffer += self._decoder.decode(b"", final=True)

    def _drain(self) -> List[RawFrame]:
        frames: List[RawFrame] = []
        buf = self._state.buffer
        while True:
            idx = buf.find(FRAME_DELIMITER)
            if idx < 0:
                break
            block, buf = buf[:idx], buf[idx + len(FRAME_DELIMITER):]
            frame = parse_frame(block)
            if frame is not None:
                frames.append(frame)
        self._state.buffer = buf
        return frames

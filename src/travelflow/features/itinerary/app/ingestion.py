from __future__ import annotations

import logging
from datetime import date
from typing import AsyncIterable, Optional

from travelflow.features.itinerary.app.events import interpret_event
from travelflow.features.itinerary.app.recovery import recover_text
from travelflow.features.itinerary.app.sections import split_sections
from travelflow.features.itinerary.app.sse import FrameReader
from travelflow.features.itinerary.app.state import StreamState
from travelflow.features.itinerary.app.synthesizer import synthesize_itinerary
from travelflow.features.itinerary.domain.models import ExtractedItinerary, TravelRequestParams
from travelflow.shared.config.settings import settings
from travelflow.shared.logging.logger import preview

logger = logging.getLogger("coze.stream")


async def accumulate_stream(
    chunks: AsyncIterable[bytes],
    *,
    complete_delta_index: Optional[int] = None,
    log: Optional[logging.Logger] = None,
) -> str:
    """
    Read the SSE byte stream until a completion signal or end of data and
    return the answer text, falling back to raw buffer recovery.
    """
    log = log or logger
    index = settings.COZE_COMPLETE_DELTA_INDEX if complete_delta_index is None else complete_delta_index
    state = StreamState()
    reader = FrameReader(state)
    iterator = chunks.__aiter__()
    try:
        async for chunk in iterator:
            for frame in reader.feed(chunk):
                interpret_event(frame, state, complete_delta_index=index, log=log)
                if state.finished:
                    break
            if state.finished:
                log.info("completion signal received, stopping read")
                break
        else:
            reader.close()
            log.info("stream ended")
    finally:
        aclose = getattr(iterator, "aclose", None)
        if aclose is not None:
            await aclose()

    text = state.final_text
    log.info(f"stream processed: answer deltas={state.delta_count} length={len(text)}")
    if not text.strip():
        log.warning("empty answer from stream, trying raw buffer")
        text = recover_text(state.buffer, log=log)
    log.debug(f"final text: {preview(text)}")
    return text


async def ingest_stream(
    params: TravelRequestParams,
    chunks: AsyncIterable[bytes],
    *,
    today: Optional[date] = None,
    complete_delta_index: Optional[int] = None,
    log: Optional[logging.Logger] = None,
) -> ExtractedItinerary:
    """
    Turn one Coze SSE byte stream into a structured itinerary.

    Raises ItineraryError subclasses: ProtocolError for upstream errors and
    EmptyResponseError when nothing usable was received.
    """
    text = await accumulate_stream(chunks, complete_delta_index=complete_delta_index, log=log)
    sections = split_sections(text, log=log)
    return synthesize_itinerary(sections, text, params, today=today, log=log)

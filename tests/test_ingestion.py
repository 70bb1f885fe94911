"""End-to-end tests for stream ingestion into an itinerary."""
import asyncio
import json
from datetime import date, timedelta

import pytest

from travelflow.features.itinerary.app.ingestion import accumulate_stream, ingest_stream
from travelflow.features.itinerary.domain.errors import EmptyResponseError, ProtocolError
from travelflow.features.itinerary.domain.models import TravelRequestParams

from stream_helpers import FULL_PLAN, answer_delta, as_chunks, byte_stream, frame, message_delta, run

TODAY = date(2024, 5, 1)


def _ingest(text, params=None, size=0, **kwargs):
    params = params or TravelRequestParams(location="北京", days="3")
    return run(ingest_stream(params, byte_stream(as_chunks(text, size)), today=TODAY, **kwargs))


def test_second_answer_delta_yields_full_itinerary():
    """北京, 5-7 days, complete plan in the second answer delta."""
    stream = (
        frame("conversation.chat.created", {"id": "c1"})
        + answer_delta("旅行")
        + answer_delta(FULL_PLAN)
        + answer_delta("never read")
    )
    result = _ingest(stream, TravelRequestParams(location="北京", days="5-7"))

    assert result.title == "西安之旅"
    assert result.plan == "详细安排..."
    assert result.highlights == "推荐/避坑..."
    assert result.destination == "西安之旅"
    assert result.start_date == TODAY.isoformat()
    assert result.end_date == (TODAY + timedelta(days=7)).isoformat()
    assert len(result.daily_itinerary) == 7


def test_completed_function_call_does_not_end_the_answer():
    """A tool call completing before the answer starts is not taken as the answer."""
    call = {"type": "function_call", "content": json.dumps({"name": "weather", "arguments": {"city": "西安"}})}
    stream = (
        frame("conversation.chat.created", {"id": "c1"})
        + frame("conversation.message.completed", call)
        + answer_delta("旅行")
        + answer_delta(FULL_PLAN)
    )
    result = _ingest(stream)

    assert result.title == "西安之旅"
    assert result.plan == "详细安排..."
    assert result.highlights == "推荐/避坑..."


def test_chunk_boundaries_do_not_change_result():
    stream = answer_delta("旅行") + answer_delta(FULL_PLAN)
    whole = _ingest(stream)
    for size in (1, 5, 13):
        assert _ingest(stream, size=size) == whole


def test_malformed_frame_is_skipped_amid_good_frames():
    stream = (
        message_delta("旅行推荐:A\n")
        + message_delta("行程规划:B\n")
        + 'event: message\ndata: {"type": "message.delta", "message": {"content": \n\n'
        + message_delta("旅行红黑榜:C")
        + frame("message", {"type": "generate_answer_finish"})
    )
    result = _ingest(stream)
    assert (result.title, result.plan, result.highlights) == ("A", "B", "C")


def test_stream_without_completion_signal_still_succeeds():
    text = run(accumulate_stream(byte_stream(as_chunks(message_delta("第一行\n") + message_delta("第二行")))))
    assert text == "第一行\n第二行"


def test_reading_stops_and_stream_is_closed_after_completion():
    closed = []
    pulled = []

    async def chunks():
        try:
            pulled.append(1)
            yield (answer_delta("a") + answer_delta(FULL_PLAN)).encode("utf-8")
            pulled.append(2)
            yield b"event: error\ndata: {}\n\n"
        finally:
            closed.append(True)

    text = run(accumulate_stream(chunks()))
    assert text == FULL_PLAN
    assert pulled == [1]
    assert closed == [True]


def test_stream_is_closed_on_protocol_error():
    closed = []

    async def chunks():
        try:
            yield frame("error", {"code": 700, "msg": "quota"}).encode("utf-8")
            yield b""
        finally:
            closed.append(True)

    with pytest.raises(ProtocolError):
        run(accumulate_stream(chunks()))
    assert closed == [True]


def test_empty_stream_raises_empty_response():
    with pytest.raises(EmptyResponseError):
        run(accumulate_stream(byte_stream([])))


def test_only_control_events_raise_empty_response():
    stream = frame("ping", {}) + frame("done", '"[DONE]"')
    with pytest.raises(EmptyResponseError):
        _ingest(stream)


def test_unterminated_tail_is_recovered():
    tail = 'event: conversation.message.delta\ndata: {"type": "answer", "content": "旅行推荐:X\\n行程规划:Y\\n旅行红黑榜:Z"}'
    result = _ingest(tail)
    assert (result.title, result.plan, result.highlights) == ("X", "Y", "Z")


def test_complete_delta_index_can_be_overridden():
    stream = answer_delta("旅行推荐:A\n") + answer_delta("行程规划:B\n") + answer_delta("旅行红黑榜:C")
    result = _ingest(stream, complete_delta_index=0)
    assert (result.title, result.plan, result.highlights) == ("A", "B", "C")


def test_cancellation_propagates_and_closes_stream():
    closed = []

    async def go():
        started = asyncio.Event()
        gate = asyncio.Event()

        async def chunks():
            try:
                yield message_delta("第一段").encode("utf-8")
                started.set()
                await gate.wait()
                yield message_delta("never").encode("utf-8")
            finally:
                closed.append(True)

        task = asyncio.create_task(accumulate_stream(chunks()))
        await started.wait()
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

    run(go())
    assert closed == [True]

from __future__ import annotations

import json
import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Optional

import httpx

from travelflow.features.itinerary.domain.errors import ConfigurationError, TransportError
from travelflow.shared.config.settings import settings
from travelflow.shared.concurrency import COZE_STREAM_SEMAPHORE
from travelflow.shared.logging.logger import preview

log = logging.getLogger("coze")

ERROR_BODY_PREVIEW = 500


def _endpoint() -> str:
    endpoint = (settings.COZE_API_ENDPOINT or "").strip()
    if endpoint and not endpoint.startswith("http"):
        endpoint = f"https://{endpoint}"
    return endpoint


def _headers() -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {settings.COZE_API_KEY}",
        "Content-Type": "application/json",
        "Accept": "text/event-stream",
    }


def _looks_like_html(text: str) -> bool:
    head = text.lstrip()[:20].lower()
    return head.startswith("<!doctype") or head.startswith("<html")


async def _raise_for_error_response(resp: httpx.Response) -> None:
    body = (await resp.aread()).decode("utf-8", errors="replace")
    log.error(f"Coze HTTP {resp.status_code} body: {preview(body, ERROR_BODY_PREVIEW)}")
    if _looks_like_html(body):
        raise TransportError("API返回了HTML错误页面而非JSON响应", status_code=resp.status_code)
    try:
        log.error(f"Coze error JSON: {json.loads(body)}")
    except json.JSONDecodeError:
        log.error("Coze error body is not valid JSON")
    raise TransportError(
        f"Coze API响应错误: {resp.status_code} - {resp.reason_phrase}",
        status_code=resp.status_code,
    )


@asynccontextmanager
async def _client_scope(http_client: Optional[httpx.AsyncClient], timeout: httpx.Timeout):
    if http_client is not None:
        yield http_client
        return
    async with httpx.AsyncClient(timeout=timeout) as client:
        yield client


@asynccontextmanager
async def open_workflow_stream(
    prompt: str,
    *,
    user: Optional[str] = None,
    http_client: Optional[httpx.AsyncClient] = None,
    request_timeout: Optional[int] = None,
) -> AsyncIterator[AsyncIterator[bytes]]:
    """
    POST the prompt to the Coze workflow endpoint and yield the raw SSE byte
    stream. The response is released on every exit path, including early
    termination and cancellation by the caller.
    """
    endpoint = _endpoint()
    log.info(
        f"Coze config check: workflow_id={bool(settings.COZE_WORKFLOW_ID)} "
        f"api_key={bool(settings.COZE_API_KEY)} endpoint={endpoint or 'unset'}"
    )
    if not (settings.COZE_WORKFLOW_ID and settings.COZE_API_KEY and endpoint):
        raise ConfigurationError("未配置Coze API所需的参数")

    payload = {
        "workflow_id": settings.COZE_WORKFLOW_ID,
        "additional_messages": [{"role": "user", "content": prompt, "content_type": "text"}],
        "user": user or f"user-{int(time.time() * 1000)}",
        "stream": True,
    }
    timeout = httpx.Timeout(request_timeout or settings.COZE_REQUEST_TIMEOUT)

    async with COZE_STREAM_SEMAPHORE:
        try:
            async with _client_scope(http_client, timeout) as client:
                async with client.stream("POST", endpoint, headers=_headers(), json=payload) as resp:
                    log.info(f"Coze response status: {resp.status_code}")
                    if resp.is_error:
                        await _raise_for_error_response(resp)
                    if "text/html" in resp.headers.get("content-type", ""):
                        raise TransportError("API返回了HTML页面而非事件流", status_code=resp.status_code)
                    yield resp.aiter_bytes()
        except httpx.HTTPError as e:
            raise TransportError(f"Coze HTTP error: {e}") from e

from __future__ import annotations

from typing import Any, Optional


class ItineraryError(Exception):
    """Base class for every failure raised while producing an itinerary."""


class ConfigurationError(ItineraryError):
    """Upstream credentials or endpoint are missing."""


class TransportError(ItineraryError):
    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ProtocolError(ItineraryError):
    """The upstream service reported an error inside the event stream."""

    def __init__(self, code: Any = None, message: Any = None, payload: Any = None) -> None:
        super().__init__(f"Coze error: {code} - {message}")
        self.code = code
        self.message = message
        self.payload = payload


class EmptyResponseError(ItineraryError):
    def __init__(self, message: str = "从Coze API获取的响应内容为空") -> None:
        super().__init__(message)

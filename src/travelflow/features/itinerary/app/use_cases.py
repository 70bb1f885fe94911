"""
Itinerary generation: stream a plan from the Coze workflow and fall back to
the deterministic mock when the workflow cannot deliver one.
"""
import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from travelflow.features.itinerary.app.ingestion import ingest_stream
from travelflow.features.itinerary.domain.errors import ItineraryError
from travelflow.features.itinerary.domain.mock import generate_mock_itinerary
from travelflow.features.itinerary.domain.models import ExtractedItinerary, TravelRequestParams
from travelflow.features.itinerary.domain.prompts import build_itinerary_prompt
from travelflow.features.itinerary.infra.coze_client import open_workflow_stream

logger = logging.getLogger("itinerary")


@dataclass(frozen=True)
class GenerationResult:
    itinerary: ExtractedItinerary
    is_ai_generated: bool


async def generate_itinerary(
    params: TravelRequestParams,
    *,
    http_client: Optional[httpx.AsyncClient] = None,
) -> GenerationResult:
    prompt = build_itinerary_prompt(params)
    try:
        async with open_workflow_stream(prompt, user=params.user_id, http_client=http_client) as chunks:
            itinerary = await ingest_stream(params, chunks)
        return GenerationResult(itinerary=itinerary, is_ai_generated=True)
    except ItineraryError as e:
        logger.error(f"AI itinerary generation failed, using fallback: {e}")
        return GenerationResult(itinerary=generate_mock_itinerary(params), is_ai_generated=False)

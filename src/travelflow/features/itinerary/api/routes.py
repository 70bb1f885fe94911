from __future__ import annotations
import logging
from typing import Optional
from fastapi import APIRouter
from fastapi.responses import JSONResponse

from travelflow.shared.config.settings import settings
from travelflow.features.itinerary.api.schemas import ItineraryPayload, ItineraryResponse
from travelflow.features.itinerary.app.use_cases import GenerationResult, generate_itinerary
from travelflow.features.itinerary.domain.models import TravelRequestParams
from travelflow.features.itinerary.infra.itinerary_store import save_itinerary, save_travel_preference

router = APIRouter(tags=["itinerary"])
log = logging.getLogger("api.itinerary")

FALLBACK_MESSAGE = "使用了备用数据，因为AI服务暂时不可用"


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=400)


def _store_preference(params: TravelRequestParams) -> Optional[str]:
    if not settings.PERSISTENCE_ENABLED:
        return None
    try:
        return save_travel_preference(params)
    except Exception as e:
        log.error(f"saving travel preference failed: {e}")
        return None


def _store_itinerary(preference_id: Optional[str], result: GenerationResult, user_id: Optional[str]) -> None:
    if not preference_id:
        return
    try:
        save_itinerary(
            preference_id=preference_id,
            itinerary=result.itinerary,
            is_ai_generated=result.is_ai_generated,
            user_id=user_id,
        )
    except Exception as e:
        log.error(f"saving itinerary failed: {e}")


@router.post("/itinerary", response_model=ItineraryResponse, response_model_exclude_none=True)
async def create_itinerary(payload: ItineraryPayload):
    if not payload.location.strip():
        return _bad_request("出发地点不能为空")
    if not payload.days.strip():
        return _bad_request("旅行天数不能为空")

    params = TravelRequestParams(**payload.model_dump())
    log.info(f"itinerary request: location={params.location} destination={params.destination} days={params.days}")

    try:
        preference_id = _store_preference(params)
        result = await generate_itinerary(params)
        _store_itinerary(preference_id, result, params.user_id)
    except Exception:
        log.exception("itinerary request failed")
        return JSONResponse({"error": "服务器内部错误，请稍后再试"}, status_code=500)

    body = ItineraryResponse(success=True, data=result.itinerary.model_dump(by_alias=True))
    if not result.is_ai_generated:
        body.fallback = True
        body.message = FALLBACK_MESSAGE
    return body

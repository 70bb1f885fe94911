from pydantic import BaseModel
from typing import Any, Dict, Optional

from travelflow.features.itinerary.domain.models import TravelRequestParams


class ItineraryPayload(TravelRequestParams):
    # blank values are rejected by the route with a 400, not by validation
    location: str = ""
    days: str = ""


class ItineraryResponse(BaseModel):
    success: bool
    data: Dict[str, Any]
    fallback: Optional[bool] = None
    message: Optional[str] = None

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from travelflow.features.itinerary.domain.models import ExtractedItinerary, TravelRequestParams
from travelflow.shared.persistence.mongo import get_db

log = logging.getLogger("itinerary.store")


def save_travel_preference(params: TravelRequestParams) -> Optional[str]:
    """
    Store the request parameters; returns the new document id as a string.
    """
    doc: Dict[str, Any] = params.model_dump()
    doc["created_at"] = time.time()
    result = get_db().travel_preferences.insert_one(doc)
    return str(result.inserted_id)


def save_itinerary(
    *,
    preference_id: str,
    itinerary: ExtractedItinerary,
    is_ai_generated: bool,
    user_id: Optional[str] = None,
) -> str:
    doc = {
        "preference_id": preference_id,
        "itinerary_data": itinerary.model_dump(by_alias=True),
        "destination": itinerary.destination,
        "start_date": itinerary.start_date,
        "end_date": itinerary.end_date,
        "summary": itinerary.summary,
        "title": itinerary.title,
        "plan": itinerary.plan,
        "highlights": itinerary.highlights,
        "is_ai_generated": is_ai_generated,
        "user_id": user_id,
        "created_at": time.time(),
    }
    result = get_db().itineraries.insert_one(doc)
    log.info(f"itinerary stored for preference {preference_id}")
    return str(result.inserted_id)

from __future__ import annotations

from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel


class TravelRequestParams(BaseModel):
    """
    Trip parameters supplied by the caller.

    `days` and `travelers` accept a single number ("5") or an inclusive
    range ("3-5"); integers are normalised to strings.
    """
    location: str
    destination: Optional[str] = None
    days: str
    travelers: Optional[str] = None
    preference: Optional[str] = None
    budget: Optional[str] = None
    user_id: Optional[str] = None

    @field_validator("days", "travelers", "budget", mode="before")
    @classmethod
    def _numbers_as_text(cls, v: Union[int, float, str, None]):
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return v


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ItineraryActivity(_Frozen):
    time: str
    activity: str
    description: str
    location: str


class ItineraryDay(_Frozen):
    day: int
    date: str
    activities: List[ItineraryActivity]


class Recommendations(_Frozen):
    accommodation: List[str]
    transportation: List[str]
    must_visit: List[str]


class ExtractedItinerary(_Frozen):
    destination: str
    start_date: str
    end_date: str
    summary: str
    budget: str
    daily_itinerary: List[ItineraryDay]
    recommendations: Recommendations
    title: str
    plan: str
    highlights: str

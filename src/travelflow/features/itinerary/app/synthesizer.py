from __future__ import annotations

import logging
import re
from datetime import date, timedelta
from typing import List, Optional

from travelflow.features.itinerary.app.sections import Sections
from travelflow.features.itinerary.domain.models import (
    ExtractedItinerary,
    ItineraryActivity,
    ItineraryDay,
    Recommendations,
    TravelRequestParams,
)
from travelflow.features.itinerary.domain.rules import budget_label, parse_day_count

logger = logging.getLogger("itinerary.synthesizer")

SUMMARY_LIMIT = 200
DESTINATION_PREFIX_LEN = 10
UNKNOWN_DESTINATION = "未知目的地"

DESTINATION_MARKER = re.compile(r"目的地[:：]\s*([^\n,.，。]+)", re.IGNORECASE)
ADMINISTRATIVE_PLACE = re.compile(r"([^，。,.\s]+(?:市|县|省|自治区|特别行政区))")
TITLE_PUNCTUATION = re.compile(r"[，。,.]")


def infer_destination(text: str, title: str) -> str:
    m = DESTINATION_MARKER.search(text)
    if m and m.group(1).strip():
        return m.group(1).strip()
    m = ADMINISTRATIVE_PLACE.search(title)
    if m:
        return m.group(1)
    prefix = TITLE_PUNCTUATION.sub("", title[:DESTINATION_PREFIX_LEN]).strip()
    return prefix or UNKNOWN_DESTINATION


def build_summary(title: str, text: str) -> str:
    summary = title or text[:SUMMARY_LIMIT]
    if len(summary) >= SUMMARY_LIMIT:
        summary += "..."
    return summary


def daily_skeleton(days: int, start: date, origin: str, destination: str) -> List[ItineraryDay]:
    """Placeholder day plan; the real plan lives in the free-text `plan` section."""
    return [
        ItineraryDay(
            day=i,
            date=(start + timedelta(days=i - 1)).isoformat(),
            activities=[
                ItineraryActivity(
                    time="09:00",
                    activity=f"从{origin}出发" if i == 1 else "自由行程",
                    description="AI生成的旅行计划",
                    location=origin if i == 1 else destination,
                )
            ],
        )
        for i in range(1, days + 1)
    ]


def default_recommendations(destination: str) -> Recommendations:
    return Recommendations(
        accommodation=[f"{destination}酒店", f"{destination}民宿"],
        transportation=["高铁", "飞机", "公共交通"],
        must_visit=[f"{destination}景点", f"{destination}特色景区"],
    )


def synthesize_itinerary(
    sections: Sections,
    text: str,
    params: TravelRequestParams,
    *,
    today: Optional[date] = None,
    log: Optional[logging.Logger] = None,
) -> ExtractedItinerary:
    log = log or logger
    start = today or date.today()
    days = parse_day_count(params.days)
    destination = infer_destination(text, sections.title)
    log.info(f"itinerary: destination={destination} days={days}")

    return ExtractedItinerary(
        destination=destination,
        start_date=start.isoformat(),
        end_date=(start + timedelta(days=days)).isoformat(),
        summary=build_summary(sections.title, text),
        budget=budget_label(params.budget),
        daily_itinerary=daily_skeleton(days, start, params.location, destination),
        recommendations=default_recommendations(destination),
        title=sections.title,
        plan=sections.plan,
        highlights=sections.highlights,
    )

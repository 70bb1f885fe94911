"""
Deterministic stand-in itinerary, used when the Coze workflow cannot
produce one. Same shape as the extracted itinerary.
"""
from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Optional

from travelflow.features.itinerary.domain.models import (
    ExtractedItinerary,
    ItineraryActivity,
    ItineraryDay,
    Recommendations,
    TravelRequestParams,
)
from travelflow.features.itinerary.domain.rules import budget_label, parse_day_count

SUGGESTED_DESTINATIONS: Dict[str, str] = {
    "北京": "西安",
    "上海": "杭州",
    "广州": "厦门",
    "深圳": "三亚",
}
DEFAULT_DESTINATION = "杭州"

_MORNING_SPOTS = ["", "著名景点", "历史街区", "自然风景区"]
_AFTERNOON = ["参观博物馆", "游览古城区", "探访文化街区", "漫步在公园"]
_EVENING = ["欣赏夜景", "体验夜市", "观看演出", "休息"]


def _day_activities(index: int, origin: str, destination: str) -> List[ItineraryActivity]:
    first = index == 0
    return [
        ItineraryActivity(
            time="09:00",
            activity=f"从{origin}出发前往{destination}" if first else f"游览{destination}景区{_MORNING_SPOTS[index % 4]}",
            description="准备前往目的地" if first else f"欣赏{destination}美景，品尝当地小吃",
            location=origin if first else f"{destination}景区",
        ),
        ItineraryActivity(time="12:00", activity="午餐", description=f"品尝{destination}特色菜", location=destination),
        ItineraryActivity(
            time="14:00",
            activity=_AFTERNOON[index % 4],
            description=f"了解{destination}的历史文化",
            location=destination,
        ),
        ItineraryActivity(time="18:00", activity="晚餐", description="尝试当地特色餐厅", location=destination),
        ItineraryActivity(
            time="20:00",
            activity=_EVENING[index % 4],
            description=f"体验{destination}夜生活",
            location=destination,
        ),
    ]


def generate_mock_itinerary(params: TravelRequestParams, *, today: Optional[date] = None) -> ExtractedItinerary:
    today = today or date.today()
    days = parse_day_count(params.days)
    destination = params.destination or SUGGESTED_DESTINATIONS.get(params.location) or DEFAULT_DESTINATION

    preference_text = f"，特别关注{params.preference}相关的景点和活动" if params.preference else ""
    travelers_text = f"{params.travelers}人" if params.travelers else ""

    return ExtractedItinerary(
        destination=destination,
        start_date=today.isoformat(),
        end_date=(today + timedelta(days=days)).isoformat(),
        summary=f"这是一个{days}天的{travelers_text}行程，从{params.location}出发前往{destination}的旅行建议{preference_text}。",
        budget=budget_label(params.budget),
        daily_itinerary=[
            ItineraryDay(
                day=i + 1,
                date=(today + timedelta(days=i)).isoformat(),
                activities=_day_activities(i, params.location, destination),
            )
            for i in range(days)
        ],
        recommendations=Recommendations(
            accommodation=[f"{destination}豪华酒店", f"{destination}精品民宿", f"{destination}度假酒店"],
            transportation=["高铁", "飞机", "长途汽车"],
            must_visit=[f"{destination}著名景点{n}" for n in range(1, 6)],
        ),
        title=f"{params.location}到{destination}的{days}天行程推荐",
        plan=f"这是一个从{params.location}到{destination}的{days}天行程规划。包含景点、餐饮和交通安排。",
        highlights=f"推荐体验：{destination}特色美食\n避坑指南：远离人群密集区，注意个人财物安全。",
    )

# features/itinerary/domain/prompts.py
from __future__ import annotations

from travelflow.features.itinerary.domain.models import TravelRequestParams

ITINERARY_PROMPT_TEMPLATE = """
请帮我生成一个从{location}出发{destination_clause}的详细旅行计划。
行程天数: {days}
{travelers_line}
{preference_line}
{budget_line}

请提供包括{destination_name}、每日活动安排（时间、活动描述、地点）、住宿推荐、交通方式和必去景点的详细行程规划。

请按以下格式返回：

旅行推荐：
[简洁的目的地和旅行概述]

行程规划：
[详细的每日行程安排]

旅行红黑榜：
[值得体验的项目和需要避开的坑]
"""


def build_itinerary_prompt(params: TravelRequestParams) -> str:
    return ITINERARY_PROMPT_TEMPLATE.format(
        location=params.location,
        destination_clause=f"前往{params.destination}" if params.destination else "",
        days=params.days,
        travelers_line=f"出行人数: {params.travelers}" if params.travelers else "",
        preference_line=f"特殊偏好: {params.preference}" if params.preference else "",
        budget_line=f"预算: {params.budget}元人民币" if params.budget else "",
        destination_name=params.destination or "目的地",
    ).strip()

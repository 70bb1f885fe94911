"""Tests for splitting the answer into title / plan / highlights."""
from travelflow.features.itinerary.app.sections import (
    PLACEHOLDER_HIGHLIGHTS,
    PLACEHOLDER_TITLE,
    Sections,
    split_sections,
)


def test_anchored_text_splits_exactly():
    assert split_sections("旅行推荐:A\n行程规划:B\n旅行红黑榜:C") == Sections("A", "B", "C")


def test_full_width_colons_and_whitespace():
    text = "旅行推荐 ：\n  杭州三日游 \n\n行程规划：\n第一天 西湖\n第二天 灵隐寺\n\n旅行红黑榜： 红：龙井 黑：节假日人多\n"
    s = split_sections(text)
    assert s.title == "杭州三日游"
    assert s.plan == "第一天 西湖\n第二天 灵隐寺"
    assert s.highlights == "红：龙井 黑：节假日人多"


def test_partial_anchors_keep_matched_sections():
    assert split_sections("旅行推荐：只有标题") == Sections("只有标题", "", "")
    assert split_sections("前言\n行程规划:B\n旅行红黑榜:C") == Sections("", "B", "C")


def test_paragraph_cascade():
    assert split_sections("P1\n\nP2\n\nP3") == Sections("P1", "P2", "P3")
    assert split_sections("P1\n\nP2\n\nP3\n\nP4") == Sections("P1", "P2\n\nP3", "P4")


def test_line_cascade():
    assert split_sections("第一行\n第二行\n第三行") == Sections("第一行", "第二行\n第三行", "")


def test_single_line_gets_placeholders():
    assert split_sections("一句话的计划") == Sections(PLACEHOLDER_TITLE, "一句话的计划", PLACEHOLDER_HIGHLIGHTS)

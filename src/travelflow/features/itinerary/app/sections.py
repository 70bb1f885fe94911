from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, List, Optional

logger = logging.getLogger("itinerary.sections")

TITLE_ANCHOR = "旅行推荐"
PLAN_ANCHOR = "行程规划"
HIGHLIGHTS_ANCHOR = "旅行红黑榜"

SECTION_ANCHOR = re.compile(rf"({TITLE_ANCHOR}|{PLAN_ANCHOR}|{HIGHLIGHTS_ANCHOR})\s*[：:]", re.IGNORECASE)
PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

PLACEHOLDER_TITLE = "你的旅行计划"
PLACEHOLDER_HIGHLIGHTS = "根据AI生成"


@dataclass(frozen=True)
class Sections:
    title: str
    plan: str
    highlights: str


def _split_by_anchors(text: str) -> Optional[Sections]:
    first: Dict[str, re.Match] = {}
    for m in SECTION_ANCHOR.finditer(text):
        first.setdefault(m.group(1), m)
    if not first:
        return None

    ordered: List[re.Match] = sorted(first.values(), key=lambda m: m.start())
    bodies: Dict[str, str] = {}
    for i, m in enumerate(ordered):
        end = ordered[i + 1].start() if i + 1 < len(ordered) else len(text)
        bodies[m.group(1)] = text[m.end():end].strip()
    return Sections(
        title=bodies.get(TITLE_ANCHOR, ""),
        plan=bodies.get(PLAN_ANCHOR, ""),
        highlights=bodies.get(HIGHLIGHTS_ANCHOR, ""),
    )


def _split_by_layout(text: str) -> Sections:
    body = text.strip()
    paragraphs = PARAGRAPH_BREAK.split(body)
    if len(paragraphs) >= 3:
        return Sections(
            title=paragraphs[0].strip(),
            plan="\n\n".join(p.strip() for p in paragraphs[1:-1]),
            highlights=paragraphs[-1].strip(),
        )
    lines = body.split("\n")
    if len(lines) >= 2:
        return Sections(title=lines[0].strip(), plan="\n".join(lines[1:]).strip(), highlights="")
    return Sections(title=PLACEHOLDER_TITLE, plan=body, highlights=PLACEHOLDER_HIGHLIGHTS)


def split_sections(text: str, *, log: Optional[logging.Logger] = None) -> Sections:
    """
    Carve the answer into title / plan / highlights.

    Each section anchor captures up to the next anchor found (or the end of
    the text); anchors that are missing leave their section empty. Without
    any anchor the layout decides: paragraphs, then lines, then the whole
    text as the plan.
    """
    log = log or logger
    sections = _split_by_anchors(text)
    if sections is not None:
        log.info(
            f"sections by anchor: title={len(sections.title)} plan={len(sections.plan)} "
            f"highlights={len(sections.highlights)}"
        )
        return sections
    log.info("no section anchors, splitting by layout")
    return _split_by_layout(text)

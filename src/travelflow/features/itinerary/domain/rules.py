from __future__ import annotations

import re
from typing import List, Optional

DEFAULT_DAY_COUNT = 3

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_NUMERIC = re.compile(r"^\d+(?:\.\d+)?$")


def _leading_int(text: str) -> Optional[int]:
    m = _LEADING_INT.match(text)
    return int(m.group(1)) if m else None


def parse_count(value: Optional[str], default: int = DEFAULT_DAY_COUNT) -> int:
    """
    Parse "N" or an inclusive range "N-M" and return N or max(N, M).
    Unparseable or non-positive input, on either side of a range, yields `default`.
    """
    if not value:
        return default
    text = str(value)
    if "-" in text:
        parts: List[int] = []
        for piece in text.split("-"):
            n = _leading_int(piece)
            if n is None or n <= 0:
                return default
            parts.append(n)
        return max(parts)
    n = _leading_int(text)
    return n if n is not None and n > 0 else default


def parse_day_count(days: Optional[str]) -> int:
    return parse_count(days, DEFAULT_DAY_COUNT)


def budget_label(budget: Optional[str]) -> str:
    amount = (budget or "").strip()
    if amount and _NUMERIC.match(amount):
        return f"预算约{amount}元人民币"
    return "预算不限"

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class StreamState:
    """
    Accumulation state for one ingestion call.

    `complete_response` is written at most once and `finished` only moves
    from False to True.
    """
    buffer: str = ""
    fragments: List[str] = field(default_factory=list)
    complete_response: Optional[str] = None
    delta_count: int = 0
    finished: bool = False

    @property
    def accumulated_text(self) -> str:
        return "".join(self.fragments)

    def append(self, fragment: str) -> None:
        self.fragments.append(fragment)

    def set_complete(self, text: str) -> bool:
        if self.complete_response is not None:
            return False
        self.complete_response = text
        return True

    def finish(self) -> None:
        self.finished = True

    @property
    def final_text(self) -> str:
        if self.complete_response:
            return self.complete_response
        return self.accumulated_text

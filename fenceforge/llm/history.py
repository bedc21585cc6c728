# fenceforge/llm/history.py
"""
Conversation history sent with each remote call.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from fenceforge.core.logging import log


USER = "user"
MODEL = "model"


@dataclass(frozen=True)
class Turn:
    role: str
    text: str

    def to_content(self) -> Dict[str, Any]:
        """Wire shape expected by the generative language API."""
        return {"role": self.role, "parts": [{"text": self.text}]}


class ChatHistory:
    """
    Ordered list of turns.

    ``preamble`` turns (the protocol instructions) are pinned and never
    trimmed. Everything after them is capped at ``max_turns`` entries,
    oldest dropped first.
    """

    def __init__(self, preamble: Optional[List[Turn]] = None, max_turns: Optional[int] = None):
        self.preamble: List[Turn] = list(preamble or [])
        self.turns: List[Turn] = []
        self.max_turns = max_turns

    def __len__(self) -> int:
        return len(self.turns)

    def append(self, role: str, text: str) -> None:
        self.turns.append(Turn(role, text))

    def checkpoint(self) -> int:
        return len(self.turns)

    def rollback(self, checkpoint: int) -> None:
        """Drop every turn appended since ``checkpoint``."""
        dropped = len(self.turns) - checkpoint
        if dropped > 0:
            del self.turns[checkpoint:]
            log("HISTORY", f"Rolled back {dropped} speculative turn(s)")

    def trim(self) -> None:
        if self.max_turns is not None and len(self.turns) > self.max_turns:
            self.turns = self.turns[-self.max_turns:]

    def clear(self) -> None:
        self.turns = []

    def as_contents(self) -> List[Dict[str, Any]]:
        return [t.to_content() for t in self.preamble + self.turns]

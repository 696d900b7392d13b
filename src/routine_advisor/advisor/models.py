"""Data structures produced by the chat orchestrator."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

BubbleRole = Literal["user", "assistant"]


@dataclass(frozen=True)
class Bubble:
    """One user-visible chat bubble.

    Bubbles are what the user sees; they are not the transcript. The routine
    request, for example, shows a short user bubble while the transcript
    carries the full product JSON.
    """

    role: BubbleRole
    text: str
    is_error: bool = False
    timestamp: datetime = field(default_factory=datetime.now, compare=False)


@dataclass
class AdvisorReply:
    """Outcome of one user action (generate routine or follow-up)."""

    bubbles: list[Bubble] = field(default_factory=list)
    content: str | None = None  # assistant reply, None if no request succeeded
    requested: bool = False  # whether the endpoint was called
    usage: dict[str, int] | None = None

    @property
    def ok(self) -> bool:
        return self.content is not None

    @property
    def errors(self) -> list[Bubble]:
        return [b for b in self.bubbles if b.is_error]

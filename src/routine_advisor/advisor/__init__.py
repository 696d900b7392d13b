"""Chat orchestration module.

Owns the transcript and the routine-generated gate; everything the chat
panel shows comes out of here as Bubbles.
"""

from .advisor import (
    EMPTY_SELECTION_MESSAGE,
    FOLLOWUP_ERROR_MESSAGE,
    ROUTINE_BUBBLE,
    ROUTINE_ERROR_MESSAGE,
    ROUTINE_REQUIRED_MESSAGE,
    ChatAdvisor,
    build_routine_request,
)
from .models import AdvisorReply, Bubble
from .transcript import Transcript

__all__ = [
    "AdvisorReply",
    "Bubble",
    "ChatAdvisor",
    "EMPTY_SELECTION_MESSAGE",
    "FOLLOWUP_ERROR_MESSAGE",
    "ROUTINE_BUBBLE",
    "ROUTINE_ERROR_MESSAGE",
    "ROUTINE_REQUIRED_MESSAGE",
    "Transcript",
    "build_routine_request",
]

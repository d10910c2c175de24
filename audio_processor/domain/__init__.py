"""Domain types and the session state machine."""

from .models import ProcessingMode, Session, SessionState
from .state_machine import (
    GenerationFailed,
    GenerationStarted,
    GenerationSucceeded,
    Reset,
    SessionEvent,
    TranscriptionFailed,
    TranscriptionSucceeded,
    transition,
)

__all__ = [
    "ProcessingMode",
    "Session",
    "SessionState",
    "SessionEvent",
    "TranscriptionSucceeded",
    "TranscriptionFailed",
    "GenerationStarted",
    "GenerationSucceeded",
    "GenerationFailed",
    "Reset",
    "transition",
]

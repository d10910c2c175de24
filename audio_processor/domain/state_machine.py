"""Explicit transition function for the upload → process → complete cycle.

The session is an immutable record; every event produces a new snapshot that
the caller must store and hand to the presentation layer itself:

    ready_to_upload --TranscriptionSucceeded--> ready_to_process
    ready_to_process --GenerationStarted--> processing
    processing --GenerationSucceeded--> complete
    processing --GenerationFailed--> ready_to_process   (transcription kept)
    ready_to_upload/ready_to_process --TranscriptionFailed--> ready_to_upload
    any --Reset--> ready_to_upload

A blank transcript counts as a failed transcription. Anything else raises
``InvalidTransitionError``.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Union

from audio_processor.errors import InvalidTransitionError

from .models import ProcessingMode, Session, SessionState

EMPTY_TRANSCRIPTION_MESSAGE = (
    "La transcripción falló o el audio estaba vacío. Por favor, inténtalo de nuevo."
)

_UPLOAD_STATES = frozenset({SessionState.READY_TO_UPLOAD, SessionState.READY_TO_PROCESS})


@dataclass(frozen=True)
class TranscriptionSucceeded:
    text: str


@dataclass(frozen=True)
class TranscriptionFailed:
    message: str


@dataclass(frozen=True)
class GenerationStarted:
    mode: ProcessingMode


@dataclass(frozen=True)
class GenerationSucceeded:
    document: str


@dataclass(frozen=True)
class GenerationFailed:
    message: str


@dataclass(frozen=True)
class Reset:
    pass


SessionEvent = Union[
    TranscriptionSucceeded,
    TranscriptionFailed,
    GenerationStarted,
    GenerationSucceeded,
    GenerationFailed,
    Reset,
]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _cleared(session: Session, error: str | None) -> Session:
    return replace(
        session,
        state=SessionState.READY_TO_UPLOAD,
        transcription=None,
        document=None,
        mode=None,
        error=error,
        updated_at=_now(),
    )


def _reject(session: Session, event: SessionEvent) -> InvalidTransitionError:
    return InvalidTransitionError(
        f"No se puede aplicar {type(event).__name__} en el estado {session.state.value}."
    )


def can_upload(session: Session) -> bool:
    return session.state in _UPLOAD_STATES


def can_generate(session: Session) -> bool:
    return session.state is SessionState.READY_TO_PROCESS


def transition(session: Session, event: SessionEvent) -> Session:
    """Return the snapshot that follows ``session`` after ``event``."""

    if isinstance(event, Reset):
        return _cleared(session, None)

    if isinstance(event, TranscriptionSucceeded):
        if session.state not in _UPLOAD_STATES:
            raise _reject(session, event)
        if not event.text.strip():
            return _cleared(session, EMPTY_TRANSCRIPTION_MESSAGE)
        return replace(
            session,
            state=SessionState.READY_TO_PROCESS,
            transcription=event.text,
            document=None,
            mode=None,
            error=None,
            updated_at=_now(),
        )

    if isinstance(event, TranscriptionFailed):
        if session.state not in _UPLOAD_STATES:
            raise _reject(session, event)
        return _cleared(session, event.message or EMPTY_TRANSCRIPTION_MESSAGE)

    if isinstance(event, GenerationStarted):
        if session.state is not SessionState.READY_TO_PROCESS:
            raise _reject(session, event)
        return replace(
            session,
            state=SessionState.PROCESSING,
            mode=event.mode,
            error=None,
            updated_at=_now(),
        )

    if isinstance(event, GenerationSucceeded):
        if session.state is not SessionState.PROCESSING:
            raise _reject(session, event)
        return replace(
            session,
            state=SessionState.COMPLETE,
            document=event.document,
            updated_at=_now(),
        )

    if isinstance(event, GenerationFailed):
        if session.state is not SessionState.PROCESSING:
            raise _reject(session, event)
        return replace(
            session,
            state=SessionState.READY_TO_PROCESS,
            document=None,
            error=event.message,
            updated_at=_now(),
        )

    raise _reject(session, event)


__all__ = [
    "EMPTY_TRANSCRIPTION_MESSAGE",
    "GenerationFailed",
    "GenerationStarted",
    "GenerationSucceeded",
    "Reset",
    "SessionEvent",
    "TranscriptionFailed",
    "TranscriptionSucceeded",
    "can_generate",
    "can_upload",
    "transition",
]

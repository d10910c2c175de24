from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from uuid import UUID, uuid4


class ProcessingMode(str, Enum):
    MEDICAL = "medical"
    MEETING = "meeting"
    SUMMARY = "summary"
    TRANSCRIPTION_ONLY = "transcription_only"
    CUSTOM = "custom"

    @property
    def label(self) -> str:
        """Display name shown to the user."""
        return _MODE_LABELS[self]

    @property
    def requires_instructions(self) -> bool:
        return self is ProcessingMode.CUSTOM


_MODE_LABELS = {
    ProcessingMode.MEDICAL: "Consulta Médica",
    ProcessingMode.MEETING: "Reunión de Trabajo",
    ProcessingMode.SUMMARY: "Resumen Simple",
    ProcessingMode.TRANSCRIPTION_ONLY: "Solo Transcripción",
    ProcessingMode.CUSTOM: "Personalizado",
}


class SessionState(str, Enum):
    READY_TO_UPLOAD = "ready_to_upload"
    READY_TO_PROCESS = "ready_to_process"
    PROCESSING = "processing"
    COMPLETE = "complete"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Session:
    """Immutable snapshot of one user's upload/process cycle.

    ``transcription`` is only set in READY_TO_PROCESS, PROCESSING and COMPLETE;
    ``document`` only in COMPLETE. New snapshots come from
    ``audio_processor.domain.state_machine.transition``.
    """

    id: UUID = field(default_factory=uuid4)
    state: SessionState = SessionState.READY_TO_UPLOAD
    transcription: str | None = None
    document: str | None = None
    error: str | None = None
    mode: ProcessingMode | None = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


__all__ = ["ProcessingMode", "SessionState", "Session"]

"""Schemas for session, processing-mode and document endpoints."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from audio_processor.domain.models import ProcessingMode, Session, SessionState


class SessionResponse(BaseModel):
    session_id: UUID
    state: SessionState
    transcription: Optional[str] = None
    document: Optional[str] = None
    error: Optional[str] = None
    mode: Optional[ProcessingMode] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_session(cls, session: Session) -> "SessionResponse":
        return cls(
            session_id=session.id,
            state=session.state,
            transcription=session.transcription,
            document=session.document,
            error=session.error,
            mode=session.mode,
            created_at=session.created_at,
            updated_at=session.updated_at,
        )


class GenerateDocumentRequest(BaseModel):
    mode: ProcessingMode = ProcessingMode.SUMMARY
    custom_instructions: Optional[str] = Field(default=None, max_length=10_000)
    append_transcription: bool = False

    @model_validator(mode="after")
    def require_custom_instructions(self) -> "GenerateDocumentRequest":
        if self.mode.requires_instructions and not (self.custom_instructions or "").strip():
            raise ValueError("custom_instructions is required when mode is 'custom'")
        return self


class ProcessingModeResponse(BaseModel):
    mode: ProcessingMode
    label: str
    requires_instructions: bool

    @classmethod
    def from_mode(cls, mode: ProcessingMode) -> "ProcessingModeResponse":
        return cls(
            mode=mode,
            label=mode.label,
            requires_instructions=mode.requires_instructions,
        )

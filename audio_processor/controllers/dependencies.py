"""Common FastAPI dependencies reused across controllers."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from audio_processor.application.use_cases import SessionUseCases
from audio_processor.config.settings import settings
from audio_processor.services import (
    DocumentGenerationClient,
    InMemorySessionRepository,
    TranscriptionClient,
    create_ai_service,
)


@lru_cache(maxsize=1)
def get_session_use_cases() -> SessionUseCases:
    """Return the process-wide use cases wired to the configured AI provider."""

    ai_service = create_ai_service(settings)
    return SessionUseCases(
        repository=InMemorySessionRepository(max_sessions=settings.max_sessions),
        transcription_client=TranscriptionClient(ai_service),
        generation_client=DocumentGenerationClient(ai_service),
    )


SessionUseCasesDep = Annotated[SessionUseCases, Depends(get_session_use_cases)]


__all__ = ["get_session_use_cases", "SessionUseCasesDep"]

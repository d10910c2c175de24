"""Session use cases: the boundary where client errors become session state.

Every public method returns the latest ``Session`` snapshot. Failures of the
transcription or generation clients never escape; they are recorded on the
session and the state falls back to the nearest safe state. Only caller
mistakes (unknown session, wrong state, busy session, invalid input) raise.
"""

from __future__ import annotations

import base64
import logging
from uuid import UUID

from audio_processor.application.interfaces import SessionRepositoryInterface
from audio_processor.domain.models import ProcessingMode, Session
from audio_processor.domain.state_machine import (
    GenerationFailed,
    GenerationStarted,
    GenerationSucceeded,
    Reset,
    SessionEvent,
    TranscriptionFailed,
    TranscriptionSucceeded,
    can_generate,
    can_upload,
    transition,
)
from audio_processor.errors import (
    GenerationFailedError,
    InvalidInputError,
    InvalidTransitionError,
    SessionBusyError,
    SessionNotFoundError,
    TranscriptionFailedError,
)
from audio_processor.services.document_generator import DocumentGenerationClient
from audio_processor.services.transcription import TranscriptionClient

logger = logging.getLogger(__name__)
transcript_logger = logging.getLogger("audio_processor.logs.transcript")


class SessionUseCases:
    """Drive one session through upload, processing and reset."""

    def __init__(
        self,
        repository: SessionRepositoryInterface,
        transcription_client: TranscriptionClient,
        generation_client: DocumentGenerationClient,
    ) -> None:
        self.repository = repository
        self.transcription_client = transcription_client
        self.generation_client = generation_client

    async def create(self) -> Session:
        session = await self.repository.add(Session())
        logger.info("Sesión creada session=%s", session.id)
        return session

    async def get(self, session_id: UUID) -> Session:
        session = await self.repository.get(session_id)
        if session is None:
            raise SessionNotFoundError()
        return session

    async def delete(self, session_id: UUID) -> None:
        if not await self.repository.delete(session_id):
            raise SessionNotFoundError()

    async def upload_audio(
        self,
        session_id: UUID,
        audio_bytes: bytes,
        mime_type: str,
    ) -> Session:
        """Transcribe the upload; READY_TO_PROCESS on success, READY_TO_UPLOAD otherwise."""

        session = await self.get(session_id)
        lock = self.repository.lock_for(session_id)
        if lock.locked():
            raise SessionBusyError()

        async with lock:
            if not can_upload(session):
                raise InvalidTransitionError(
                    "Reinicia la sesión antes de subir un nuevo audio."
                )

            audio_base64 = base64.b64encode(audio_bytes).decode("ascii")
            try:
                text = await self.transcription_client.transcribe(audio_base64, mime_type)
            except (TranscriptionFailedError, InvalidInputError) as exc:
                logger.warning("Transcripción fallida session=%s: %s", session_id, exc.message)
                event = TranscriptionFailed(exc.message)
            except Exception:
                logger.exception("Error inesperado al transcribir session=%s", session_id)
                event = TranscriptionFailed(TranscriptionFailedError.default_message)
            else:
                transcript_logger.info("session=%s | mime=%s | text=%s", session_id, mime_type, text)
                event = TranscriptionSucceeded(text)

            return await self._apply_if_unchanged(session, event)

    async def generate_document(
        self,
        session_id: UUID,
        mode: ProcessingMode,
        custom_instructions: str | None = None,
        append_transcription: bool = False,
    ) -> Session:
        """Generate the document; COMPLETE on success, back to READY_TO_PROCESS on failure."""

        session = await self.get(session_id)
        if mode.requires_instructions and not (custom_instructions or "").strip():
            raise InvalidInputError(
                "Las instrucciones personalizadas son obligatorias en el modo Personalizado."
            )

        lock = self.repository.lock_for(session_id)
        if lock.locked():
            raise SessionBusyError()

        async with lock:
            if not can_generate(session):
                raise InvalidTransitionError(
                    "No hay una transcripción lista para procesar."
                )

            session = await self.repository.save(transition(session, GenerationStarted(mode)))
            transcription = session.transcription or ""
            logger.info("Generando documento session=%s mode=%s", session_id, mode.value)

            try:
                document = await self.generation_client.generate(
                    transcription,
                    mode,
                    custom_instructions,
                    append_transcription,
                )
            except (GenerationFailedError, InvalidInputError) as exc:
                logger.warning("Generación fallida session=%s: %s", session_id, exc.message)
                event = GenerationFailed(exc.message)
            except Exception:
                logger.exception("Error inesperado al generar el documento session=%s", session_id)
                event = GenerationFailed(GenerationFailedError.default_message)
            else:
                event = GenerationSucceeded(document)

            return await self._apply_if_unchanged(session, event)

    async def reset(self, session_id: UUID) -> Session:
        """Return to READY_TO_UPLOAD unconditionally, even with a request in flight."""

        session = await self.get(session_id)
        logger.info("Sesión reiniciada session=%s", session_id)
        return await self.repository.save(transition(session, Reset()))

    async def _apply_if_unchanged(self, expected: Session, event: SessionEvent) -> Session:
        # A reset while the request was in flight replaces the stored snapshot;
        # the late result is then dropped.
        current = await self.get(expected.id)
        if current is not expected:
            logger.info(
                "Resultado descartado: la sesión cambió durante la solicitud session=%s",
                expected.id,
            )
            return current
        return await self.repository.save(transition(current, event))

    async def document(self, session_id: UUID) -> str:
        """Return the finished document; exporting never changes state."""

        session = await self.get(session_id)
        if session.document is None:
            raise InvalidTransitionError("Todavía no hay un documento generado.")
        return session.document


__all__ = ["SessionUseCases"]

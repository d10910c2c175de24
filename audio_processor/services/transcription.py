"""Transcription client: base64 audio in, plain text out."""

from __future__ import annotations

import logging

from audio_processor.application.interfaces import (
    AiServiceError,
    GenerativeAiServiceInterface,
)
from audio_processor.errors import InvalidInputError, TranscriptionFailedError
from audio_processor.telemetry import record_transcription

logger = logging.getLogger("audio_processor.pipeline")

TRANSCRIPTION_INSTRUCTION = (
    "Transcribe this audio file completely and accurately. Provide only the "
    "transcribed text, without any introductory phrases or summaries."
)


class TranscriptionClient:
    """Single-shot transcription over the configured AI service; never retries."""

    def __init__(self, ai_service: GenerativeAiServiceInterface) -> None:
        self._ai_service = ai_service

    async def transcribe(self, audio_base64: str, mime_type: str) -> str:
        if not audio_base64 or not mime_type:
            raise InvalidInputError("Faltan los datos de audio o el tipo MIME.")

        try:
            text = await self._ai_service.transcribe_audio(
                audio_base64,
                mime_type,
                TRANSCRIPTION_INSTRUCTION,
            )
        except AiServiceError as exc:
            record_transcription("error")
            logger.exception("Fallo en transcripción", exc_info=exc)
            raise TranscriptionFailedError(
                "No se pudo transcribir el archivo de audio con el servicio de IA."
            ) from exc

        if not text or not text.strip():
            record_transcription("empty")
            logger.warning("El servicio de IA devolvió una transcripción vacía")
            raise TranscriptionFailedError(
                "La transcripción falló o el audio estaba vacío. Por favor, inténtalo de nuevo."
            )

        record_transcription("success")
        return text


__all__ = ["TRANSCRIPTION_INSTRUCTION", "TranscriptionClient"]

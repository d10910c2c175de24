"""Document generation client: transcription + mode in, document text out."""

from __future__ import annotations

import logging
import time

from audio_processor.application.interfaces import (
    AiServiceError,
    GenerativeAiServiceInterface,
)
from audio_processor.domain.models import ProcessingMode
from audio_processor.errors import GenerationFailedError, InvalidInputError
from audio_processor.telemetry import record_generation

from .prompt_builder import build_prompt

logger = logging.getLogger("audio_processor.pipeline")

TRANSCRIPTION_APPENDIX_DELIMITER = "\n\n---\n\n## Transcripción Completa del Audio\n\n"


def _truncate(value: str, max_length: int = 500) -> str:
    if len(value) <= max_length:
        return value
    return value[: max_length - 3] + "..."


class DocumentGenerationClient:
    """Render the mode's prompt and ask the AI service for the document."""

    def __init__(self, ai_service: GenerativeAiServiceInterface) -> None:
        self._ai_service = ai_service

    async def generate(
        self,
        transcription: str,
        mode: ProcessingMode,
        custom_instructions: str | None = None,
        append_transcription: bool = False,
    ) -> str:
        """Return the generated document; zero or one network request."""

        if not transcription:
            return ""

        if mode is ProcessingMode.TRANSCRIPTION_ONLY:
            record_generation(mode.value, "passthrough")
            return transcription

        if mode.requires_instructions and not (custom_instructions or "").strip():
            raise InvalidInputError(
                "Las instrucciones personalizadas son obligatorias en el modo Personalizado."
            )

        prompt = build_prompt(mode, transcription, custom_instructions)
        logger.info("Prompt generado mode=%s\nPROMPT> %s", mode.value, _truncate(prompt))

        started = time.perf_counter()
        try:
            generated_text = await self._ai_service.generate_text(prompt)
        except AiServiceError as exc:
            record_generation(mode.value, "error", time.perf_counter() - started)
            logger.exception("Error generando contenido mode=%s", mode.value, exc_info=exc)
            raise GenerationFailedError(
                "No se pudo procesar la transcripción con el servicio de IA."
            ) from exc

        if not generated_text or not generated_text.strip():
            record_generation(mode.value, "empty", time.perf_counter() - started)
            raise GenerationFailedError(
                "El servicio de IA devolvió un documento vacío."
            )

        record_generation(mode.value, "success", time.perf_counter() - started)

        if append_transcription:
            generated_text = f"{generated_text}{TRANSCRIPTION_APPENDIX_DELIMITER}{transcription}"

        return generated_text


__all__ = ["DocumentGenerationClient", "TRANSCRIPTION_APPENDIX_DELIMITER"]

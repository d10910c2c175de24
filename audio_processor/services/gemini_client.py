"""Thin Gemini client wrapper for transcription and document generation."""

from __future__ import annotations

import base64
import binascii
import logging

from google import genai
from google.genai import types

from audio_processor.application.interfaces import (
    AiServiceError,
    GenerativeAiServiceInterface,
)
from audio_processor.config.settings import GeminiConfig

logger = logging.getLogger(__name__)


class GeminiAiService(GenerativeAiServiceInterface):
    """Call Gemini models through the google-genai async client."""

    def __init__(self, config: GeminiConfig, client: genai.Client | None = None) -> None:
        self._model = config.model
        self._temperature = config.temperature
        if client is None:
            api_key = config.api_key.get_secret_value() if config.api_key else None
            client = genai.Client(api_key=api_key)
        self._client = client

    def _config(self) -> types.GenerateContentConfig | None:
        if self._temperature is None:
            return None
        return types.GenerateContentConfig(temperature=self._temperature)

    async def transcribe_audio(
        self,
        audio_base64: str,
        mime_type: str,
        instruction: str,
    ) -> str:
        """Send inline audio plus the instruction and return the text output."""

        try:
            audio_bytes = base64.b64decode(audio_base64, validate=True)
        except (binascii.Error, ValueError) as exc:
            raise AiServiceError(f"Audio base64 inválido: {exc}") from exc

        contents = [
            types.Part.from_bytes(data=audio_bytes, mime_type=mime_type),
            instruction,
        ]
        logger.debug(
            "Enviando audio a Gemini model=%s bytes=%s mime=%s",
            self._model,
            len(audio_bytes),
            mime_type,
        )
        return await self._generate(contents)

    async def generate_text(self, prompt: str) -> str:
        return await self._generate(prompt)

    async def _generate(self, contents) -> str:
        try:
            response = await self._client.aio.models.generate_content(
                model=self._model,
                contents=contents,
                config=self._config(),
            )
        except Exception as exc:  # pragma: no cover - external dependency
            raise AiServiceError(str(exc)) from exc

        return (response.text or "").strip()


__all__ = ["GeminiAiService"]

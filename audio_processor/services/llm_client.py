"""Bedrock-backed implementation of the generative-AI service."""

from __future__ import annotations

import base64
import logging
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from audio_processor.application.interfaces import (
    AiServiceError,
    GenerativeAiServiceInterface,
)
from audio_processor.config.settings import BedrockConfig, TranscribeConfig
from audio_processor.services.aws import create_boto3_client, decode_bedrock_api_key
from audio_processor.services.transcribe import AmazonTranscribeService

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "Eres un asistente que redacta documentos estructurados en español a partir de "
    "transcripciones de audio. Responde solo con el documento solicitado."
)


class LlmInvocationError(AiServiceError):
    """Raised when the Bedrock invocation fails."""


class BedrockLlmClient:
    """Invoke Amazon Bedrock models with standard configuration."""

    def __init__(self, config: BedrockConfig, client=None) -> None:
        self._config = config
        if client is None:
            credentials = decode_bedrock_api_key(
                config.api_key.get_secret_value() if config.api_key else None
            )
            client = create_boto3_client(
                "bedrock-runtime",
                region_name=config.region,
                credentials=credentials,
            )
        self._client = client

    async def invoke(
        self,
        *,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
    ) -> str | None:
        """Run a Bedrock `converse` call and return the aggregate text output."""

        inference_cfg = {
            "maxTokens": max_tokens or self._config.max_tokens,
            "temperature": (
                temperature if temperature is not None else self._config.temperature
            ),
            "topP": top_p if top_p is not None else self._config.top_p,
        }

        def _call() -> str:
            response = self._client.converse(
                modelId=self._config.model_id,
                system=[{"text": system_prompt}],
                messages=[{"role": "user", "content": [{"text": user_prompt}]}],
                inferenceConfig=inference_cfg,
            )
            content_blocks = (
                response.get("output", {})
                .get("message", {})
                .get("content", [])
            )
            texts = [block.get("text", "") for block in content_blocks if block.get("text")]
            return "\n".join(texts).strip()

        try:
            result = await run_in_threadpool(_call)
        except Exception as exc:  # pragma: no cover - external dependency
            raise LlmInvocationError(str(exc)) from exc

        return result or None


class BedrockAiService(GenerativeAiServiceInterface):
    """Generate with Bedrock and transcribe with Amazon Transcribe streaming."""

    def __init__(
        self,
        bedrock_config: BedrockConfig,
        transcribe_config: TranscribeConfig,
        *,
        llm_client: Optional[BedrockLlmClient] = None,
        transcribe_service: Optional[AmazonTranscribeService] = None,
    ) -> None:
        credentials = decode_bedrock_api_key(
            bedrock_config.api_key.get_secret_value() if bedrock_config.api_key else None
        )
        self._llm = llm_client or BedrockLlmClient(bedrock_config)
        self._transcriber = transcribe_service or AmazonTranscribeService(
            transcribe_config, credentials=credentials
        )

    async def transcribe_audio(
        self,
        audio_base64: str,
        mime_type: str,
        instruction: str,
    ) -> str:
        # Amazon Transcribe takes no free-form instruction; it always returns plain text.
        try:
            audio_bytes = base64.b64decode(audio_base64, validate=True)
        except ValueError as exc:
            raise AiServiceError(f"Audio base64 inválido: {exc}") from exc
        logger.debug("Transcribiendo con Amazon Transcribe mime=%s", mime_type)
        return await self._transcriber.transcribe(audio_bytes)

    async def generate_text(self, prompt: str) -> str:
        result = await self._llm.invoke(system_prompt=_SYSTEM_PROMPT, user_prompt=prompt)
        return result or ""


__all__ = ["BedrockAiService", "BedrockLlmClient", "LlmInvocationError"]

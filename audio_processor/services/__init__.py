"""Service layer helpers for the remote AI integrations."""

from audio_processor.application.interfaces import GenerativeAiServiceInterface
from audio_processor.config.settings import Settings

from .document_generator import TRANSCRIPTION_APPENDIX_DELIMITER, DocumentGenerationClient
from .gemini_client import GeminiAiService
from .llm_client import BedrockAiService, BedrockLlmClient, LlmInvocationError
from .prompt_builder import build_prompt
from .session_memory import InMemorySessionRepository
from .transcribe import AmazonTranscribeService, TranscriptionError
from .transcription import TRANSCRIPTION_INSTRUCTION, TranscriptionClient


def create_ai_service(config: Settings) -> GenerativeAiServiceInterface:
    """Build the AI service selected by ``config.ai_provider``."""

    if config.ai_provider == "bedrock":
        return BedrockAiService(config.bedrock, config.transcribe)
    return GeminiAiService(config.gemini)


__all__ = [
    "AmazonTranscribeService",
    "BedrockAiService",
    "BedrockLlmClient",
    "DocumentGenerationClient",
    "GeminiAiService",
    "InMemorySessionRepository",
    "LlmInvocationError",
    "TRANSCRIPTION_APPENDIX_DELIMITER",
    "TRANSCRIPTION_INSTRUCTION",
    "TranscriptionClient",
    "TranscriptionError",
    "build_prompt",
    "create_ai_service",
]

"""Shared fixtures: fake AI service, wired use cases and a test client."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# Settings are read at import time; configure the environment first.
_LOG_DIR = Path(tempfile.mkdtemp(prefix="audio-processor-tests-"))
os.environ["AI_PROVIDER"] = "gemini"
os.environ.setdefault("API_KEY", "test-api-key")
os.environ["LOG_FILE"] = str(_LOG_DIR / "app.log")
os.environ["PIPELINE_LOG_FILE"] = str(_LOG_DIR / "pipeline.log")
os.environ["TRANSCRIPT_LOG_FILE"] = str(_LOG_DIR / "transcripts.log")

from fastapi.testclient import TestClient  # noqa: E402

from audio_processor.application.interfaces import (  # noqa: E402
    AiServiceError,
    GenerativeAiServiceInterface,
)
from audio_processor.application.use_cases import SessionUseCases  # noqa: E402
from audio_processor.controllers.dependencies import get_session_use_cases  # noqa: E402
from audio_processor.main import app  # noqa: E402
from audio_processor.services import (  # noqa: E402
    DocumentGenerationClient,
    InMemorySessionRepository,
    TranscriptionClient,
)

SAMPLE_TRANSCRIPT = "Patient reports headache for three days."
SAMPLE_REPORT = "## Informe Médico\n\n**Motivo de la Consulta:** Cefalea de tres días."


class FakeAiService(GenerativeAiServiceInterface):
    """Canned AI service that records every call it receives."""

    def __init__(
        self,
        transcript: str = SAMPLE_TRANSCRIPT,
        document: str = SAMPLE_REPORT,
    ) -> None:
        self.transcript = transcript
        self.document = document
        self.transcribe_error: Exception | None = None
        self.generate_error: Exception | None = None
        self.transcribe_calls: list[tuple[str, str, str]] = []
        self.prompts: list[str] = []

    async def transcribe_audio(self, audio_base64: str, mime_type: str, instruction: str) -> str:
        self.transcribe_calls.append((audio_base64, mime_type, instruction))
        if self.transcribe_error is not None:
            raise self.transcribe_error
        return self.transcript

    async def generate_text(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.generate_error is not None:
            raise self.generate_error
        return self.document


@pytest.fixture
def fake_ai() -> FakeAiService:
    return FakeAiService()


@pytest.fixture
def failing_error() -> AiServiceError:
    return AiServiceError("503 Service Unavailable")


@pytest.fixture
def use_cases(fake_ai: FakeAiService) -> SessionUseCases:
    return SessionUseCases(
        repository=InMemorySessionRepository(max_sessions=10),
        transcription_client=TranscriptionClient(fake_ai),
        generation_client=DocumentGenerationClient(fake_ai),
    )


@pytest.fixture
def client(use_cases: SessionUseCases):
    app.dependency_overrides[get_session_use_cases] = lambda: use_cases
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

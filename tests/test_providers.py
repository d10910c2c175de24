"""Provider adapters exercised against fake SDK clients."""

from __future__ import annotations

import asyncio
import base64
import subprocess
from types import SimpleNamespace

import pytest
from amazon_transcribe.model import Alternative, Result, Transcript, TranscriptEvent
from pydantic import SecretStr

from audio_processor.application.interfaces import AiServiceError
from audio_processor.application.use_cases import SessionUseCases
from audio_processor.config.settings import BedrockConfig, GeminiConfig, TranscribeConfig
from audio_processor.domain.models import SessionState
from audio_processor.services import (
    AmazonTranscribeService,
    BedrockAiService,
    BedrockLlmClient,
    DocumentGenerationClient,
    GeminiAiService,
    InMemorySessionRepository,
    LlmInvocationError,
    TranscriptionClient,
    TranscriptionError,
)
from audio_processor.services import transcribe as transcribe_module


class FakeGeminiModels:
    def __init__(self, text="  texto  ", error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return SimpleNamespace(text=self.text)


def _gemini(models: FakeGeminiModels, **overrides) -> GeminiAiService:
    config = GeminiConfig(_env_file=None, API_KEY="k", **overrides)
    return GeminiAiService(config, client=SimpleNamespace(aio=SimpleNamespace(models=models)))


def test_gemini_sends_inline_audio_and_instruction() -> None:
    models = FakeGeminiModels()
    service = _gemini(models)
    audio = base64.b64encode(b"mp3-bytes").decode()

    text = asyncio.run(service.transcribe_audio(audio, "audio/mpeg", "Transcribe this"))

    assert text == "texto"
    call = models.calls[0]
    assert call["model"] == "gemini-2.5-flash"
    part, instruction = call["contents"]
    assert part.inline_data.data == b"mp3-bytes"
    assert part.inline_data.mime_type == "audio/mpeg"
    assert instruction == "Transcribe this"
    assert call["config"] is None


def test_gemini_rejects_malformed_base64() -> None:
    models = FakeGeminiModels()

    with pytest.raises(AiServiceError):
        asyncio.run(_gemini(models).transcribe_audio("###", "audio/mpeg", "x"))

    assert models.calls == []


def test_gemini_wraps_sdk_errors_and_passes_temperature() -> None:
    models = FakeGeminiModels(error=RuntimeError("quota exceeded"))
    service = _gemini(models, GEMINI_TEMPERATURE=0.3)

    with pytest.raises(AiServiceError, match="quota exceeded"):
        asyncio.run(service.generate_text("prompt"))

    assert models.calls[0]["config"].temperature == 0.3


def test_gemini_none_text_becomes_empty_string() -> None:
    assert asyncio.run(_gemini(FakeGeminiModels(text=None)).generate_text("p")) == ""


class FakeBedrockRuntime:
    def __init__(self, blocks=None, error=None):
        self.blocks = blocks if blocks is not None else [{"text": "Documento"}]
        self.error = error
        self.requests = []

    def converse(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return {"output": {"message": {"content": self.blocks}}}


def _bedrock_config() -> BedrockConfig:
    config = BedrockConfig(_env_file=None)
    config.api_key = SecretStr(base64.b64encode(b"AKIA:secret").decode())
    return config


def test_bedrock_client_joins_text_blocks() -> None:
    runtime = FakeBedrockRuntime(blocks=[{"text": "Uno"}, {"image": {}}, {"text": "Dos"}])
    client = BedrockLlmClient(_bedrock_config(), client=runtime)

    result = asyncio.run(client.invoke(system_prompt="sys", user_prompt="hola"))

    assert result == "Uno\nDos"
    request = runtime.requests[0]
    assert request["modelId"] == "amazon.nova-lite-v1:0"
    assert request["system"] == [{"text": "sys"}]
    assert request["inferenceConfig"]["maxTokens"] == 4096


def test_bedrock_client_wraps_errors() -> None:
    client = BedrockLlmClient(_bedrock_config(), client=FakeBedrockRuntime(error=RuntimeError("throttled")))

    with pytest.raises(LlmInvocationError):
        asyncio.run(client.invoke(system_prompt="sys", user_prompt="hola"))


class FakeTranscriber:
    def __init__(self):
        self.received = []

    async def transcribe(self, audio_bytes: bytes) -> str:
        self.received.append(audio_bytes)
        return "hola mundo"


def test_bedrock_service_routes_audio_and_prompts() -> None:
    runtime = FakeBedrockRuntime()
    transcriber = FakeTranscriber()
    config = _bedrock_config()
    service = BedrockAiService(
        config,
        TranscribeConfig(_env_file=None),
        llm_client=BedrockLlmClient(config, client=runtime),
        transcribe_service=transcriber,
    )
    audio = base64.b64encode(b"mp3").decode()

    transcript = asyncio.run(service.transcribe_audio(audio, "audio/mpeg", "ignored"))
    document = asyncio.run(service.generate_text("Resume esto"))

    assert transcript == "hola mundo"
    assert transcriber.received == [b"mp3"]
    assert document == "Documento"
    assert runtime.requests[0]["messages"][0]["content"] == [{"text": "Resume esto"}]


def test_bedrock_service_empty_output_is_empty_string() -> None:
    config = _bedrock_config()
    service = BedrockAiService(
        config,
        TranscribeConfig(_env_file=None),
        llm_client=BedrockLlmClient(config, client=FakeBedrockRuntime(blocks=[])),
        transcribe_service=FakeTranscriber(),
    )

    assert asyncio.run(service.generate_text("p")) == ""


class FakeInputStream:
    def __init__(self):
        self.chunks = []
        self.ended = False

    async def send_audio_event(self, audio_chunk: bytes) -> None:
        self.chunks.append(audio_chunk)

    async def end_stream(self) -> None:
        self.ended = True


class FakeOutputStream:
    def __init__(self, events):
        self._events = list(events)

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for event in self._events:
            yield event


class FakeStreamingClient:
    def __init__(self, events=(), error=None):
        self.input_stream = FakeInputStream()
        self.events = events
        self.error = error
        self.requests = []

    async def start_stream_transcription(self, **kwargs):
        self.requests.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(
            input_stream=self.input_stream,
            output_stream=FakeOutputStream(self.events),
        )


def _transcript_event(text: str, partial: bool) -> TranscriptEvent:
    return TranscriptEvent(
        transcript=Transcript(
            results=[Result(is_partial=partial, alternatives=[Alternative(transcript=text, items=[], entities=[])])]
        )
    )


@pytest.fixture
def fake_ffmpeg(monkeypatch: pytest.MonkeyPatch):
    commands = []

    def run(command, **kwargs):
        commands.append(command)
        return SimpleNamespace(stdout=b"\x01\x02" * 5000)

    monkeypatch.setattr(transcribe_module.subprocess, "run", run)
    return commands


def test_transcribe_streams_pcm_and_keeps_final_results(fake_ffmpeg) -> None:
    client = FakeStreamingClient(
        events=[
            _transcript_event("hola", partial=True),
            _transcript_event("hola doctor", partial=False),
            _transcript_event("me duele la cabeza", partial=False),
        ]
    )
    service = AmazonTranscribeService(TranscribeConfig(_env_file=None), client=client)

    text = asyncio.run(service.transcribe(b"mp3-bytes"))

    assert text == "hola doctor me duele la cabeza"
    assert b"".join(client.input_stream.chunks) == b"\x01\x02" * 5000
    assert len(client.input_stream.chunks) == 2
    assert client.input_stream.ended is True
    assert client.requests[0]["language_code"] == "es-US"
    assert client.requests[0]["media_encoding"] == "pcm"
    assert "16000" in fake_ffmpeg[0]


def test_transcribe_rejects_empty_audio() -> None:
    client = FakeStreamingClient()
    service = AmazonTranscribeService(TranscribeConfig(_env_file=None), client=client)

    with pytest.raises(TranscriptionError):
        asyncio.run(service.transcribe(b""))

    assert client.requests == []


def test_ffmpeg_failure_becomes_transcription_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def run(command, **kwargs):
        raise subprocess.CalledProcessError(1, command, stderr=b"Invalid data found")

    monkeypatch.setattr(transcribe_module.subprocess, "run", run)
    client = FakeStreamingClient()
    service = AmazonTranscribeService(TranscribeConfig(_env_file=None), client=client)

    with pytest.raises(TranscriptionError, match="Invalid data found"):
        asyncio.run(service.transcribe(b"not-an-mp3"))

    assert client.requests == []


def test_stream_start_failure_becomes_transcription_error(fake_ffmpeg) -> None:
    client = FakeStreamingClient(error=ConnectionError("endpoint unreachable"))
    service = AmazonTranscribeService(TranscribeConfig(_env_file=None), client=client)

    with pytest.raises(TranscriptionError, match="endpoint unreachable"):
        asyncio.run(service.transcribe(b"mp3-bytes"))


def test_stream_start_failure_lands_on_session(fake_ffmpeg) -> None:
    client = FakeStreamingClient(error=ConnectionError("endpoint unreachable"))
    config = _bedrock_config()
    service = BedrockAiService(
        config,
        TranscribeConfig(_env_file=None),
        llm_client=BedrockLlmClient(config, client=FakeBedrockRuntime()),
        transcribe_service=AmazonTranscribeService(TranscribeConfig(_env_file=None), client=client),
    )
    use_cases = SessionUseCases(
        repository=InMemorySessionRepository(),
        transcription_client=TranscriptionClient(service),
        generation_client=DocumentGenerationClient(service),
    )

    async def scenario():
        session = await use_cases.create()
        return await use_cases.upload_audio(session.id, b"mp3-bytes", "audio/mpeg")

    session = asyncio.run(scenario())

    assert session.state is SessionState.READY_TO_UPLOAD
    assert session.error

"""Contract tests for the transcription and document generation clients."""

from __future__ import annotations

import asyncio

import pytest
from conftest import SAMPLE_REPORT, SAMPLE_TRANSCRIPT, FakeAiService

from audio_processor.domain.models import ProcessingMode
from audio_processor.errors import (
    GenerationFailedError,
    InvalidInputError,
    TranscriptionFailedError,
)
from audio_processor.services import (
    TRANSCRIPTION_APPENDIX_DELIMITER,
    TRANSCRIPTION_INSTRUCTION,
    DocumentGenerationClient,
    TranscriptionClient,
    build_prompt,
)


def test_transcribe_sends_audio_with_fixed_instruction(fake_ai: FakeAiService) -> None:
    text = asyncio.run(TranscriptionClient(fake_ai).transcribe("QUJD", "audio/mpeg"))

    assert text == SAMPLE_TRANSCRIPT
    assert fake_ai.transcribe_calls == [("QUJD", "audio/mpeg", TRANSCRIPTION_INSTRUCTION)]


@pytest.mark.parametrize(("audio", "mime"), [("", "audio/mpeg"), ("QUJD", ""), ("", "")])
def test_transcribe_rejects_missing_input(fake_ai: FakeAiService, audio: str, mime: str) -> None:
    with pytest.raises(InvalidInputError):
        asyncio.run(TranscriptionClient(fake_ai).transcribe(audio, mime))

    assert fake_ai.transcribe_calls == []


@pytest.mark.parametrize("blank", ["", "   ", "\n"])
def test_blank_transcript_is_a_failure(fake_ai: FakeAiService, blank: str) -> None:
    fake_ai.transcript = blank

    with pytest.raises(TranscriptionFailedError):
        asyncio.run(TranscriptionClient(fake_ai).transcribe("QUJD", "audio/mpeg"))


def test_service_error_becomes_transcription_failed(fake_ai: FakeAiService, failing_error) -> None:
    fake_ai.transcribe_error = failing_error

    with pytest.raises(TranscriptionFailedError) as excinfo:
        asyncio.run(TranscriptionClient(fake_ai).transcribe("QUJD", "audio/mpeg"))

    assert excinfo.value.__cause__ is failing_error
    assert len(fake_ai.transcribe_calls) == 1


def test_transcription_only_returns_input_without_network(fake_ai: FakeAiService) -> None:
    document = asyncio.run(
        DocumentGenerationClient(fake_ai).generate(
            SAMPLE_TRANSCRIPT, ProcessingMode.TRANSCRIPTION_ONLY, None, False
        )
    )

    assert document == SAMPLE_TRANSCRIPT
    assert fake_ai.prompts == []


def test_generate_sends_rendered_prompt(fake_ai: FakeAiService) -> None:
    document = asyncio.run(
        DocumentGenerationClient(fake_ai).generate(SAMPLE_TRANSCRIPT, ProcessingMode.MEDICAL)
    )

    assert document == SAMPLE_REPORT
    assert fake_ai.prompts == [build_prompt(ProcessingMode.MEDICAL, SAMPLE_TRANSCRIPT)]


def test_generate_appends_transcription_after_delimiter(fake_ai: FakeAiService) -> None:
    fake_ai.document = "### Puntos Clave\n- Cefalea"

    document = asyncio.run(
        DocumentGenerationClient(fake_ai).generate(
            SAMPLE_TRANSCRIPT, ProcessingMode.SUMMARY, None, True
        )
    )

    assert document.endswith(SAMPLE_TRANSCRIPT)
    assert document == f"### Puntos Clave\n- Cefalea{TRANSCRIPTION_APPENDIX_DELIMITER}{SAMPLE_TRANSCRIPT}"


def test_transcription_only_ignores_append_flag(fake_ai: FakeAiService) -> None:
    document = asyncio.run(
        DocumentGenerationClient(fake_ai).generate(
            SAMPLE_TRANSCRIPT, ProcessingMode.TRANSCRIPTION_ONLY, None, True
        )
    )

    assert document == SAMPLE_TRANSCRIPT


@pytest.mark.parametrize("instructions", [None, "", "   "])
def test_custom_mode_requires_instructions_before_network(
    fake_ai: FakeAiService, instructions
) -> None:
    with pytest.raises(InvalidInputError):
        asyncio.run(
            DocumentGenerationClient(fake_ai).generate(
                SAMPLE_TRANSCRIPT, ProcessingMode.CUSTOM, instructions
            )
        )

    assert fake_ai.prompts == []


def test_custom_mode_with_instructions_calls_service(fake_ai: FakeAiService) -> None:
    asyncio.run(
        DocumentGenerationClient(fake_ai).generate(
            SAMPLE_TRANSCRIPT, ProcessingMode.CUSTOM, "Escribe un correo."
        )
    )

    assert "Escribe un correo." in fake_ai.prompts[0]


def test_empty_transcription_short_circuits(fake_ai: FakeAiService) -> None:
    document = asyncio.run(DocumentGenerationClient(fake_ai).generate("", ProcessingMode.MEDICAL))

    assert document == ""
    assert fake_ai.prompts == []


def test_service_error_becomes_generation_failed(fake_ai: FakeAiService, failing_error) -> None:
    fake_ai.generate_error = failing_error

    with pytest.raises(GenerationFailedError):
        asyncio.run(
            DocumentGenerationClient(fake_ai).generate(SAMPLE_TRANSCRIPT, ProcessingMode.MEETING)
        )

    assert len(fake_ai.prompts) == 1


def test_empty_document_is_a_generation_failure(fake_ai: FakeAiService) -> None:
    fake_ai.document = "  "

    with pytest.raises(GenerationFailedError):
        asyncio.run(
            DocumentGenerationClient(fake_ai).generate(SAMPLE_TRANSCRIPT, ProcessingMode.SUMMARY)
        )

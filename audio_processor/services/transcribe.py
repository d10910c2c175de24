"""Amazon Transcribe integration helpers using the Streaming API."""

from __future__ import annotations

import asyncio
import logging
import os
import subprocess
import tempfile

from amazon_transcribe.auth import StaticCredentialResolver
from amazon_transcribe.client import TranscribeStreamingClient
from amazon_transcribe.handlers import TranscriptResultStreamHandler
from amazon_transcribe.model import TranscriptEvent
from fastapi.concurrency import run_in_threadpool

from audio_processor.application.interfaces import AiServiceError
from audio_processor.config.settings import TranscribeConfig

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192


class TranscriptionError(AiServiceError):
    """Raised when Amazon Transcribe fails to process audio successfully."""


class AmazonTranscribeService:
    """Stream MP3 audio (converted to PCM via ffmpeg) to Amazon Transcribe."""

    def __init__(
        self,
        config: TranscribeConfig,
        credentials: tuple[str, str] | None = None,
        client=None,
    ) -> None:
        self._language_code = config.language_code
        self._media_sample_rate_hz = config.media_sample_rate_hz
        if client is None:
            resolver = None
            if credentials:
                resolver = StaticCredentialResolver(
                    access_key_id=credentials[0],
                    secret_access_key=credentials[1],
                )
            client = TranscribeStreamingClient(
                region=config.region,
                credential_resolver=resolver,
            )
        self._client = client

    async def transcribe(self, audio_bytes: bytes) -> str:
        """Stream audio to Transcribe and return the full transcript."""

        if not audio_bytes:
            raise TranscriptionError("El archivo de audio está vacío.")

        pcm_data = await run_in_threadpool(self._convert_to_pcm, audio_bytes)

        try:
            stream = await self._client.start_stream_transcription(
                language_code=self._language_code,
                media_sample_rate_hz=self._media_sample_rate_hz,
                media_encoding="pcm",
            )
            handler = _TranscriptCollector(stream.output_stream)
            await asyncio.gather(self._send_audio(stream, pcm_data), handler.handle_events())
        except Exception as exc:
            logger.error("Fallo en la transcripción en streaming: %s", exc)
            raise TranscriptionError(f"Streaming transcription failed: {exc}") from exc

        logger.info("Transcripción completa. Longitud: %s", len(handler.transcript))
        return handler.transcript.strip()

    @staticmethod
    async def _send_audio(stream, pcm_data: bytes) -> None:
        for offset in range(0, len(pcm_data), _CHUNK_SIZE):
            await stream.input_stream.send_audio_event(
                audio_chunk=pcm_data[offset : offset + _CHUNK_SIZE]
            )
        await stream.input_stream.end_stream()

    def _convert_to_pcm(self, audio_bytes: bytes) -> bytes:
        """Convert input audio to raw PCM s16le via ffmpeg using a temporary file."""

        with tempfile.NamedTemporaryFile(delete=False, suffix=".mp3") as tmp_file:
            tmp_file.write(audio_bytes)
            tmp_path = tmp_file.name

        try:
            process = subprocess.run(
                [
                    "ffmpeg",
                    "-y",
                    "-i", tmp_path,
                    "-f", "s16le",
                    "-ac", "1",
                    "-ar", str(self._media_sample_rate_hz),
                    "pipe:1",
                ],
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                check=True,
            )
            return process.stdout
        except (OSError, subprocess.CalledProcessError) as exc:
            stderr = getattr(exc, "stderr", None)
            error_msg = stderr.decode("utf-8", errors="replace") if stderr else str(exc)
            logger.error("ffmpeg failed. stderr: %s", error_msg)
            raise TranscriptionError(f"ffmpeg failed to convert audio to PCM: {error_msg}") from exc
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)


class _TranscriptCollector(TranscriptResultStreamHandler):
    def __init__(self, transcript_result_stream):
        super().__init__(transcript_result_stream)
        self.transcript = ""

    async def handle_transcript_event(self, transcript_event: TranscriptEvent):
        for result in transcript_event.transcript.results:
            if result.is_partial:
                continue
            for alt in result.alternatives:
                self.transcript += alt.transcript + " "


__all__ = ["AmazonTranscribeService", "TranscriptionError"]

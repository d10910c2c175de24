"""Upload ingestion helpers: content-type checks and size limits."""

from __future__ import annotations

import mimetypes
from typing import Final

from fastapi import HTTPException, UploadFile, status

MP3_CONTENT_TYPE: Final[str] = "audio/mpeg"

# Some browsers label MP3 uploads with the non-standard "audio/mp3".
_CONTENT_TYPE_ALIASES: Final[dict[str, str]] = {
    "audio/mpeg": MP3_CONTENT_TYPE,
    "audio/mp3": MP3_CONTENT_TYPE,
}


def resolve_content_type(audio_file: UploadFile) -> str:
    """Accept MP3 uploads only, guessing from the filename when no type is sent."""

    content_type = audio_file.content_type
    if (not content_type or content_type == "application/octet-stream") and audio_file.filename:
        guessed_type, _ = mimetypes.guess_type(audio_file.filename)
        content_type = guessed_type

    resolved = _CONTENT_TYPE_ALIASES.get((content_type or "").lower())
    if resolved is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Por favor, sube un archivo MP3 válido.",
        )
    return resolved


async def read_audio_bytes(audio_file: UploadFile, max_bytes: int) -> bytes:
    """Load the upload into memory, rejecting empty or oversized payloads.

    The declared size is checked before reading, and the read itself stops one
    byte past the limit when no size is known.
    """

    try:
        if audio_file.size is not None and audio_file.size > max_bytes:
            raise _too_large(max_bytes)
        audio_bytes = await audio_file.read(max_bytes + 1)
    finally:
        await audio_file.close()

    if not audio_bytes:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="El archivo de audio está vacío.",
        )
    if len(audio_bytes) > max_bytes:
        raise _too_large(max_bytes)
    return audio_bytes


def _too_large(max_bytes: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
        detail=f"El archivo supera el tamaño máximo de {max_bytes} bytes.",
    )


__all__ = ["MP3_CONTENT_TYPE", "read_audio_bytes", "resolve_content_type"]

"""Session endpoints: upload → process → complete.

The POST ``/sessions/{id}/audio`` and ``/sessions/{id}/document`` handlers
never let an AI-service failure escape as a 500. They answer 502 with the
session body, whose ``error`` field carries the message to show the user,
and the session has already fallen back to the nearest safe state.
"""

import logging
from typing import Any, List
from uuid import UUID

from fastapi import APIRouter, File, HTTPException, Response, UploadFile, status
from fastapi.responses import JSONResponse

from audio_processor.config.settings import settings
from audio_processor.controllers.dependencies import SessionUseCasesDep
from audio_processor.domain.models import ProcessingMode, Session, SessionState
from audio_processor.errors import (
    AudioProcessorError,
    InvalidInputError,
    InvalidTransitionError,
    SessionBusyError,
    SessionNotFoundError,
)
from audio_processor.pipelines import read_audio_bytes, resolve_content_type
from audio_processor.views import (
    ErrorResponse,
    GenerateDocumentRequest,
    ProcessingModeResponse,
    SessionResponse,
)

router = APIRouter(tags=["sessions"])

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    SessionNotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    SessionBusyError: status.HTTP_409_CONFLICT,
    InvalidInputError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    status.HTTP_404_NOT_FOUND: {"model": ErrorResponse},
    status.HTTP_409_CONFLICT: {"model": ErrorResponse},
    status.HTTP_502_BAD_GATEWAY: {"model": SessionResponse},
}

_AUDIO_FILE_UPLOAD = File(...)


def _to_http_error(exc: AudioProcessorError) -> HTTPException:
    status_code = _ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status_code, detail=exc.message)


def _session_payload(session: Session, failed: bool) -> SessionResponse | JSONResponse:
    view = SessionResponse.from_session(session)
    if failed:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content=view.model_dump(mode="json"),
        )
    return view


@router.get("/modes", response_model=List[ProcessingModeResponse])
async def list_processing_modes() -> List[ProcessingModeResponse]:
    """List the processing modes a document can be generated with."""

    return [ProcessingModeResponse.from_mode(mode) for mode in ProcessingMode]


@router.post(
    "/sessions",
    response_model=SessionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_session(use_cases: SessionUseCasesDep) -> SessionResponse:
    session = await use_cases.create()
    return SessionResponse.from_session(session)


@router.get(
    "/sessions/{session_id}",
    response_model=SessionResponse,
    responses=_ERROR_RESPONSES,
)
async def get_session(session_id: UUID, use_cases: SessionUseCasesDep) -> SessionResponse:
    try:
        session = await use_cases.get(session_id)
    except AudioProcessorError as exc:
        raise _to_http_error(exc) from exc
    return SessionResponse.from_session(session)


@router.delete("/sessions/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_session(session_id: UUID, use_cases: SessionUseCasesDep) -> Response:
    try:
        await use_cases.delete(session_id)
    except AudioProcessorError as exc:
        raise _to_http_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/sessions/{session_id}/audio",
    response_model=SessionResponse,
    responses=_ERROR_RESPONSES,
)
async def upload_audio(
    session_id: UUID,
    use_cases: SessionUseCasesDep,
    audio_file: UploadFile = _AUDIO_FILE_UPLOAD,
):
    """Transcribe an uploaded MP3 and move the session to ready_to_process."""

    content_type = resolve_content_type(audio_file)
    audio_bytes = await read_audio_bytes(audio_file, settings.max_upload_bytes)

    try:
        session = await use_cases.upload_audio(session_id, audio_bytes, content_type)
    except AudioProcessorError as exc:
        raise _to_http_error(exc) from exc

    failed = session.state is SessionState.READY_TO_UPLOAD and session.error is not None
    return _session_payload(session, failed)


@router.post(
    "/sessions/{session_id}/document",
    response_model=SessionResponse,
    responses=_ERROR_RESPONSES,
)
async def generate_document(
    session_id: UUID,
    payload: GenerateDocumentRequest,
    use_cases: SessionUseCasesDep,
):
    """Generate the structured document for the held transcription."""

    try:
        session = await use_cases.generate_document(
            session_id,
            payload.mode,
            payload.custom_instructions,
            payload.append_transcription,
        )
    except AudioProcessorError as exc:
        raise _to_http_error(exc) from exc

    failed = session.state is SessionState.READY_TO_PROCESS and session.error is not None
    return _session_payload(session, failed)


@router.get(
    "/sessions/{session_id}/document",
    response_class=Response,
    responses={200: {"content": {"text/markdown": {}}}, **_ERROR_RESPONSES},
)
async def download_document(session_id: UUID, use_cases: SessionUseCasesDep) -> Response:
    """Return the generated document as a Markdown attachment."""

    try:
        document = await use_cases.document(session_id)
    except AudioProcessorError as exc:
        raise _to_http_error(exc) from exc

    return Response(
        content=document,
        media_type="text/markdown; charset=utf-8",
        headers={"Content-Disposition": 'attachment; filename="documento.md"'},
    )


@router.post(
    "/sessions/{session_id}/reset",
    response_model=SessionResponse,
    responses=_ERROR_RESPONSES,
)
async def reset_session(session_id: UUID, use_cases: SessionUseCasesDep) -> SessionResponse:
    try:
        session = await use_cases.reset(session_id)
    except AudioProcessorError as exc:
        raise _to_http_error(exc) from exc
    return SessionResponse.from_session(session)

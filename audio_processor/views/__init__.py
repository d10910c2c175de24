"""Pydantic schemas used as views."""

from .common import ErrorResponse
from .sessions import GenerateDocumentRequest, ProcessingModeResponse, SessionResponse

__all__ = [
    "ErrorResponse",
    "GenerateDocumentRequest",
    "ProcessingModeResponse",
    "SessionResponse",
]

"""Request handling stages shared by the HTTP controllers."""

from .ingestion import read_audio_bytes, resolve_content_type

__all__ = ["read_audio_bytes", "resolve_content_type"]

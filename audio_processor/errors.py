"""Error hierarchy shared by the clients, the state machine and the controllers.

Every error carries a Spanish ``message`` that is safe to show to the user;
controllers translate the class into an HTTP status code.
"""

from __future__ import annotations


class AudioProcessorError(RuntimeError):
    """Base class for all domain errors."""

    default_message = "Ocurrió un error desconocido durante el procesamiento."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class InvalidInputError(AudioProcessorError):
    """Raised when a request is missing data or carries an unsupported file type."""

    default_message = "Faltan los datos de audio o el tipo MIME."


class TranscriptionFailedError(AudioProcessorError):
    """Raised when the remote service fails or returns an empty transcript."""

    default_message = "No se pudo transcribir el archivo de audio."


class GenerationFailedError(AudioProcessorError):
    """Raised when the remote service fails while generating a document."""

    default_message = "No se pudo procesar la transcripción."


class ConfigurationMissingError(AudioProcessorError):
    """Raised at startup when the AI credential is absent."""

    default_message = "Falta la credencial del servicio de IA."


class InvalidTransitionError(AudioProcessorError):
    """Raised when an event is not allowed from the current session state."""

    default_message = "La acción no está permitida en el estado actual de la sesión."


class SessionBusyError(AudioProcessorError):
    """Raised when a session already has a request in flight."""

    default_message = "La sesión ya está procesando otra solicitud."


class SessionNotFoundError(AudioProcessorError):
    """Raised when a session id is unknown to the store."""

    default_message = "Sesión no encontrada."


__all__ = [
    "AudioProcessorError",
    "InvalidInputError",
    "TranscriptionFailedError",
    "GenerationFailedError",
    "ConfigurationMissingError",
    "InvalidTransitionError",
    "SessionBusyError",
    "SessionNotFoundError",
]

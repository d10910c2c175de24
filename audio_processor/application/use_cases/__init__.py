"""Use cases orchestrating the domain and the service clients."""

from .session_use_cases import SessionUseCases

__all__ = ["SessionUseCases"]

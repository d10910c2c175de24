import asyncio
from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from audio_processor.domain.models import Session


class AiServiceError(RuntimeError):
    """Raised by AI service implementations when the remote call fails."""


class GenerativeAiServiceInterface(ABC):
    """Contract for the remote generative-AI service"""

    @abstractmethod
    async def transcribe_audio(
        self,
        audio_base64: str,
        mime_type: str,
        instruction: str,
    ) -> str:
        ...

    @abstractmethod
    async def generate_text(self, prompt: str) -> str:
        ...


class SessionRepositoryInterface(ABC):
    """Storage contract for session snapshots"""

    @abstractmethod
    async def add(self, session: Session) -> Session:
        ...

    @abstractmethod
    async def get(self, session_id: UUID) -> Optional[Session]:
        ...

    @abstractmethod
    async def save(self, session: Session) -> Session:
        ...

    @abstractmethod
    async def delete(self, session_id: UUID) -> bool:
        ...

    @abstractmethod
    def lock_for(self, session_id: UUID) -> asyncio.Lock:
        ...

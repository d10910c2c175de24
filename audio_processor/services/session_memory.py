"""In-memory store for session snapshots."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from typing import Optional
from uuid import UUID

from audio_processor.application.interfaces import SessionRepositoryInterface
from audio_processor.domain.models import Session

logger = logging.getLogger(__name__)

_DEFAULT_MAX_SESSIONS = 500


class InMemorySessionRepository(SessionRepositoryInterface):
    """Keep one snapshot and one lock per session, evicting the oldest first."""

    def __init__(self, max_sessions: int = _DEFAULT_MAX_SESSIONS) -> None:
        self._max_sessions = max_sessions
        self._sessions: OrderedDict[UUID, Session] = OrderedDict()
        self._locks: dict[UUID, asyncio.Lock] = {}

    async def add(self, session: Session) -> Session:
        self._sessions[session.id] = session
        self._sessions.move_to_end(session.id)
        while len(self._sessions) > self._max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            self._locks.pop(evicted_id, None)
            logger.info("Sesión expulsada del almacén session=%s", evicted_id)
        return session

    async def get(self, session_id: UUID) -> Optional[Session]:
        return self._sessions.get(session_id)

    async def save(self, session: Session) -> Session:
        if session.id not in self._sessions:
            return await self.add(session)
        self._sessions[session.id] = session
        return session

    async def delete(self, session_id: UUID) -> bool:
        self._locks.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    def lock_for(self, session_id: UUID) -> asyncio.Lock:
        lock = self._locks.get(session_id)
        if lock is None:
            lock = self._locks[session_id] = asyncio.Lock()
        return lock

    def __len__(self) -> int:
        return len(self._sessions)


__all__ = ["InMemorySessionRepository"]

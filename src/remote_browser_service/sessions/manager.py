"""Creation, teardown and expiry of browser sessions."""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Callable, List, Optional

from ..browser.base import BrowserProvider, DisconnectResult
from ..config import SessionConfig
from ..errors import MissingFieldError
from ..models import SessionCredentials
from .store import Session, SessionStore

LOGGER = logging.getLogger(__name__)


class SessionManager:
    """Provision sessions, close them and sweep stale ones in the background."""

    def __init__(
        self,
        provider: BrowserProvider,
        store: SessionStore,
        config: Optional[SessionConfig] = None,
        *,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._provider = provider
        self._store = store
        self._config = config or SessionConfig()
        self._clock = clock
        self._sweeper: Optional[asyncio.Task[None]] = None

    @property
    def store(self) -> SessionStore:
        return self._store

    async def create(self, credentials: SessionCredentials) -> str:
        if not credentials.api_key or not credentials.project_id:
            raise MissingFieldError("apiKey and projectId required")
        connection = await self._provider.connect(credentials)
        session_id = str(uuid.uuid4())
        while session_id in self._store:
            session_id = str(uuid.uuid4())
        self._store.add(Session(id=session_id, connection=connection, created_at=self._clock()))
        LOGGER.info("Session created: %s", session_id)
        return session_id

    async def close(self, session_id: str) -> bool:
        session = self._store.remove(session_id)
        if session is None:
            return False
        await self._disconnect(session)
        LOGGER.info("Session closed: %s", session_id)
        return True

    async def sweep(self) -> List[str]:
        """Remove and disconnect every session older than the configured TTL."""

        swept: List[str] = []
        for session in self._store.older_than(self._config.ttl, self._clock()):
            if self._store.remove(session.id) is None:
                continue
            await self._disconnect(session)
            LOGGER.info("Cleaned up stale session: %s", session.id)
            swept.append(session.id)
        return swept

    async def shutdown(self) -> None:
        for session in self._store.snapshot():
            await self.close(session.id)

    def start(self) -> None:
        if self._sweeper and not self._sweeper.done():
            return
        self._sweeper = asyncio.create_task(self._sweep_forever())

    async def stop(self) -> None:
        if not self._sweeper:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def _sweep_forever(self) -> None:
        while True:
            await asyncio.sleep(self._config.sweep_interval)
            try:
                await self.sweep()
            except Exception:  # pragma: no cover - keep the sweeper alive
                LOGGER.exception("Session sweep failed")

    async def _disconnect(self, session: Session) -> None:
        try:
            result = await self._provider.disconnect(session.connection)
        except Exception as exc:
            result = DisconnectResult(error=exc)
        if not result.ok:
            LOGGER.warning("Failed to disconnect session %s: %s", session.id, result.error)

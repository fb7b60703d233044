"""
Call-id de-duplication.

A call id is claimed once before its row is written; a second webhook for the
same call is acknowledged without writing. The default store is a bounded
in-process set (reset on restart). Setting DATABASE_URL switches to the
seen_calls table so the guard survives restarts and is shared by workers.
"""

import logging
from collections import OrderedDict

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from leadhook.config import Settings
from leadhook.db.repository import call_seen, release_call, try_claim_call
from leadhook.db.session import create_engine_for, create_session_factory

logger = logging.getLogger(__name__)


class MemoryCallRegistry:
    """In-process set of call ids, oldest evicted once max_keys is reached."""

    def __init__(self, max_keys: int = 10000):
        if max_keys < 1:
            raise ValueError("max_keys must be positive")
        self.max_keys = max_keys
        self._seen: OrderedDict[str, None] = OrderedDict()

    def __len__(self) -> int:
        return len(self._seen)

    async def claim(self, call_id: str) -> bool:
        # No await between check and insert: concurrent requests cannot both win.
        if call_id in self._seen:
            return False
        self._seen[call_id] = None
        while len(self._seen) > self.max_keys:
            evicted, _ = self._seen.popitem(last=False)
            logger.debug("Evicted call id %s from de-dupe set", evicted)
        return True

    async def release(self, call_id: str) -> None:
        self._seen.pop(call_id, None)

    async def seen(self, call_id: str) -> bool:
        return call_id in self._seen

    async def close(self) -> None:
        self._seen.clear()


class SqlCallRegistry:
    """Call ids stored in the seen_calls table; the primary key makes claims atomic."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], engine=None):
        self._session_factory = session_factory
        self.engine = engine

    async def claim(self, call_id: str) -> bool:
        async with self._session_factory() as session:
            created = await try_claim_call(session, call_id)
            if created:
                await session.commit()
            return created

    async def release(self, call_id: str) -> None:
        async with self._session_factory() as session:
            await release_call(session, call_id)
            await session.commit()

    async def seen(self, call_id: str) -> bool:
        async with self._session_factory() as session:
            return await call_seen(session, call_id)

    async def close(self) -> None:
        if self.engine is not None:
            await self.engine.dispose()


def build_call_registry(settings: Settings):
    """SQL-backed registry when a database is configured, bounded memory set otherwise."""
    if settings.database_url:
        engine = create_engine_for(
            settings.database_url, echo=settings.log_level.upper() == "DEBUG"
        )
        return SqlCallRegistry(create_session_factory(engine), engine=engine)
    return MemoryCallRegistry(settings.dedupe_max_keys)

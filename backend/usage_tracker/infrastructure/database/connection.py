"""MongoDB client and per-request session checkout."""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from usage_tracker.config import MongoSettings
from usage_tracker.domain.exceptions import StorageUnavailableError

logger = logging.getLogger(__name__)

INSTALLATIONS = "installations"
SESSIONS = "sessions"


class MongoConnection:
    """Shared MongoDB client, created once at startup.

    Requests never share client-side state: each one checks out its own
    logical session via ``checkout()`` and binds a repository to it.
    """

    def __init__(self, settings: MongoSettings):
        timeout_ms = int(settings.connect_timeout * 1000)
        self._client: AsyncMongoClient = AsyncMongoClient(
            settings.url,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
            tz_aware=True,
        )
        self._db_name = settings.db
        self._reconnect_task: asyncio.Task | None = None

    @property
    def database(self) -> AsyncDatabase:
        return self._client[self._db_name]

    async def connect(self) -> None:
        """Verify the server is reachable, failing within the configured timeout."""
        try:
            await self._client.admin.command("ping")
        except PyMongoError as exc:
            raise StorageUnavailableError("connect", exc) from exc
        logger.info("Connected to MongoDB database '%s'", self._db_name)

    async def ensure_indexes(self) -> None:
        """Index the ownership/open-state predicate used by close and ping."""
        await self.database[SESSIONS].create_index(
            [("machine_id", ASCENDING), ("closed_at", ASCENDING)]
        )

    async def close(self) -> None:
        if self._reconnect_task and not self._reconnect_task.done():
            self._reconnect_task.cancel()
            try:
                await self._reconnect_task
            except asyncio.CancelledError:
                pass
        await self._client.close()
        logger.info("MongoDB connection closed")

    @asynccontextmanager
    async def checkout(self) -> AsyncIterator[AsyncClientSession]:
        """Yield a client session private to the caller, ended on exit."""
        async with self._client.start_session() as session:
            yield session

    def schedule_reconnect(self) -> asyncio.Task:
        """Trigger a best-effort reconnect without waiting for it.

        At most one attempt runs at a time; calls made while it is pending
        get the running task back.
        """
        if self._reconnect_task is None or self._reconnect_task.done():
            self._reconnect_task = asyncio.create_task(self._reconnect())
        return self._reconnect_task

    async def _reconnect(self) -> None:
        logger.info("Attempting to reestablish the MongoDB connection")
        try:
            await self._client.admin.command("ping")
        except PyMongoError as exc:
            logger.warning("MongoDB still unreachable: %s", exc)
        else:
            logger.info("MongoDB connection reestablished")

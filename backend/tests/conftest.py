"""Shared fixtures — an in-memory repository and an API client wired to it."""

from collections.abc import AsyncIterator
from datetime import datetime, timezone

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from usage_tracker.application.interfaces import UsageRepository
from usage_tracker.domain.entities import Installation, Session
from usage_tracker.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    StorageUnavailableError,
)
from usage_tracker.infrastructure.dependencies import get_reconnect_trigger, get_usage_repository
from usage_tracker.main import create_app


class InMemoryUsageRepository(UsageRepository):
    """In-memory fake repository for unit testing.

    Set ``unavailable`` to make every operation fail as if MongoDB were down.
    """

    def __init__(self):
        self.installations: dict[str, Installation] = {}
        self.sessions: dict[str, Session] = {}
        self.unavailable = False

    def _check_available(self, operation: str) -> None:
        if self.unavailable:
            raise StorageUnavailableError(operation, ConnectionError("no reachable servers"))

    async def insert_installation(self, installation: Installation) -> Installation:
        self._check_available("insert installation")
        if installation.machine_id in self.installations:
            raise DuplicateEntityError("Installation", "machine_id", installation.machine_id)
        self.installations[installation.machine_id] = installation
        return installation

    async def insert_session(self, session: Session) -> Session:
        self._check_available("insert session")
        self.sessions[session.id] = session
        return session

    def _open_session(self, session_id: str, machine_id: str) -> Session:
        session = self.sessions.get(session_id)
        if session is None or session.machine_id != machine_id or not session.is_open:
            raise EntityNotFoundError("Session", session_id)
        return session

    async def close_session(self, session_id: str, machine_id: str) -> Session:
        self._check_available("close session")
        session = self._open_session(session_id, machine_id)
        session.closed_at = datetime.now(timezone.utc)
        return session

    async def ping_session(self, session_id: str, machine_id: str) -> Session:
        self._check_available("ping session")
        session = self._open_session(session_id, machine_id)
        session.last_ping = datetime.now(timezone.utc)
        return session


class ReconnectRecorder:
    """Stands in for the reconnect trigger and counts how often it fires."""

    def __init__(self):
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.fixture
def repository() -> InMemoryUsageRepository:
    return InMemoryUsageRepository()


@pytest.fixture
def reconnect() -> ReconnectRecorder:
    return ReconnectRecorder()


@pytest_asyncio.fixture
async def client(
    repository: InMemoryUsageRepository, reconnect: ReconnectRecorder
) -> AsyncIterator[AsyncClient]:
    app = create_app()
    app.dependency_overrides[get_usage_repository] = lambda: repository
    app.dependency_overrides[get_reconnect_trigger] = lambda: reconnect

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator, Callable

from fastapi import Depends, Request
from pymongo.asynchronous.client_session import AsyncClientSession

from usage_tracker.application.interfaces import UsageRepository
from usage_tracker.application.services import InstallationService, SessionService
from usage_tracker.infrastructure.database import MongoConnection
from usage_tracker.infrastructure.database.repositories import MongoUsageRepository


def _get_connection(request: Request) -> MongoConnection:
    return request.app.state.mongo


async def get_db_session(
    connection: MongoConnection = Depends(_get_connection),
) -> AsyncGenerator[AsyncClientSession, None]:
    """FastAPI dependency — yields a MongoDB client session per request."""
    async with connection.checkout() as session:
        yield session


async def get_usage_repository(
    connection: MongoConnection = Depends(_get_connection),
    session: AsyncClientSession = Depends(get_db_session),
) -> AsyncGenerator[UsageRepository, None]:
    """Provides a repository bound to this request's session and the configured database."""
    yield MongoUsageRepository(connection.database, session)


def get_reconnect_trigger(
    connection: MongoConnection = Depends(_get_connection),
) -> Callable[[], None]:
    """Provides the fire-and-forget reconnect hook used after storage failures."""
    return connection.schedule_reconnect


async def get_installation_service(
    repository: UsageRepository = Depends(get_usage_repository),
) -> AsyncGenerator[InstallationService, None]:
    """Provides an InstallationService instance with its repository wired up."""
    yield InstallationService(repository)


async def get_session_service(
    repository: UsageRepository = Depends(get_usage_repository),
) -> AsyncGenerator[SessionService, None]:
    """Provides a SessionService instance with its repository wired up."""
    yield SessionService(repository)

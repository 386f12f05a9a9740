"""Unit tests for InstallationService and SessionService."""

import pytest
from bson import ObjectId

from usage_tracker.application.schemas import (
    InstallationCreate,
    SessionCreate,
    SessionReference,
)
from usage_tracker.application.services import InstallationService, SessionService
from usage_tracker.domain.entities import RequestSnapshot
from usage_tracker.domain.exceptions import DuplicateEntityError, EntityNotFoundError


@pytest.fixture
def installation_service(repository) -> InstallationService:
    return InstallationService(repository)


@pytest.fixture
def session_service(repository) -> SessionService:
    return SessionService(repository)


def _installation(machine_id: str = "M1") -> InstallationCreate:
    return InstallationCreate(
        machine_id=machine_id,
        xmppvox_version="1.1",
        dosvox_info='{"version": "4.0 BETA"}',
        machine_info="null",
    )


@pytest.mark.asyncio
async def test_register_installation_decodes_info(installation_service, repository):
    installation = await installation_service.register_installation(_installation())

    assert installation.dosvox_info == {"version": "4.0 BETA"}
    assert installation.machine_info is None
    assert repository.installations["M1"] is installation


@pytest.mark.asyncio
async def test_register_installation_twice(installation_service):
    await installation_service.register_installation(_installation())

    with pytest.raises(DuplicateEntityError):
        await installation_service.register_installation(_installation())


@pytest.mark.asyncio
async def test_open_session_attaches_snapshot(session_service):
    snapshot = RequestSnapshot(method="POST", url="http://test/1/session/new")

    session = await session_service.open_session(
        SessionCreate(jid="a@b", machine_id="M1", xmppvox_version="1.0"), snapshot
    )

    assert session.request is snapshot
    assert session.is_open


@pytest.mark.asyncio
async def test_close_then_ping_fails(session_service):
    session = await session_service.open_session(
        SessionCreate(jid="a@b", machine_id="M1", xmppvox_version="1.0")
    )
    reference = SessionReference(session_id=session.id, machine_id="M1")

    closed = await session_service.close_session(reference)
    assert not closed.is_open

    with pytest.raises(EntityNotFoundError):
        await session_service.ping_session(reference)


@pytest.mark.asyncio
async def test_close_unknown_session(session_service):
    with pytest.raises(EntityNotFoundError):
        await session_service.close_session(
            SessionReference(session_id=str(ObjectId()), machine_id="M1")
        )


def test_session_reference_rejects_malformed_id():
    with pytest.raises(ValueError, match="Invalid session id xyz"):
        SessionReference(session_id="xyz", machine_id="M1")

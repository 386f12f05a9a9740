"""Application service (use case) for the session lifecycle."""

import logging

from usage_tracker.application.interfaces import UsageRepository
from usage_tracker.application.schemas import SessionCreate, SessionReference
from usage_tracker.domain.entities import RequestSnapshot, Session

logger = logging.getLogger(__name__)


class SessionService:
    """Opens, closes and pings sessions. Depends on the repository port (DI).

    Ownership and open-state checks are not done here: they are part of the
    repository's conditional update, so the check and the write cannot race.
    """

    def __init__(self, repository: UsageRepository):
        self._repository = repository

    async def open_session(
        self, data: SessionCreate, request: RequestSnapshot | None = None
    ) -> Session:
        session = Session(
            jid=data.jid,
            machine_id=data.machine_id,
            xmppvox_version=data.xmppvox_version,
            request=request,
        )
        await self._repository.insert_session(session)
        logger.debug("Opened session %s for %s on %s", session.id, session.jid, session.machine_id)
        return session

    async def close_session(self, data: SessionReference) -> Session:
        session = await self._repository.close_session(data.session_id, data.machine_id)
        logger.debug("Closed session %s", session.id)
        return session

    async def ping_session(self, data: SessionReference) -> Session:
        return await self._repository.ping_session(data.session_id, data.machine_id)

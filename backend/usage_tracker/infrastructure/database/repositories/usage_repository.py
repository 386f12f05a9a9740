"""Concrete repository implementation for installations and sessions backed by MongoDB."""

import logging
from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.asynchronous.client_session import AsyncClientSession
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from usage_tracker.application.interfaces import UsageRepository
from usage_tracker.domain.entities import Installation, RequestSnapshot, Session
from usage_tracker.domain.exceptions import (
    DuplicateEntityError,
    EntityNotFoundError,
    StorageUnavailableError,
)
from usage_tracker.infrastructure.database.connection import INSTALLATIONS, SESSIONS

logger = logging.getLogger(__name__)


class MongoUsageRepository(UsageRepository):
    """Implements the UsageRepository port on top of an async pymongo database.

    Bound to one request's client session when one is given, so operations
    issued by concurrent requests never share client-side state.
    """

    def __init__(self, database: AsyncDatabase, session: AsyncClientSession | None = None):
        self._installations = database[INSTALLATIONS]
        self._sessions = database[SESSIONS]
        self._session = session

    # ── Mapping ─────────────────────────────────────────────────────

    def _installation_to_document(self, entity: Installation) -> dict[str, Any]:
        return {
            "_id": entity.machine_id,
            "xmppvox_ver": entity.xmppvox_version,
            "dosvox_info": entity.dosvox_info,
            "machine_info": entity.machine_info,
            "created_at": entity.created_at,
        }

    def _session_to_document(self, entity: Session) -> dict[str, Any]:
        request = entity.request
        return {
            "_id": ObjectId(entity.id),
            "created_at": entity.created_at,
            "closed_at": entity.closed_at,
            "last_ping": entity.last_ping,
            "jid": entity.jid,
            "machine_id": entity.machine_id,
            "xmppvox_ver": entity.xmppvox_version,
            "req": None if request is None else {
                "method": request.method,
                "url": request.url,
                "header": request.headers,
                "host": request.host,
                "form": request.form,
                "remote_addr": request.remote_addr,
            },
        }

    def _document_to_session(self, doc: dict[str, Any]) -> Session:
        req = doc.get("req")
        return Session(
            id=str(doc["_id"]),
            created_at=doc["created_at"],
            closed_at=doc.get("closed_at"),
            last_ping=doc.get("last_ping"),
            jid=doc["jid"],
            machine_id=doc["machine_id"],
            xmppvox_version=doc["xmppvox_ver"],
            request=None if req is None else RequestSnapshot(
                method=req["method"],
                url=req["url"],
                headers=req.get("header", {}),
                host=req.get("host", ""),
                form=req.get("form", {}),
                remote_addr=req.get("remote_addr", ""),
            ),
        )

    # ── Operations ──────────────────────────────────────────────────

    async def insert_installation(self, installation: Installation) -> Installation:
        try:
            await self._installations.insert_one(
                self._installation_to_document(installation), session=self._session
            )
        except DuplicateKeyError as exc:
            raise DuplicateEntityError(
                "Installation", "machine_id", installation.machine_id
            ) from exc
        except PyMongoError as exc:
            raise StorageUnavailableError("insert installation", exc) from exc
        return installation

    async def insert_session(self, session: Session) -> Session:
        try:
            await self._sessions.insert_one(
                self._session_to_document(session), session=self._session
            )
        except PyMongoError as exc:
            raise StorageUnavailableError("insert session", exc) from exc
        return session

    async def close_session(self, session_id: str, machine_id: str) -> Session:
        return await self._update_open_session(session_id, machine_id, "closed_at", "close session")

    async def ping_session(self, session_id: str, machine_id: str) -> Session:
        return await self._update_open_session(session_id, machine_id, "last_ping", "ping session")

    async def _update_open_session(
        self, session_id: str, machine_id: str, field: str, operation: str
    ) -> Session:
        """Atomically stamp ``field`` on an open session owned by machine_id."""
        try:
            doc = await self._sessions.find_one_and_update(
                {"_id": ObjectId(session_id), "machine_id": machine_id, "closed_at": None},
                {"$set": {field: datetime.now(timezone.utc)}},
                return_document=ReturnDocument.AFTER,
                session=self._session,
            )
        except PyMongoError as exc:
            raise StorageUnavailableError(operation, exc) from exc
        if doc is None:
            raise EntityNotFoundError("Session", session_id)
        return self._document_to_session(doc)

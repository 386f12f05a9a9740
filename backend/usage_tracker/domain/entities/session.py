"""Domain entities for XMPPVOX usage sessions."""

from dataclasses import dataclass, field
from datetime import datetime, timezone

from bson import ObjectId


@dataclass
class RequestSnapshot:
    """Subset of the originating HTTP request, kept for diagnostics."""

    method: str
    url: str
    headers: dict[str, list[str]] = field(default_factory=dict)
    host: str = ""
    form: dict[str, list[str]] = field(default_factory=dict)
    remote_addr: str = ""


@dataclass
class Session:
    """One usage period of the client, from open to close.

    ``closed_at`` and ``last_ping`` are ``None`` until set. A session is
    closed at most once, and only pinged while still open; the repository
    enforces both in its conditional update, not this class.
    """

    jid: str
    machine_id: str
    xmppvox_version: str
    request: RequestSnapshot | None = None
    id: str = field(default_factory=lambda: str(ObjectId()))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    closed_at: datetime | None = None
    last_ping: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.closed_at is None

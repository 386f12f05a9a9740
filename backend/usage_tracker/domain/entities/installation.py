"""Domain entity — one tracked XMPPVOX installation."""

from dataclasses import dataclass, field
from datetime import datetime, timezone


@dataclass
class Installation:
    """A client deployment, keyed by the machine identifier it reports.

    Created once on first registration; the service never updates it.
    """

    machine_id: str
    xmppvox_version: str
    dosvox_info: dict[str, str] | None = None
    machine_info: dict[str, str] | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

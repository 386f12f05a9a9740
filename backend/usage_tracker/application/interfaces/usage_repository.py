"""Abstract repository interface (port) for installation and session persistence."""

from abc import ABC, abstractmethod

from usage_tracker.domain.entities import Installation, Session


class UsageRepository(ABC):
    """Port for usage-tracking persistence — implemented in the infrastructure layer.

    Every operation is a single round-trip to the store. Close and ping are
    conditional updates: they only match an open session owned by the given
    machine, so a wrong id, a wrong owner and an already-closed session all
    surface as the same ``EntityNotFoundError``.

    Implementations raise ``StorageUnavailableError`` on connectivity or
    server failures and never retry.
    """

    @abstractmethod
    async def insert_installation(self, installation: Installation) -> Installation:
        """Persist a new installation.

        Raises ``DuplicateEntityError`` if the machine_id is already registered.
        """
        ...

    @abstractmethod
    async def insert_session(self, session: Session) -> Session:
        """Persist a new session."""
        ...

    @abstractmethod
    async def close_session(self, session_id: str, machine_id: str) -> Session:
        """Set ``closed_at`` on an open session owned by machine_id.

        Raises ``EntityNotFoundError`` if no such open session exists.
        """
        ...

    @abstractmethod
    async def ping_session(self, session_id: str, machine_id: str) -> Session:
        """Set ``last_ping`` on an open session owned by machine_id.

        Raises ``EntityNotFoundError`` if no such open session exists.
        """
        ...

"""Application service (use case) for installation tracking."""

import logging

from usage_tracker.application.interfaces import UsageRepository
from usage_tracker.application.schemas import InstallationCreate
from usage_tracker.domain.entities import Installation

logger = logging.getLogger(__name__)


class InstallationService:
    """Registers client installations. Depends on the repository port (DI)."""

    def __init__(self, repository: UsageRepository):
        self._repository = repository

    async def register_installation(self, data: InstallationCreate) -> Installation:
        installation = Installation(
            machine_id=data.machine_id,
            xmppvox_version=data.xmppvox_version,
            dosvox_info=data.dosvox_info,
            machine_info=data.machine_info,
        )
        await self._repository.insert_installation(installation)
        logger.info(
            "Registered installation %s (xmppvox %s)",
            installation.machine_id,
            installation.xmppvox_version,
        )
        return installation

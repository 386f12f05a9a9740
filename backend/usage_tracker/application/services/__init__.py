from .installation_service import InstallationService
from .session_service import SessionService

__all__ = [
    "InstallationService",
    "SessionService",
]

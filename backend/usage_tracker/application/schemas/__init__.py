from .installation import InstallationCreate
from .session import SessionCreate, SessionReference

__all__ = [
    "InstallationCreate",
    "SessionCreate",
    "SessionReference",
]

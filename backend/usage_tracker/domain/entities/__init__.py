from .installation import Installation
from .session import RequestSnapshot, Session

__all__ = [
    "Installation",
    "RequestSnapshot",
    "Session",
]

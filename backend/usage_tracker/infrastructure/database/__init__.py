from .connection import INSTALLATIONS, SESSIONS, MongoConnection

__all__ = [
    "INSTALLATIONS",
    "SESSIONS",
    "MongoConnection",
]

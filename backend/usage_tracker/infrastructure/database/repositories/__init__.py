from .usage_repository import MongoUsageRepository

__all__ = [
    "MongoUsageRepository",
]

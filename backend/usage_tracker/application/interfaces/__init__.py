from .usage_repository import UsageRepository

__all__ = [
    "UsageRepository",
]

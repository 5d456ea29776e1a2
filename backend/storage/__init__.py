from .cache import CacheStore, CacheWriteResult
from .database import Database, build_engine
from .models import Base, FactCheck

__all__ = [
    "CacheStore",
    "CacheWriteResult",
    "Database",
    "build_engine",
    "Base",
    "FactCheck",
]

# SQLAlchemy storage
from .database import get_engine, init_db, session_scope
from .models import Base, CategoryRecord, MemoryItemRecord, ReviewIntervalRecord
from .repository import BackupPayload, MemoryRepository

__all__ = [
    "Base",
    "BackupPayload",
    "CategoryRecord",
    "MemoryItemRecord",
    "MemoryRepository",
    "ReviewIntervalRecord",
    "get_engine",
    "init_db",
    "session_scope",
]

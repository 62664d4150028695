from catalog_admin.database.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from catalog_admin.database.engine import async_session, engine, sync_engine
from catalog_admin.database.session import get_db
from catalog_admin.database.upsert import upsert_statement

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDPrimaryKeyMixin",
    "async_session",
    "engine",
    "sync_engine",
    "get_db",
    "upsert_statement",
]

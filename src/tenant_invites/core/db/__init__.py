"""Database utilities - engine, session, schema bootstrap."""

from src.tenant_invites.core.db.engine import dispose_engine, get_engine
from src.tenant_invites.core.db.session import create_tables, get_session

__all__ = [
    # Engine
    "dispose_engine",
    "get_engine",
    # Session
    "create_tables",
    "get_session",
]

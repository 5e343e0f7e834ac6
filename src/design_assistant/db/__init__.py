"""
Database Package

Provides SQLAlchemy async session management, model definitions and the
file-record store for PostgreSQL.
"""

from .session import get_async_session, get_engine, get_session_factory, create_tables
from .models import Base, Workspace, FileRecord
from .file_store import FileStore

__all__ = [
    "get_async_session",
    "get_engine",
    "get_session_factory",
    "create_tables",
    "Base",
    "Workspace",
    "FileRecord",
    "FileStore",
]

"""
Database module for the local diary store.

Exports database session management and utilities.
"""

from .session import (
    close_db,
    create_local_engine,
    create_session_factory,
    create_tables,
    get_session_factory,
    init_db,
)

__all__ = [
    "create_local_engine",
    "create_session_factory",
    "create_tables",
    "get_session_factory",
    "init_db",
    "close_db",
]

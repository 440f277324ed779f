"""
Db2 for z/OS database access through pyodbc.

Provides connection setup for the plain and the accelerated session, and
query execution that streams results as a CursorRowSource.
"""

from .connection import (
    Db2QueryExecutor,
    build_connection_string,
    close_connection,
    connect_db2,
    open_connections,
    prepare_accelerated_session,
)

__all__ = [
    'Db2QueryExecutor',
    'build_connection_string',
    'close_connection',
    'connect_db2',
    'open_connections',
    'prepare_accelerated_session',
]

"""
pyodbc connections to Db2 for z/OS.

A comparison uses two connections to the same subsystem: a plain one whose
queries run in Db2 and an accelerated one whose queries are routed to the
named accelerator.
"""

import logging
from typing import Any

import pyodbc
from opentelemetry import trace

from acceldiff.compare.query import quote_identifier
from acceldiff.compare.row_source import CursorRowSource
from acceldiff.config import DEFAULT_FETCH_SIZE, DEFAULT_ODBC_DRIVER, ComparisonConfig, ConnectionTarget
from acceldiff.exceptions import ConnectionSetupError, SourceReadError
from acceldiff.utils.retry import retry_database_operation
from acceldiff.utils.tracing import trace_operation

logger = logging.getLogger(__name__)

CONNECT_TIMEOUT_SECONDS = 30


def _odbc_value(value: str) -> str:
    """Brace-quote an ODBC attribute value when it contains separators."""
    if any(ch in value for ch in ";{}=") or value != value.strip():
        return "{" + value.replace("}", "}}") + "}"
    return value


def build_connection_string(
    target: ConnectionTarget,
    user: str,
    password: str,
    driver: str = DEFAULT_ODBC_DRIVER,
) -> str:
    """
    Build an ODBC connection string for the IBM Db2 driver

    Args:
        target: Host, port and location of the subsystem
        user: Authorization ID
        password: Password
        driver: Name of the installed ODBC driver

    Returns:
        Connection string for pyodbc.connect
    """
    return (
        f"DRIVER={{{driver}}};"
        f"DATABASE={_odbc_value(target.location)};"
        f"HOSTNAME={_odbc_value(target.host)};"
        f"PORT={target.port};"
        f"PROTOCOL=TCPIP;"
        f"UID={_odbc_value(user)};"
        f"PWD={_odbc_value(password)};"
    )


def connect_db2(
    target: ConnectionTarget,
    user: str,
    password: str,
    driver: str = DEFAULT_ODBC_DRIVER,
    max_retries: int = 3,
) -> pyodbc.Connection:
    """
    Open a connection, retrying transient network failures

    Args:
        target: Host, port and location of the subsystem
        user: Authorization ID
        password: Password
        driver: Name of the installed ODBC driver
        max_retries: Retry attempts for transient failures

    Returns:
        Open pyodbc connection

    Raises:
        ConnectionSetupError: If the connection cannot be established
    """
    conn_str = build_connection_string(target, user, password, driver)

    @retry_database_operation(max_retries=max_retries)
    def _connect() -> pyodbc.Connection:
        return pyodbc.connect(conn_str, timeout=CONNECT_TIMEOUT_SECONDS)

    with trace_operation(
        "db2_connect",
        kind=trace.SpanKind.CLIENT,
        db_host=target.host,
        db_location=target.location,
    ):
        try:
            connection = _connect()
        except pyodbc.Error as e:
            raise ConnectionSetupError(f"Cannot connect to {target}: {e}") from e

    logger.info(f"Connected to Db2 for z/OS at {target}")
    return connection


def prepare_accelerated_session(connection: Any, accelerator: str) -> None:
    """
    Route all eligible queries on a connection to an accelerator

    Args:
        connection: Open connection that is not used for anything else
        accelerator: Accelerator name as defined in Db2

    Raises:
        ConnectionSetupError: If either special register cannot be set
    """
    statements = (
        "SET CURRENT QUERY ACCELERATION ALL",
        f"SET CURRENT ACCELERATOR {quote_identifier(accelerator)}",
    )

    cursor = connection.cursor()
    try:
        for statement in statements:
            logger.debug(f"Executing: {statement}")
            cursor.execute(statement)
    except pyodbc.Error as e:
        raise ConnectionSetupError(
            f"Cannot route queries to accelerator {accelerator}: {e}"
        ) from e
    finally:
        cursor.close()


def open_connections(config: ComparisonConfig) -> tuple[Any, Any]:
    """
    Open the plain and the accelerated connection for a run

    Args:
        config: Validated run configuration

    Returns:
        Tuple of (db2_connection, accelerated_connection)

    Raises:
        ConnectionSetupError: If either connection cannot be prepared; a
            connection that was already opened is closed again
    """
    db2_connection = connect_db2(
        config.connection, config.user, config.password, config.odbc_driver
    )
    try:
        accelerated_connection = connect_db2(
            config.connection, config.user, config.password, config.odbc_driver
        )
    except ConnectionSetupError:
        close_connection(db2_connection, "Db2 for z/OS")
        raise

    try:
        prepare_accelerated_session(accelerated_connection, config.accelerator)
    except ConnectionSetupError:
        close_connection(accelerated_connection, "accelerator")
        close_connection(db2_connection, "Db2 for z/OS")
        raise

    logger.info(f"Queries on the second connection are routed to {config.accelerator}")
    return db2_connection, accelerated_connection


def close_connection(connection: Any, name: str) -> None:
    """Close a connection, logging rather than raising on failure."""
    if connection is None:
        return
    try:
        connection.close()
    except pyodbc.Error as e:
        logger.warning(f"Failed to close {name} connection: {e}")


class Db2QueryExecutor:
    """Runs the ordered SELECT on one connection and streams its result."""

    def __init__(self, connection: Any, name: str, fetch_size: int = DEFAULT_FETCH_SIZE):
        """
        Args:
            connection: Open connection
            name: Label for logs and errors (e.g. "Db2 for z/OS")
            fetch_size: Rows per fetchmany() call
        """
        self.connection = connection
        self.name = name
        self.fetch_size = fetch_size

    def run(self, sql: str) -> CursorRowSource:
        """
        Execute a query and return a row source over its result

        Args:
            sql: SELECT statement

        Returns:
            CursorRowSource owning the cursor; the caller closes it

        Raises:
            SourceReadError: If the statement fails
        """
        cursor = self.connection.cursor()
        with trace_operation("db2_query", kind=trace.SpanKind.CLIENT, source=self.name):
            try:
                logger.debug(f"Executing on {self.name}: {sql}")
                cursor.execute(sql)
            except pyodbc.Error as e:
                try:
                    cursor.close()
                except pyodbc.Error:
                    logger.warning(f"Failed to close cursor for {self.name} after error")
                raise SourceReadError(self.name, f"query failed: {e}") from e

        return CursorRowSource(
            cursor,
            self.name,
            fetch_size=self.fetch_size,
            error_types=(pyodbc.Error,),
        )

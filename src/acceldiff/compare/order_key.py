"""
Ordering key derivation.

Both row streams must be sorted the same way before they can be merged. This
module picks that ordering: the columns of the smallest unique constraint on
the table, or every column in natural order when the table has none.
"""

import logging
from dataclasses import dataclass
from typing import Any, Protocol

from acceldiff.exceptions import MetadataNotFound
from acceldiff.utils.tracing import trace_operation

logger = logging.getLogger(__name__)


# Columns of the unique constraint with the fewest columns, in key sequence.
# Ties on COLCOUNT are broken by constraint name so the choice is stable.
SHORTEST_UNIQUE_KEY_QUERY = (
    "SELECT A.COLNO "
    "FROM SYSIBM.SYSKEYCOLUSE A, SYSIBM.SYSTABCONST B "
    "WHERE A.TBCREATOR = ? AND "
    "      A.TBNAME = ? AND "
    "      A.TBCREATOR = B.TBCREATOR AND "
    "      A.TBNAME = B.TBNAME AND "
    "      A.CONSTNAME = B.CONSTNAME AND "
    "      A.CONSTNAME = (SELECT CONSTNAME FROM SYSIBM.SYSTABCONST "
    "                     WHERE TBCREATOR = ? AND TBNAME = ? AND TYPE IN ('P', 'U') "
    "                     ORDER BY COLCOUNT, CONSTNAME "
    "                     FETCH FIRST 1 ROW ONLY) "
    "ORDER BY A.COLSEQ"
)

COLUMN_COUNT_QUERY = (
    "SELECT COLCOUNT "
    "FROM SYSIBM.SYSTABLES "
    "WHERE CREATOR = ? AND "
    "      NAME = ?"
)


@dataclass(frozen=True)
class TableIdentity:
    """Schema-qualified table name."""

    schema: str
    name: str

    def __str__(self) -> str:
        return f"{self.schema}.{self.name}"


@dataclass(frozen=True)
class OrderKey:
    """
    Ordered 1-based column positions used to sort and compare rows.

    Attributes:
        columns: Column positions in sort priority order
        from_unique_key: True if the positions come from a unique constraint,
            False if they are the full natural column list
    """

    columns: tuple[int, ...]
    from_unique_key: bool = False

    def __post_init__(self):
        if not self.columns:
            raise ValueError("OrderKey requires at least one column")
        if any(position < 1 for position in self.columns):
            raise ValueError(f"Column positions are 1-based: {self.columns}")
        if len(set(self.columns)) != len(self.columns):
            raise ValueError(f"Duplicate column positions in OrderKey: {self.columns}")

    def as_order_by(self) -> str:
        """Render the key for an ORDER BY clause, e.g. '3, 1'."""
        return ", ".join(str(position) for position in self.columns)

    def comparison_positions(self, column_count: int) -> tuple[int, ...]:
        """
        Column positions in the order rows are compared.

        The key columns come first, followed by every remaining column in
        natural order, so rows that agree on the key are still compared in
        full.

        Args:
            column_count: Number of columns in each row

        Returns:
            0-based indexes into a row tuple

        Raises:
            ValueError: If a key column lies beyond column_count
        """
        if max(self.columns) > column_count:
            raise ValueError(
                f"OrderKey {self.columns} references a column beyond "
                f"the row width of {column_count}"
            )
        remaining = [p for p in range(1, column_count + 1) if p not in self.columns]
        return tuple(p - 1 for p in (*self.columns, *remaining))


class MetadataProvider(Protocol):
    """Catalog lookups needed to derive an OrderKey."""

    def unique_key_columns(self, schema: str, table: str) -> list[int]:
        ...

    def column_count(self, schema: str, table: str) -> int:
        ...


class Db2CatalogMetadata:
    """MetadataProvider backed by the Db2 for z/OS catalog (SYSIBM tables)."""

    def __init__(self, connection: Any):
        """
        Args:
            connection: DB-API connection to Db2 for z/OS (not accelerated)
        """
        self.connection = connection

    def unique_key_columns(self, schema: str, table: str) -> list[int]:
        cursor = self.connection.cursor()
        try:
            cursor.execute(SHORTEST_UNIQUE_KEY_QUERY, (schema, table, schema, table))
            return [int(row[0]) for row in cursor.fetchall()]
        finally:
            cursor.close()

    def column_count(self, schema: str, table: str) -> int:
        cursor = self.connection.cursor()
        try:
            cursor.execute(COLUMN_COUNT_QUERY, (schema, table))
            row = cursor.fetchone()
        finally:
            cursor.close()

        if row is None:
            raise MetadataNotFound(f"No columns found for table {schema}.{table}")
        return int(row[0])


class OrderKeySelector:
    """Derives the OrderKey for a table from catalog metadata."""

    def __init__(self, metadata: MetadataProvider):
        self.metadata = metadata

    def derive_order_key(self, table: TableIdentity) -> OrderKey:
        """
        Determine the column ordering for both row streams.

        Prefers the smallest unique constraint; falls back to all columns.

        Args:
            table: Table to derive the key for

        Returns:
            OrderKey for the table

        Raises:
            MetadataNotFound: If the table's column count cannot be determined
        """
        with trace_operation("derive_order_key", table=str(table)):
            key_columns = self.metadata.unique_key_columns(table.schema, table.name)
            if key_columns:
                logger.debug(f"Unique key criteria for {table}: {key_columns}")
                return OrderKey(tuple(key_columns), from_unique_key=True)

            column_count = self.metadata.column_count(table.schema, table.name)
            if column_count < 1:
                raise MetadataNotFound(f"Table {table} has no columns")

            logger.debug(f"No unique key on {table}, ordering by all {column_count} columns")
            return OrderKey(tuple(range(1, column_count + 1)))

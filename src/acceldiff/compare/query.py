"""
Ordered query construction and Db2 identifier quoting.

Identifiers are validated before they are embedded in SQL text, then quoted
with double quotes so they are passed to Db2 exactly as the catalog stores
them.
"""

import re

from acceldiff.compare.order_key import OrderKey, TableIdentity

# Ordinary Db2 for z/OS identifiers: letters, digits, _, #, @ and $, not
# starting with a digit. Accelerator names follow the same rules.
VALID_DB2_IDENTIFIER = re.compile(r"^[A-Za-z_#@$][A-Za-z0-9_#@$]{0,127}$")


def is_valid_identifier(identifier: str | None) -> bool:
    """Check an identifier against the ordinary Db2 identifier rules."""
    return bool(identifier) and VALID_DB2_IDENTIFIER.match(identifier) is not None


def quote_identifier(identifier: str) -> str:
    """
    Quote a Db2 identifier

    Args:
        identifier: Schema, table or column name

    Returns:
        Identifier wrapped in double quotes

    Raises:
        ValueError: If identifier format is invalid
    """
    if not is_valid_identifier(identifier):
        raise ValueError(f"Invalid identifier format: {identifier!r}")
    return f'"{identifier}"'


def quote_table(table: TableIdentity) -> str:
    """Quote a schema-qualified table name, e.g. "SCHEMA"."TABLE"."""
    return f"{quote_identifier(table.schema)}.{quote_identifier(table.name)}"


def build_ordered_select(table: TableIdentity, order_key: OrderKey) -> str:
    """
    Build the SELECT both sides run.

    Columns are referenced by position in the ORDER BY so the same text works
    whether the key came from a unique constraint or from the full column list.

    Args:
        table: Table to read
        order_key: Sort order

    Returns:
        SQL text, e.g. SELECT * FROM "S"."T" ORDER BY 3, 1
    """
    return f"SELECT * FROM {quote_table(table)} ORDER BY {order_key.as_order_by()}"

"""
Row representation shared by row sources, the diff engine and reports.

A row is an immutable tuple of nullable text values in column order. Values
are converted to text once, when a row source produces the row, so both
sides are compared on the same representation.
"""

from collections.abc import Iterable
from typing import Any, Optional

Row = tuple[Optional[str], ...]


def to_text(value: Any) -> Optional[str]:
    """
    Convert a database value to its textual representation.

    Args:
        value: Value as returned by the driver

    Returns:
        None for SQL NULL, upper-case hex for binary data, str() otherwise
    """
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex().upper()
    if isinstance(value, str):
        return value
    return str(value)


def to_row(values: Iterable[Any]) -> Row:
    """Convert a driver row to an immutable tuple of text values."""
    return tuple(to_text(value) for value in values)

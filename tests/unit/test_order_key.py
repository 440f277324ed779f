"""
Unit tests for OrderKey derivation.

Tests the OrderKey value object, catalog lookups against a mocked Db2
connection, and the unique-key / all-columns fallback.
"""

from unittest.mock import MagicMock, Mock

import pytest

from acceldiff.compare import Db2CatalogMetadata, OrderKey, OrderKeySelector, TableIdentity
from acceldiff.compare.order_key import COLUMN_COUNT_QUERY, SHORTEST_UNIQUE_KEY_QUERY
from acceldiff.exceptions import MetadataNotFound


class TestTableIdentity:
    """Test TableIdentity."""

    def test_str(self):
        """Test schema-qualified rendering."""
        assert str(TableIdentity("SALES", "ORDERS")) == "SALES.ORDERS"


class TestOrderKey:
    """Test OrderKey validation and helpers."""

    def test_as_order_by(self):
        """Test ORDER BY rendering keeps key order."""
        assert OrderKey((3, 1)).as_order_by() == "3, 1"

    def test_empty_key_rejected(self):
        """Test at least one column is required."""
        with pytest.raises(ValueError, match="at least one column"):
            OrderKey(())

    def test_zero_position_rejected(self):
        """Test positions are 1-based."""
        with pytest.raises(ValueError, match="1-based"):
            OrderKey((0, 1))

    def test_duplicate_position_rejected(self):
        """Test a column may appear only once."""
        with pytest.raises(ValueError, match="Duplicate"):
            OrderKey((2, 2))

    def test_comparison_positions_key_first(self):
        """Test key columns come first, then the rest in natural order."""
        assert OrderKey((3, 1)).comparison_positions(4) == (2, 0, 1, 3)

    def test_comparison_positions_full_key(self):
        """Test an all-columns key compares in natural order."""
        assert OrderKey((1, 2, 3)).comparison_positions(3) == (0, 1, 2)

    def test_comparison_positions_beyond_width(self):
        """Test a key column outside the row is rejected."""
        with pytest.raises(ValueError, match="beyond the row width"):
            OrderKey((5,)).comparison_positions(4)


class TestDb2CatalogMetadata:
    """Test catalog queries with a mocked connection."""

    def setup_method(self):
        """Set up test fixtures."""
        self.cursor = MagicMock()
        self.connection = Mock()
        self.connection.cursor.return_value = self.cursor
        self.metadata = Db2CatalogMetadata(self.connection)

    def test_unique_key_columns(self):
        """Test key columns are returned in key sequence."""
        self.cursor.fetchall.return_value = [(3,), (1,)]

        result = self.metadata.unique_key_columns("SALES", "ORDERS")

        assert result == [3, 1]
        self.cursor.execute.assert_called_once_with(
            SHORTEST_UNIQUE_KEY_QUERY, ("SALES", "ORDERS", "SALES", "ORDERS")
        )
        self.cursor.close.assert_called_once()

    def test_unique_key_columns_none(self):
        """Test a table without unique constraints returns an empty list."""
        self.cursor.fetchall.return_value = []

        assert self.metadata.unique_key_columns("SALES", "ORDERS") == []

    def test_column_count(self):
        """Test column count lookup."""
        self.cursor.fetchone.return_value = (4,)

        assert self.metadata.column_count("SALES", "ORDERS") == 4
        self.cursor.execute.assert_called_once_with(COLUMN_COUNT_QUERY, ("SALES", "ORDERS"))
        self.cursor.close.assert_called_once()

    def test_column_count_unknown_table(self):
        """Test an unknown table raises MetadataNotFound."""
        self.cursor.fetchone.return_value = None

        with pytest.raises(MetadataNotFound, match="SALES.MISSING"):
            self.metadata.column_count("SALES", "MISSING")
        self.cursor.close.assert_called_once()

    def test_cursor_closed_on_error(self):
        """Test the cursor is released when the query fails."""
        self.cursor.execute.side_effect = RuntimeError("SQL0204N")

        with pytest.raises(RuntimeError):
            self.metadata.unique_key_columns("SALES", "ORDERS")
        self.cursor.close.assert_called_once()

    def test_unique_key_query_breaks_ties_by_name(self):
        """Test the shortest-key query orders candidates deterministically."""
        assert "ORDER BY COLCOUNT, CONSTNAME" in SHORTEST_UNIQUE_KEY_QUERY
        assert "TYPE IN ('P', 'U')" in SHORTEST_UNIQUE_KEY_QUERY


class TestOrderKeySelector:
    """Test OrderKey derivation from metadata."""

    def setup_method(self):
        """Set up test fixtures."""
        self.metadata = Mock()
        self.selector = OrderKeySelector(self.metadata)
        self.table = TableIdentity("SALES", "ORDERS")

    def test_uses_unique_key(self):
        """Test the smallest unique key is used when present."""
        self.metadata.unique_key_columns.return_value = [3, 1]

        key = self.selector.derive_order_key(self.table)

        assert key == OrderKey((3, 1), from_unique_key=True)
        self.metadata.column_count.assert_not_called()

    def test_falls_back_to_all_columns(self):
        """Test all columns in natural order without a unique key."""
        self.metadata.unique_key_columns.return_value = []
        self.metadata.column_count.return_value = 4

        key = self.selector.derive_order_key(self.table)

        assert key.columns == (1, 2, 3, 4)
        assert key.from_unique_key is False
        self.metadata.column_count.assert_called_once_with("SALES", "ORDERS")

    def test_zero_columns(self):
        """Test a table reported with no columns is an error."""
        self.metadata.unique_key_columns.return_value = []
        self.metadata.column_count.return_value = 0

        with pytest.raises(MetadataNotFound):
            self.selector.derive_order_key(self.table)

    def test_metadata_not_found_propagates(self):
        """Test lookup failures reach the caller."""
        self.metadata.unique_key_columns.return_value = []
        self.metadata.column_count.side_effect = MetadataNotFound("no such table")

        with pytest.raises(MetadataNotFound, match="no such table"):
            self.selector.derive_order_key(self.table)

"""
Unit tests for row sources.

Tests lazy current/advance semantics, value conversion to text, batched
fetching from DB-API cursors and cursor release.
"""

from unittest.mock import MagicMock

import pytest

from acceldiff.compare import CursorRowSource, SequenceRowSource
from acceldiff.compare.row_source import _LazyRowSource
from acceldiff.exceptions import SourceReadError
from acceldiff.rows import to_row, to_text


class TestToText:
    """Test value conversion."""

    def test_none(self):
        """Test NULL stays None."""
        assert to_text(None) is None

    def test_string(self):
        """Test strings pass through unchanged."""
        assert to_text("ABC ") == "ABC "

    def test_number(self):
        """Test numbers use their str() form."""
        assert to_text(42) == "42"

    def test_bytes(self):
        """Test binary values render as upper-case hex."""
        assert to_text(b"\x01\xab") == "01AB"

    def test_to_row(self):
        """Test whole rows become tuples of text."""
        assert to_row([1, None, "X"]) == ("1", None, "X")


class TestSequenceRowSource:
    """Test the in-memory row source."""

    def test_current_does_not_consume(self):
        """Test current() can be called repeatedly."""
        source = SequenceRowSource([(1,), (2,)])

        assert source.current() == ("1",)
        assert source.current() == ("1",)
        assert source.rows_read == 1

    def test_advance_moves_to_next(self):
        """Test advance() steps past the current row."""
        source = SequenceRowSource([(1,), (2,)])
        source.current()
        source.advance()

        assert source.current() == ("2",)

    def test_advance_without_current(self):
        """Test advancing an unread row skips it."""
        source = SequenceRowSource([(1,), (2,)])
        source.advance()

        assert source.current() == ("2",)

    def test_advance_does_not_read_ahead(self):
        """Test advance() leaves the next row unread."""
        source = SequenceRowSource([(1,), (2,)])
        source.current()
        source.advance()

        assert source.rows_read == 1

    def test_exhaustion(self):
        """Test the source reports exhaustion and advance() becomes a no-op."""
        source = SequenceRowSource([(1,)])
        source.current()
        source.advance()

        assert source.current() is None
        assert source.exhausted
        source.advance()
        assert source.current() is None

    def test_empty(self):
        """Test an empty source is exhausted immediately."""
        source = SequenceRowSource([])

        assert source.current() is None
        assert source.rows_read == 0

    def test_context_manager(self):
        """Test closing through a with block ends the stream."""
        with SequenceRowSource([(1,)]) as source:
            pass

        assert source.current() is None


class TestCursorRowSource:
    """Test the DB-API cursor row source."""

    def setup_method(self):
        """Set up test fixtures."""
        self.cursor = MagicMock()
        self.cursor.description = [("ID",), ("NAME",)]

    def test_fetches_in_batches(self):
        """Test rows are pulled with fetchmany(fetch_size)."""
        self.cursor.fetchmany.side_effect = [[(1, "A"), (2, "B")], [(3, "C")]]
        source = CursorRowSource(self.cursor, "Db2", fetch_size=2)

        rows = []
        while source.current() is not None:
            rows.append(source.current())
            source.advance()

        assert rows == [("1", "A"), ("2", "B"), ("3", "C")]
        assert self.cursor.fetchmany.call_count == 2
        self.cursor.fetchmany.assert_called_with(2)

    def test_full_batch_then_empty(self):
        """Test a final empty batch ends the stream."""
        self.cursor.fetchmany.side_effect = [[(1, "A")], []]
        source = CursorRowSource(self.cursor, "Db2", fetch_size=1)

        assert source.current() == ("1", "A")
        source.advance()
        assert source.current() is None
        assert self.cursor.fetchmany.call_count == 2

    def test_no_fetch_after_short_batch(self):
        """Test a short batch marks the end of the cursor."""
        self.cursor.fetchmany.side_effect = [[(1, "A")]]
        source = CursorRowSource(self.cursor, "Db2", fetch_size=10)

        source.current()
        source.advance()

        assert source.current() is None
        assert self.cursor.fetchmany.call_count == 1

    def test_fetch_error_wrapped(self):
        """Test driver errors surface as SourceReadError."""
        self.cursor.fetchmany.side_effect = RuntimeError("SQL30081N communication error")
        source = CursorRowSource(self.cursor, "accelerator")

        with pytest.raises(SourceReadError, match="accelerator: fetch failed") as exc_info:
            source.current()

        assert exc_info.value.source_name == "accelerator"
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_only_configured_errors_wrapped(self):
        """Test exceptions outside error_types propagate unchanged."""
        self.cursor.fetchmany.side_effect = KeyError("bug")
        source = CursorRowSource(self.cursor, "Db2", error_types=(RuntimeError,))

        with pytest.raises(KeyError):
            source.current()

    def test_close_is_idempotent(self):
        """Test the cursor is closed exactly once."""
        source = CursorRowSource(self.cursor, "Db2")

        source.close()
        source.close()

        self.cursor.close.assert_called_once()

    def test_read_after_close(self):
        """Test reading a closed source fails."""
        source = CursorRowSource(self.cursor, "Db2")
        source.close()

        with pytest.raises(SourceReadError, match="closed"):
            source.current()

    def test_close_error_logged_not_raised(self, caplog):
        """Test failures while closing are only logged."""
        self.cursor.close.side_effect = RuntimeError("already closed")
        source = CursorRowSource(self.cursor, "Db2")

        source.close()

        assert "Failed to close cursor for Db2" in caplog.text

    def test_context_manager_closes_on_error(self):
        """Test the cursor is released when the block raises."""
        with pytest.raises(ValueError):
            with CursorRowSource(self.cursor, "Db2"):
                raise ValueError("boom")

        self.cursor.close.assert_called_once()

    def test_column_count(self):
        """Test the column count comes from the cursor description."""
        assert CursorRowSource(self.cursor, "Db2").column_count == 2

    def test_invalid_fetch_size(self):
        """Test fetch_size must be positive."""
        with pytest.raises(ValueError, match="fetch_size"):
            CursorRowSource(self.cursor, "Db2", fetch_size=0)


class TestLazyRowSourceBase:
    """Test the shared row source base class."""

    def test_subclass_without_read_next_cannot_be_created(self):
        """Test a source that cannot read rows fails at construction."""

        class Incomplete(_LazyRowSource):
            pass

        with pytest.raises(TypeError):
            Incomplete("broken")

    def test_subclass_with_read_next(self):
        """Test a minimal subclass gets current/advance behaviour."""

        class Single(_LazyRowSource):
            def __init__(self):
                super().__init__("single")
                self._served = False

            def _read_next(self):
                if self._served:
                    return None
                self._served = True
                return ("1",)

        source = Single()

        assert source.current() == ("1",)
        source.advance()
        assert source.current() is None
        assert source.rows_read == 1

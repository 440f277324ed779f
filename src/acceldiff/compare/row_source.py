"""
Ordered, single-pass row sources.

A row source exposes the row under its cursor without consuming it
(`current`) and moves past it (`advance`). The diff engine only depends on
this protocol, so it runs the same against a live database cursor or an
in-memory sequence.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator
from typing import Any, Protocol

from acceldiff.exceptions import SourceReadError
from acceldiff.rows import Row, to_row

logger = logging.getLogger(__name__)


class RowSource(Protocol):
    """Pull-based ordered cursor over one side's rows."""

    def current(self) -> Row | None:
        """Row under the cursor, or None once the source is exhausted."""
        ...

    def advance(self) -> None:
        """Consume the current row. No-op once exhausted."""
        ...


class _LazyRowSource(ABC):
    """
    Shared current/advance bookkeeping.

    The next row is only read when `current()` asks for it, so advancing past
    the last row the engine needs never touches the one after it.
    """

    def __init__(self, name: str):
        self.name = name
        self.rows_read = 0
        self._row: Row | None = None
        self._loaded = False
        self._exhausted = False

    @abstractmethod
    def _read_next(self) -> Row | None:
        """Fetch the next row from the underlying stream, or None at its end."""

    def current(self) -> Row | None:
        if self._exhausted:
            return None
        if not self._loaded:
            self._row = self._read_next()
            self._loaded = True
            if self._row is None:
                self._exhausted = True
                logger.debug(f"Row source {self.name} exhausted after {self.rows_read} rows")
            else:
                self.rows_read += 1
        return self._row

    def advance(self) -> None:
        if self._exhausted:
            return
        if not self._loaded:
            # Skipping a row nobody looked at still has to read past it
            self.current()
            if self._exhausted:
                return
        self._row = None
        self._loaded = False

    @property
    def exhausted(self) -> bool:
        """True once the end of the stream has been observed."""
        return self._exhausted


class SequenceRowSource(_LazyRowSource):
    """Row source over an in-memory iterable of rows, already in order."""

    def __init__(self, rows: Iterable[Iterable[Any]], name: str = "sequence"):
        super().__init__(name)
        self._iterator: Iterator[Iterable[Any]] = iter(rows)

    def _read_next(self) -> Row | None:
        try:
            return to_row(next(self._iterator))
        except StopIteration:
            return None

    def close(self) -> None:
        self._exhausted = True

    def __enter__(self) -> "SequenceRowSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class CursorRowSource(_LazyRowSource):
    """
    Row source over an executed DB-API cursor.

    Rows are fetched in batches of `fetch_size` with `fetchmany`. Any driver
    error raised while fetching is re-raised as SourceReadError. The cursor is
    owned by this object and closed by `close()` or on leaving a `with` block.
    """

    def __init__(
        self,
        cursor: Any,
        name: str,
        fetch_size: int = 1000,
        error_types: tuple[type[BaseException], ...] = (Exception,),
    ):
        """
        Initialize cursor row source.

        Args:
            cursor: Cursor on which an ordered SELECT has already been executed
            name: Label used in logs and errors (e.g. "Db2", "accelerator")
            fetch_size: Number of rows per fetchmany() call
            error_types: Driver exceptions that signal a failed read
        """
        if fetch_size < 1:
            raise ValueError(f"fetch_size must be positive, got {fetch_size}")

        super().__init__(name)
        self.cursor = cursor
        self.fetch_size = fetch_size
        self.error_types = error_types
        self._buffer: list[Any] = []
        self._buffer_pos = 0
        self._end_of_cursor = False
        self._closed = False

    @property
    def column_count(self) -> int | None:
        """Number of result columns, from the cursor description."""
        description = getattr(self.cursor, "description", None)
        return len(description) if description else None

    def _read_next(self) -> Row | None:
        if self._closed:
            raise SourceReadError(self.name, "read from a closed row source")

        if self._buffer_pos >= len(self._buffer):
            if self._end_of_cursor:
                return None
            try:
                self._buffer = list(self.cursor.fetchmany(self.fetch_size))
            except self.error_types as e:
                raise SourceReadError(self.name, f"fetch failed: {e}") from e
            self._buffer_pos = 0
            if len(self._buffer) < self.fetch_size:
                self._end_of_cursor = True
            if not self._buffer:
                return None

        raw = self._buffer[self._buffer_pos]
        self._buffer_pos += 1
        return to_row(raw)

    def close(self) -> None:
        """Release the underlying cursor. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        self._buffer = []
        try:
            self.cursor.close()
        except self.error_types as e:
            logger.warning(f"Failed to close cursor for {self.name}: {e}")
        logger.debug(f"Closed row source {self.name} after {self.rows_read} rows")

    def __enter__(self) -> "CursorRowSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

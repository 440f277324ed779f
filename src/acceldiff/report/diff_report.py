"""
Difference accumulation and rendering.

DiffReport collects the rows found on only one side of the comparison, in the
order they were discovered, and never holds more than its budget.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from acceldiff.rows import Row

NULL_TEXT = "NULL"
COLUMN_SEPARATOR = " | "

DEFAULT_LEFT_LABEL = "Db2 for z/OS"
DEFAULT_RIGHT_LABEL = "IBM Db2 Analytics Accelerator / Data Gate"


class Side(str, Enum):
    """Side of the comparison a row was found on."""

    LEFT = "left_only"
    RIGHT = "right_only"


@dataclass(frozen=True)
class DiffRecord:
    """A row present on exactly one side at its ordered position."""

    side: Side
    row: Row


def format_row(row: Row) -> str:
    """Render a row as its column values joined by ' | '."""
    return COLUMN_SEPARATOR.join(NULL_TEXT if value is None else value for value in row)


class DiffReport:
    """
    Bounded, append-only collection of DiffRecords.

    `add()` refuses records once `budget` records are held, so callers never
    need to check the ceiling themselves.
    """

    def __init__(self, budget: int):
        """
        Args:
            budget: Maximum number of DiffRecords to hold (must be positive)

        Raises:
            ValueError: If budget is not positive
        """
        if budget < 1:
            raise ValueError(f"Difference budget must be positive, got {budget}")

        self.budget = budget
        self._left_only: list[Row] = []
        self._right_only: list[Row] = []
        self.rows_matched = 0
        self.budget_reached = False
        self.timestamp = datetime.now(UTC)

    @property
    def left_only(self) -> list[Row]:
        """Rows found only on the left side, in discovery order."""
        return list(self._left_only)

    @property
    def right_only(self) -> list[Row]:
        """Rows found only on the right side, in discovery order."""
        return list(self._right_only)

    @property
    def difference_count(self) -> int:
        return len(self._left_only) + len(self._right_only)

    @property
    def is_full(self) -> bool:
        return self.difference_count >= self.budget

    def add(self, record: DiffRecord) -> None:
        """
        Append a record to the section for its side.

        Raises:
            ValueError: If the budget is already exhausted
        """
        if self.is_full:
            raise ValueError(
                f"Difference budget of {self.budget} exhausted, cannot add more records"
            )

        if record.side is Side.LEFT:
            self._left_only.append(record.row)
        else:
            self._right_only.append(record.row)

    def records(self) -> list[DiffRecord]:
        """All records, right-only section first as rendered."""
        return [DiffRecord(Side.RIGHT, row) for row in self._right_only] + [
            DiffRecord(Side.LEFT, row) for row in self._left_only
        ]

    def is_empty(self) -> bool:
        return not self._left_only and not self._right_only

    def render(
        self,
        left_label: str = DEFAULT_LEFT_LABEL,
        right_label: str = DEFAULT_RIGHT_LABEL,
    ) -> str:
        """
        Human-readable summary.

        Args:
            left_label: Name of the authoritative side
            right_label: Name of the replica side

        Returns:
            A single "in sync" line if there are no differences, otherwise a
            header followed by one section per non-empty side
        """
        if self.is_empty():
            return f"Data is the same in {left_label} and {right_label}."

        lines = [
            f"Data is NOT in sync. Printing the first {self.difference_count} differences."
        ]
        if self.budget_reached:
            lines.append(
                f"Stopped after reaching the limit of {self.budget} differences; "
                f"more differences may exist."
            )

        if self._right_only:
            lines.append(f"Not in {left_label} are the following rows:")
            lines.extend(format_row(row) for row in self._right_only)

        if self._left_only:
            lines.append(f"Not in {right_label} are the following rows:")
            lines.extend(format_row(row) for row in self._left_only)

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "status": "IN_SYNC" if self.is_empty() else "NOT_IN_SYNC",
            "max_differences": self.budget,
            "difference_count": self.difference_count,
            "budget_reached": self.budget_reached,
            "rows_matched": self.rows_matched,
            "left_only": [list(row) for row in self._left_only],
            "right_only": [list(row) for row in self._right_only],
            "timestamp": self.timestamp.isoformat(),
        }

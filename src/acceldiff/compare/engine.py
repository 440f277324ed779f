"""
Dual-cursor streaming diff.

Walks two row sources sorted by the same OrderKey in lock-step, merge-join
style, and classifies every row as matched, left-only or right-only. Each
side is read once, in order, so the comparison runs in O(L+R) time and keeps
nothing in memory except the differences it reports.
"""

from enum import Enum

from acceldiff.compare.order_key import OrderKey
from acceldiff.compare.row_source import RowSource
from acceldiff.report.diff_report import DiffRecord, DiffReport, Side, format_row
from acceldiff.rows import Row
from acceldiff.utils.logging import ContextLogger
from acceldiff.utils.tracing import trace_operation


class EngineState(str, Enum):
    """States of the comparison loop."""

    BOTH_ACTIVE = "BOTH_ACTIVE"
    LEFT_EXHAUSTED = "LEFT_EXHAUSTED"
    RIGHT_EXHAUSTED = "RIGHT_EXHAUSTED"
    DONE = "DONE"


class Classification(str, Enum):
    """Outcome for a row, or a pair of rows, visited by the engine."""

    MATCHED = "MATCHED"
    LEFT_ONLY = "LEFT_ONLY"
    RIGHT_ONLY = "RIGHT_ONLY"


def compare_values(left: str | None, right: str | None) -> int:
    """
    Ordinal comparison of two column values.

    NULL equals NULL and sorts after every non-null value, which is where Db2
    places NULLs in an ascending sort.

    Returns:
        Negative, zero or positive as left is less than, equal to or greater
        than right
    """
    if left == right:
        return 0
    if left is None:
        return 1
    if right is None:
        return -1
    return -1 if left < right else 1


def compare_rows(left: Row, right: Row, positions: tuple[int, ...]) -> int:
    """
    Compare two rows column by column, stopping at the first difference.

    Args:
        left: Row from the left source
        right: Row from the right source
        positions: 0-based column indexes in comparison order

    Returns:
        Result of compare_values for the first differing column, or 0
    """
    for index in positions:
        result = compare_values(left[index], right[index])
        if result:
            return result
    return 0


def classify(left: Row | None, right: Row | None, positions: tuple[int, ...]) -> Classification:
    """Classify the rows currently under both cursors."""
    if left is None:
        return Classification.RIGHT_ONLY
    if right is None:
        return Classification.LEFT_ONLY

    result = compare_rows(left, right, positions)
    if result == 0:
        return Classification.MATCHED
    # The right row sorts before the left one, so the left side skipped it
    return Classification.RIGHT_ONLY if result > 0 else Classification.LEFT_ONLY


class DiffEngine:
    """Merge-join comparison of two ordered row sources."""

    def __init__(
        self,
        order_key: OrderKey | None = None,
        logger: ContextLogger | None = None,
        left_label: str = "left",
        right_label: str = "right",
    ):
        """
        Initialize diff engine.

        Args:
            order_key: Ordering both sources are sorted by. Its columns are
                compared first, then the remaining columns. None compares in
                natural column order.
            logger: Logger carrying run context and the debug flag
            left_label: Name of the left side used in debug output
            right_label: Name of the right side used in debug output
        """
        self.order_key = order_key
        self.log = logger or ContextLogger(__name__)
        self.left_label = left_label
        self.right_label = right_label
        self._positions: dict[int, tuple[int, ...]] = {}

    def _comparison_positions(self, left: Row, right: Row) -> tuple[int, ...]:
        width = len(left)
        if len(right) != width:
            raise ValueError(
                f"Column count differs between sources: "
                f"{self.left_label} has {width}, {self.right_label} has {len(right)}"
            )

        if width not in self._positions:
            if self.order_key is None:
                self._positions[width] = tuple(range(width))
            else:
                self._positions[width] = self.order_key.comparison_positions(width)
        return self._positions[width]

    @staticmethod
    def state_of(left: RowSource, right: RowSource) -> EngineState:
        """Derive the loop state from what is under each cursor."""
        left_done = left.current() is None
        right_done = right.current() is None

        if left_done and right_done:
            return EngineState.DONE
        if left_done:
            return EngineState.LEFT_EXHAUSTED
        if right_done:
            return EngineState.RIGHT_EXHAUSTED
        return EngineState.BOTH_ACTIVE

    def compare(self, left: RowSource, right: RowSource, budget: int) -> DiffReport:
        """
        Compare two row sources sorted by the same OrderKey.

        Stops once both sources are exhausted or `budget` differences have
        been recorded; rows beyond that point are never read. Sources are not
        closed here, that stays with the caller.

        Args:
            left: Authoritative side
            right: Replica side
            budget: Maximum number of differences to collect

        Returns:
            DiffReport with left-only and right-only rows in discovery order

        Raises:
            SourceReadError: If either source fails while streaming
            ValueError: If budget is not positive or the row widths differ
        """
        report = DiffReport(budget)
        debug = self.log.debug_mode

        with trace_operation("diff_compare", budget=budget) as span:
            state = self.state_of(left, right)

            while state is not EngineState.DONE:
                left_row = left.current()
                right_row = right.current()

                if state is EngineState.BOTH_ACTIVE:
                    positions = self._comparison_positions(left_row, right_row)
                else:
                    positions = ()
                outcome = classify(left_row, right_row, positions)

                if outcome is Classification.MATCHED:
                    if debug:
                        self.log.debug(f"Rows match: {format_row(left_row)}")
                    report.rows_matched += 1
                    left.advance()
                    right.advance()
                elif outcome is Classification.RIGHT_ONLY:
                    if debug:
                        self.log.debug(f"Row missing in {self.left_label}: {format_row(right_row)}")
                    report.add(DiffRecord(Side.RIGHT, right_row))
                    right.advance()
                else:
                    if debug:
                        self.log.debug(f"Row missing in {self.right_label}: {format_row(left_row)}")
                    report.add(DiffRecord(Side.LEFT, left_row))
                    left.advance()

                if report.is_full:
                    report.budget_reached = True
                    self.log.info(f"Difference limit of {budget} reached, stopping comparison")
                    break

                state = self.state_of(left, right)

            span.set_attribute("diff.rows_matched", report.rows_matched)
            span.set_attribute("diff.left_only", len(report.left_only))
            span.set_attribute("diff.right_only", len(report.right_only))

        self.log.info(
            f"Comparison finished: {report.rows_matched} rows matched, "
            f"{len(report.left_only)} only in {self.left_label}, "
            f"{len(report.right_only)} only in {self.right_label}"
        )
        return report

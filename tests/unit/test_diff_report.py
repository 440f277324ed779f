"""
Unit tests for DiffReport.

Tests the budget ceiling, discovery order, rendering and serialization.
"""

import pytest

from acceldiff.report import DiffRecord, DiffReport, Side, format_row


class TestFormatRow:
    """Test row rendering."""

    def test_values_joined(self):
        """Test values are joined with ' | '."""
        assert format_row(("1", "ABC")) == "1 | ABC"

    def test_null_rendered(self):
        """Test NULL is rendered as the literal NULL."""
        assert format_row(("1", None)) == "1 | NULL"


class TestDiffReport:
    """Test DiffReport accumulation."""

    def test_invalid_budget(self):
        """Test the budget must be positive."""
        with pytest.raises(ValueError):
            DiffReport(0)

    def test_add_by_side(self):
        """Test records are filed by side in discovery order."""
        report = DiffReport(10)
        report.add(DiffRecord(Side.LEFT, ("1",)))
        report.add(DiffRecord(Side.RIGHT, ("2",)))
        report.add(DiffRecord(Side.LEFT, ("3",)))

        assert report.left_only == [("1",), ("3",)]
        assert report.right_only == [("2",)]
        assert report.difference_count == 3

    def test_budget_ceiling(self):
        """Test add() refuses records beyond the budget."""
        report = DiffReport(1)
        report.add(DiffRecord(Side.LEFT, ("1",)))

        assert report.is_full
        with pytest.raises(ValueError, match="exhausted"):
            report.add(DiffRecord(Side.RIGHT, ("2",)))
        assert report.difference_count == 1

    def test_sections_are_copies(self):
        """Test callers cannot modify the report through its sections."""
        report = DiffReport(5)
        report.add(DiffRecord(Side.LEFT, ("1",)))

        report.left_only.append(("X",))

        assert report.left_only == [("1",)]

    def test_records_right_only_first(self):
        """Test records() follows the rendered section order."""
        report = DiffReport(5)
        report.add(DiffRecord(Side.LEFT, ("1",)))
        report.add(DiffRecord(Side.RIGHT, ("2",)))

        assert report.records() == [
            DiffRecord(Side.RIGHT, ("2",)),
            DiffRecord(Side.LEFT, ("1",)),
        ]


class TestRender:
    """Test console rendering."""

    def test_in_sync(self):
        """Test an empty report renders one line."""
        assert DiffReport(100).render() == (
            "Data is the same in Db2 for z/OS and IBM Db2 Analytics Accelerator / Data Gate."
        )

    def test_custom_labels(self):
        """Test labels are used in the message."""
        assert DiffReport(100).render("Db2", "ACCEL1") == "Data is the same in Db2 and ACCEL1."

    def test_not_in_sync(self):
        """Test both sections are rendered, right-only first."""
        report = DiffReport(100)
        report.add(DiffRecord(Side.LEFT, ("1", "A")))
        report.add(DiffRecord(Side.RIGHT, ("2", None)))

        assert report.render("Db2", "ACCEL1").splitlines() == [
            "Data is NOT in sync. Printing the first 2 differences.",
            "Not in Db2 are the following rows:",
            "2 | NULL",
            "Not in ACCEL1 are the following rows:",
            "1 | A",
        ]

    def test_empty_section_omitted(self):
        """Test a side without differences has no section."""
        report = DiffReport(100)
        report.add(DiffRecord(Side.LEFT, ("1",)))

        text = report.render("Db2", "ACCEL1")

        assert "Not in Db2" not in text
        assert "Not in ACCEL1 are the following rows:" in text

    def test_budget_reached_notice(self):
        """Test the summary says when the limit stopped the comparison."""
        report = DiffReport(1)
        report.add(DiffRecord(Side.LEFT, ("1",)))
        report.budget_reached = True

        lines = report.render("Db2", "ACCEL1").splitlines()

        assert lines[1] == (
            "Stopped after reaching the limit of 1 differences; more differences may exist."
        )


class TestToDict:
    """Test serialization."""

    def test_in_sync(self):
        """Test status of an empty report."""
        result = DiffReport(100).to_dict()

        assert result["status"] == "IN_SYNC"
        assert result["difference_count"] == 0
        assert result["max_differences"] == 100
        assert "timestamp" in result

    def test_not_in_sync(self):
        """Test rows are serialized as lists with None preserved."""
        report = DiffReport(100)
        report.add(DiffRecord(Side.LEFT, ("1", None)))
        report.rows_matched = 7

        result = report.to_dict()

        assert result["status"] == "NOT_IN_SYNC"
        assert result["left_only"] == [["1", None]]
        assert result["right_only"] == []
        assert result["rows_matched"] == 7
        assert result["budget_reached"] is False

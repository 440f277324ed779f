"""
Report formatting and export utilities.

This module renders a DiffReport as console text, JSON or CSV and writes the
result to a file or stdout.
"""

import csv
import io
import json
import sys
from pathlib import Path
from typing import Any

from acceldiff.compare.order_key import OrderKey, TableIdentity
from acceldiff.report.diff_report import DEFAULT_LEFT_LABEL, DEFAULT_RIGHT_LABEL, DiffReport

FORMATS = ("console", "json", "csv")


def build_report_payload(
    report: DiffReport,
    table: TableIdentity,
    order_key: OrderKey,
    left_label: str = DEFAULT_LEFT_LABEL,
    right_label: str = DEFAULT_RIGHT_LABEL,
) -> dict[str, Any]:
    """
    Build the serializable form of a comparison result

    Args:
        report: Comparison result
        table: Table that was compared
        order_key: Ordering used for both sides
        left_label: Name of the authoritative side
        right_label: Name of the replica side

    Returns:
        Report dictionary
    """
    payload = report.to_dict()
    payload.update({
        "table": str(table),
        "left_label": left_label,
        "right_label": right_label,
        "order_key": list(order_key.columns),
        "order_key_source": "unique_key" if order_key.from_unique_key else "all_columns",
    })
    return payload


def format_report_console(
    report: DiffReport,
    left_label: str = DEFAULT_LEFT_LABEL,
    right_label: str = DEFAULT_RIGHT_LABEL,
) -> str:
    """
    Format report for console output

    Args:
        report: Comparison result
        left_label: Name of the authoritative side
        right_label: Name of the replica side

    Returns:
        Formatted string for console display
    """
    return report.render(left_label, right_label)


def format_report_json(payload: dict[str, Any]) -> str:
    """Serialize a report payload as indented JSON."""
    return json.dumps(payload, indent=2)


def format_report_csv(report: DiffReport) -> str:
    """
    Format report as CSV

    One line per differing row: the side it was found on followed by its
    column values. NULL values are written as empty fields.

    Args:
        report: Comparison result

    Returns:
        CSV text including a header line
    """
    records = report.records()
    width = len(records[0].row) if records else 0

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["side", *[f"col{i}" for i in range(1, width + 1)]])
    for record in records:
        writer.writerow([record.side.value, *["" if v is None else v for v in record.row]])
    return buffer.getvalue()


def render_report(
    report: DiffReport,
    output_format: str,
    table: TableIdentity,
    order_key: OrderKey,
    left_label: str = DEFAULT_LEFT_LABEL,
    right_label: str = DEFAULT_RIGHT_LABEL,
) -> str:
    """
    Render a report in the requested format

    Raises:
        ValueError: If output_format is not one of FORMATS
    """
    if output_format == "console":
        return format_report_console(report, left_label, right_label)
    if output_format == "json":
        return format_report_json(
            build_report_payload(report, table, order_key, left_label, right_label)
        )
    if output_format == "csv":
        return format_report_csv(report)
    raise ValueError(f"Unsupported output format: {output_format}")


def export_report(text: str, output_path: str | None = None) -> None:
    """
    Write rendered report text

    Args:
        text: Rendered report
        output_path: File to write; stdout if None
    """
    if not text.endswith("\n"):
        text += "\n"

    if output_path is None:
        sys.stdout.write(text)
        sys.stdout.flush()
        return

    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8", newline="") as f:
        f.write(text)

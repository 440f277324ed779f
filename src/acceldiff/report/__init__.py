"""
Comparison report accumulation and formatting.

This submodule holds the bounded DiffReport produced by the diff engine and
renders it for the console, as JSON or as CSV.
"""

from .diff_report import (
    DEFAULT_LEFT_LABEL,
    DEFAULT_RIGHT_LABEL,
    DiffRecord,
    DiffReport,
    Side,
    format_row,
)
from .formatters import (
    FORMATS,
    build_report_payload,
    export_report,
    format_report_console,
    format_report_csv,
    format_report_json,
    render_report,
)

__all__ = [
    'DiffReport',
    'DiffRecord',
    'Side',
    'format_row',
    'DEFAULT_LEFT_LABEL',
    'DEFAULT_RIGHT_LABEL',
    'FORMATS',
    'build_report_payload',
    'export_report',
    'format_report_console',
    'format_report_csv',
    'format_report_json',
    'render_report',
]

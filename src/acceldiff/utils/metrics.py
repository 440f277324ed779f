"""
Metrics for table comparison runs.

Each run gets its own CollectorRegistry so a single CLI invocation exports
exactly the series for the table it compared. The registry can be written to
a file for the node-exporter textfile collector.
"""

import logging
import os
import time

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    write_to_textfile,
)

from acceldiff.report.diff_report import DiffReport

logger = logging.getLogger(__name__)


class ComparisonMetrics:
    """
    Metrics for a Db2 / accelerator comparison run

    Tracks rows compared, differences per side, duration and outcome.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize comparison metrics

        Args:
            registry: Prometheus registry (default: a fresh per-run registry)
        """
        self.registry = registry if registry is not None else CollectorRegistry()

        self.runs_total = Counter(
            "acceldiff_runs_total",
            "Total number of comparison runs",
            ["table_name", "status"],
            registry=self.registry,
        )

        self.duration_seconds = Histogram(
            "acceldiff_run_duration_seconds",
            "Duration of comparison runs in seconds",
            ["table_name"],
            buckets=(1, 5, 10, 30, 60, 120, 300, 600, 1800, 3600),
            registry=self.registry,
        )

        self.last_run_timestamp = Gauge(
            "acceldiff_last_run_timestamp",
            "Timestamp of last comparison run",
            ["table_name"],
            registry=self.registry,
        )

        self.rows_compared_total = Counter(
            "acceldiff_rows_compared_total",
            "Rows read from each side of the comparison",
            ["table_name", "source"],
            registry=self.registry,
        )

        self.differences = Gauge(
            "acceldiff_differences",
            "Differences reported in the last run, by side",
            ["table_name", "side"],
            registry=self.registry,
        )

        self.budget_reached = Gauge(
            "acceldiff_budget_reached",
            "1 if the last run stopped at the difference limit",
            ["table_name"],
            registry=self.registry,
        )

    def record_run(
        self,
        table_name: str,
        status: str,
        duration: float,
    ) -> None:
        """
        Record the outcome of a comparison run

        Args:
            table_name: Schema-qualified table name
            status: in_sync, not_in_sync or failed
            duration: Duration in seconds
        """
        self.runs_total.labels(table_name=table_name, status=status).inc()
        self.duration_seconds.labels(table_name=table_name).observe(duration)
        self.last_run_timestamp.labels(table_name=table_name).set(time.time())

        logger.info(
            f"Recorded comparison run: table={table_name}, "
            f"status={status}, duration={duration:.2f}s"
        )

    def record_report(
        self,
        table_name: str,
        report: DiffReport,
        left_rows_read: int,
        right_rows_read: int,
    ) -> None:
        """
        Record the contents of a finished DiffReport

        Args:
            table_name: Schema-qualified table name
            report: Comparison result
            left_rows_read: Rows read from Db2 for z/OS
            right_rows_read: Rows read from the accelerator
        """
        self.rows_compared_total.labels(table_name=table_name, source="db2").inc(left_rows_read)
        self.rows_compared_total.labels(
            table_name=table_name, source="accelerator"
        ).inc(right_rows_read)

        self.differences.labels(table_name=table_name, side="left_only").set(
            len(report.left_only)
        )
        self.differences.labels(table_name=table_name, side="right_only").set(
            len(report.right_only)
        )
        self.budget_reached.labels(table_name=table_name).set(
            1 if report.budget_reached else 0
        )

        if report.difference_count:
            logger.warning(
                f"Differences detected: table={table_name}, "
                f"left_only={len(report.left_only)}, right_only={len(report.right_only)}"
            )

    def write(self, path: str) -> None:
        """
        Write all metrics in Prometheus text format

        Args:
            path: Destination file; parent directories are created
        """
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        write_to_textfile(path, self.registry)
        logger.debug(f"Metrics written to {path}")

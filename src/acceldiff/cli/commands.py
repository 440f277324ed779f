"""
CLI command implementation.

run_comparison() drives one comparison end to end: open both connections,
derive the OrderKey, stream both sides through the DiffEngine, and write the
report. It returns the process exit status.
"""

import logging
import time
from contextlib import ExitStack

import pyodbc

from acceldiff.compare import (
    Db2CatalogMetadata,
    DiffEngine,
    OrderKeySelector,
    build_ordered_select,
)
from acceldiff.config import (
    EXIT_IN_SYNC,
    EXIT_NOT_IN_SYNC,
    EXIT_RUNTIME_ERROR,
    ComparisonConfig,
)
from acceldiff.db import Db2QueryExecutor, close_connection, open_connections
from acceldiff.exceptions import AccelDiffError
from acceldiff.report import DEFAULT_LEFT_LABEL, DEFAULT_RIGHT_LABEL, export_report, render_report
from acceldiff.utils.logging import ContextLogger
from acceldiff.utils.metrics import ComparisonMetrics

logger = logging.getLogger(__name__)

DB2_SOURCE_NAME = "Db2 for z/OS"
ACCELERATOR_SOURCE_NAME = "accelerator"


def run_comparison(config: ComparisonConfig, metrics: ComparisonMetrics | None = None) -> int:
    """
    Compare a table on Db2 for z/OS with its accelerator copy

    Args:
        config: Validated run configuration
        metrics: Metrics to record into (default: a fresh per-run registry)

    Returns:
        EXIT_IN_SYNC, EXIT_NOT_IN_SYNC or EXIT_RUNTIME_ERROR
    """
    log = ContextLogger(
        "acceldiff.run",
        debug_mode=config.debug,
        table=str(config.table),
        accelerator=config.accelerator,
    )
    metrics = metrics or ComparisonMetrics()
    table_name = str(config.table)
    start_time = time.monotonic()
    status = "failed"

    log.info(f"Starting comparison of {table_name} with accelerator {config.accelerator}")

    try:
        with ExitStack() as stack:
            db2_connection, accelerated_connection = open_connections(config)
            stack.callback(close_connection, db2_connection, DB2_SOURCE_NAME)
            stack.callback(close_connection, accelerated_connection, ACCELERATOR_SOURCE_NAME)

            selector = OrderKeySelector(Db2CatalogMetadata(db2_connection))
            order_key = selector.derive_order_key(config.table)
            log.debug(
                f"Ordering by columns {order_key.as_order_by()} "
                f"({'unique key' if order_key.from_unique_key else 'all columns'})"
            )

            sql = build_ordered_select(config.table, order_key)

            left = stack.enter_context(
                Db2QueryExecutor(db2_connection, DB2_SOURCE_NAME, config.fetch_size).run(sql)
            )
            right = stack.enter_context(
                Db2QueryExecutor(
                    accelerated_connection, ACCELERATOR_SOURCE_NAME, config.fetch_size
                ).run(sql)
            )

            engine = DiffEngine(
                order_key,
                logger=log,
                left_label=DB2_SOURCE_NAME,
                right_label=ACCELERATOR_SOURCE_NAME,
            )
            report = engine.compare(left, right, config.max_differences)
            metrics.record_report(table_name, report, left.rows_read, right.rows_read)

        text = render_report(
            report,
            config.output_format,
            config.table,
            order_key,
            DEFAULT_LEFT_LABEL,
            DEFAULT_RIGHT_LABEL,
        )
        export_report(text, config.output_file)
        if config.output_file:
            log.info(f"Report written to {config.output_file}")

        status = "in_sync" if report.is_empty() else "not_in_sync"
        return EXIT_IN_SYNC if report.is_empty() else EXIT_NOT_IN_SYNC

    except (AccelDiffError, pyodbc.Error, ValueError, OSError) as e:
        log.error(f"Comparison of {table_name} failed: {e}", exc_info=True)
        return EXIT_RUNTIME_ERROR

    finally:
        metrics.record_run(table_name, status, time.monotonic() - start_time)
        if config.metrics_file:
            try:
                metrics.write(config.metrics_file)
            except OSError as e:
                logger.error(f"Failed to write metrics to {config.metrics_file}: {e}")

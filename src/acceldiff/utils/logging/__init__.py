"""
Logging configuration for the comparison tool

Provides console logging with optional colours, rotating file logs and
JSON-formatted records, plus a ContextLogger that is passed explicitly to the
components that log and carries the run's debug flag.

Usage:
    from acceldiff.utils.logging import setup_logging, ContextLogger

    # Setup logging (call once at application startup)
    setup_logging(level="DEBUG", log_file="/var/log/acceldiff/run.log")

    # Logger carrying run context
    log = ContextLogger("acceldiff.run", debug_mode=True, table="SCHEMA.TABLE")
    log.info("Starting comparison", accelerator="ACCEL1")
"""

from .config import setup_logging, shutdown_logging
from .formatters import ConsoleFormatter, JSONFormatter
from .handlers import ContextLogger

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "JSONFormatter",
    "ConsoleFormatter",
    "ContextLogger",
]

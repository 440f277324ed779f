"""
Command-line interface for accelerator data comparison.

This module provides the acceldiff command, which compares one table in
Db2 for z/OS with its copy on an accelerator and exits with:
- 0: data is the same on both sides
- 8: differences were found, or the options are invalid
- 12: the comparison could not be completed
"""

import logging
import sys

from acceldiff.config import EXIT_CONFIGURATION_ERROR
from acceldiff.exceptions import ConfigurationError
from acceldiff.utils.logging import setup_logging, shutdown_logging
from acceldiff.utils.tracing import initialize_tracing, shutdown_tracing

from .credentials import resolve_settings
from .parser import create_parser
from .validation import ValidationResult, validate_config

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the acceldiff CLI"""
    parser = create_parser()
    args = parser.parse_args(argv)

    try:
        settings = resolve_settings(args)
    except ConfigurationError as e:
        setup_logging(level="DEBUG" if args.debug else "INFO")
        logger.error(e.message)
        shutdown_logging()
        sys.exit(EXIT_CONFIGURATION_ERROR)

    setup_logging(
        level="DEBUG" if args.debug else "INFO",
        log_file=settings["log_file"],
        json_format=settings["log_json"],
    )

    result = validate_config(settings)
    if not result.is_valid:
        for message in result.messages():
            print(message, file=sys.stderr)
        parser.print_usage(sys.stderr)
        shutdown_logging()
        sys.exit(EXIT_CONFIGURATION_ERROR)

    config = result.config
    initialize_tracing(
        otlp_endpoint=config.otlp_endpoint,
        console_export=config.trace_console,
    )

    # pyodbc needs the ODBC driver manager, so it is only loaded for a real run
    from .commands import run_comparison

    try:
        exit_code = run_comparison(config)
    finally:
        shutdown_tracing()
        shutdown_logging()

    sys.exit(exit_code)


__all__ = [
    'main',
    'create_parser',
    'resolve_settings',
    'validate_config',
    'ValidationResult',
]


if __name__ == '__main__':
    main()

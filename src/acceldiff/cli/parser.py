"""
Command-line argument parser configuration.

This module sets up the argument parser for the acceldiff CLI tool. Option
values are kept as given; checking them is left to acceldiff.cli.validation
so every problem is reported in one go.
"""

import argparse
import sys

from acceldiff import __version__
from acceldiff.config import DEFAULT_MAX_DIFFERENCES, EXIT_CONFIGURATION_ERROR
from acceldiff.report.formatters import FORMATS


class ComparisonArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with the configuration error status."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EXIT_CONFIGURATION_ERROR, f"{self.prog}: error: {message}\n")


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    parser = ComparisonArgumentParser(
        prog="acceldiff",
        description=(
            "Compare the rows of a Db2 for z/OS table with its copy on an "
            "IBM Db2 Analytics Accelerator or Data Gate"
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit status:
  0   data is the same on both sides
  8   differences were found, or the options are invalid
  12  the comparison could not be completed

Examples:
  # Compare a table, credentials on the command line
  acceldiff -s SALES -n ORDERS -u DBUSER -p secret -c db2host:446/DB2LOC -a ACCEL1

  # Credentials from the environment, report the first 20 differences as JSON
  export DB2_USER=DBUSER DB2_PASSWORD=secret DB2_CONNECTION_URL=db2host:446/DB2LOC
  acceldiff -s SALES -n ORDERS -a ACCEL1 -m 20 --format json -f orders-diff.json

  # Credentials from HashiCorp Vault (secret/database/db2)
  acceldiff --use-vault -s SALES -n ORDERS -a ACCEL1
        """
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f"%(prog)s {__version__}"
    )

    table_group = parser.add_argument_group('table')
    table_group.add_argument('-s', '--table-schema', help='Schema (creator) of the table')
    table_group.add_argument('-n', '--table-name', help='Name of the table')

    connection_group = parser.add_argument_group('connection')
    connection_group.add_argument('-u', '--user', help='Db2 user (env: DB2_USER)')
    connection_group.add_argument('-p', '--password', help='Db2 password (env: DB2_PASSWORD)')
    connection_group.add_argument(
        '-c', '--connection-url', '--connectionUrl',
        dest='connection_url',
        help='Db2 location as host:port/location (env: DB2_CONNECTION_URL)'
    )
    connection_group.add_argument(
        '-a', '--accelerator',
        help='Name of the accelerator (env: DB2_ACCELERATOR)'
    )
    connection_group.add_argument(
        '--odbc-driver',
        help='Name of the Db2 ODBC driver (env: DB2_ODBC_DRIVER, default: IBM DB2 ODBC DRIVER)'
    )
    connection_group.add_argument(
        '--use-vault',
        action='store_true',
        help='Fetch credentials from HashiCorp Vault (VAULT_ADDR, VAULT_TOKEN)'
    )

    output_group = parser.add_argument_group('output')
    output_group.add_argument(
        '-m', '--max-differences',
        default=str(DEFAULT_MAX_DIFFERENCES),
        help=f'Stop after this many differences (default: {DEFAULT_MAX_DIFFERENCES})'
    )
    output_group.add_argument(
        '-f', '--file',
        dest='output_file',
        help='Write the report to this file instead of stdout'
    )
    output_group.add_argument(
        '--format',
        dest='output_format',
        choices=list(FORMATS),
        default='console',
        help='Report format (default: console)'
    )

    logging_group = parser.add_argument_group('logging and monitoring')
    logging_group.add_argument(
        '-d', '--debug',
        action='store_true',
        help='Log every row comparison'
    )
    logging_group.add_argument('--log-file', help='Also log to this file (env: LOG_FILE)')
    logging_group.add_argument(
        '--log-json',
        action='store_true',
        help='Write log records as JSON (env: LOG_JSON)'
    )
    logging_group.add_argument(
        '--metrics-file',
        help='Write Prometheus metrics for the run to this file'
    )
    logging_group.add_argument(
        '--trace-console',
        action='store_true',
        help='Export OpenTelemetry spans to the console'
    )
    logging_group.add_argument(
        '--otlp-endpoint',
        help='Export OpenTelemetry spans to this OTLP collector (env: OTLP_ENDPOINT)'
    )

    return parser

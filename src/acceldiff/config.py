"""
Run configuration for a comparison.

ComparisonConfig is only ever built from validated settings (see
acceldiff.cli.validation); everything downstream can rely on its values.
"""

import re
from dataclasses import dataclass, field

from acceldiff.compare.order_key import TableIdentity
from acceldiff.exceptions import ConfigurationError

EXIT_IN_SYNC = 0
EXIT_NOT_IN_SYNC = 8
EXIT_CONFIGURATION_ERROR = 8
EXIT_RUNTIME_ERROR = 12

DEFAULT_MAX_DIFFERENCES = 100
DEFAULT_ODBC_DRIVER = "IBM DB2 ODBC DRIVER"
DEFAULT_FETCH_SIZE = 1000

# host:port/location, optionally written as a JDBC URL
CONNECTION_URL_PATTERN = re.compile(
    r"^(?:jdbc:db2://)?(?P<host>[^:/\s]+):(?P<port>\d{1,5})/(?P<location>[^/\s:;]+)$",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class ConnectionTarget:
    """Network location of a Db2 for z/OS subsystem."""

    host: str
    port: int
    location: str

    def __str__(self) -> str:
        return f"{self.host}:{self.port}/{self.location}"


def parse_connection_url(url: str) -> ConnectionTarget:
    """
    Parse a Db2 connection URL

    Args:
        url: host:port/location (a leading jdbc:db2:// is accepted)

    Returns:
        ConnectionTarget

    Raises:
        ConfigurationError: If the URL is malformed or the port is out of range
    """
    match = CONNECTION_URL_PATTERN.match(url.strip()) if url else None
    if match is None:
        raise ConfigurationError(
            "--connection-url",
            f"Connection URL {url!r} is not of the form host:port/location",
        )

    port = int(match.group("port"))
    if not 1 <= port <= 65535:
        raise ConfigurationError(
            "--connection-url",
            f"Port {port} in connection URL is out of range",
        )

    return ConnectionTarget(match.group("host"), port, match.group("location"))


@dataclass(frozen=True)
class ComparisonConfig:
    """Validated settings for one comparison run."""

    table: TableIdentity
    connection: ConnectionTarget
    user: str
    password: str = field(repr=False)
    accelerator: str
    max_differences: int = DEFAULT_MAX_DIFFERENCES
    output_format: str = "console"
    output_file: str | None = None
    debug: bool = False
    odbc_driver: str = DEFAULT_ODBC_DRIVER
    fetch_size: int = DEFAULT_FETCH_SIZE
    log_file: str | None = None
    log_json: bool = False
    metrics_file: str | None = None
    trace_console: bool = False
    otlp_endpoint: str | None = None

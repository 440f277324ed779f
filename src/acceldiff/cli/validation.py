"""
Validation of resolved settings before any connection is opened.

All problems are collected so the user can fix them in one go.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from acceldiff.compare.order_key import TableIdentity
from acceldiff.compare.query import is_valid_identifier
from acceldiff.config import (
    DEFAULT_MAX_DIFFERENCES,
    DEFAULT_ODBC_DRIVER,
    ComparisonConfig,
    parse_connection_url,
)
from acceldiff.exceptions import ConfigurationError
from acceldiff.report.formatters import FORMATS

REQUIRED_SETTINGS = (
    ("table_schema", "--table-schema", "Table schema"),
    ("table_name", "--table-name", "Table name"),
    ("user", "--user", "User"),
    ("password", "--password", "Password"),
    ("connection_url", "--connection-url", "Connection URL"),
    ("accelerator", "--accelerator", "Accelerator name"),
)

IDENTIFIER_SETTINGS = (
    ("table_schema", "--table-schema", "Table schema"),
    ("table_name", "--table-name", "Table name"),
    ("accelerator", "--accelerator", "Accelerator name"),
)


@dataclass
class ValidationResult:
    """Outcome of validate_config()."""

    config: ComparisonConfig | None = None
    errors: list[ConfigurationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def messages(self) -> list[str]:
        return [error.message for error in self.errors]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_max_differences(value: Any) -> int:
    """
    Parse the difference budget

    Raises:
        ConfigurationError: If value is not a positive integer
    """
    try:
        budget = int(str(value).strip())
    except ValueError:
        raise ConfigurationError(
            "--max-differences",
            f"Maximum number of differences is not an integer number: {value!r}",
        ) from None

    if budget < 1:
        raise ConfigurationError(
            "--max-differences",
            f"Maximum number of differences must be at least 1, got {budget}",
        )
    return budget


def validate_config(settings: Mapping[str, Any]) -> ValidationResult:
    """
    Check resolved settings and build a ComparisonConfig

    Args:
        settings: Output of resolve_settings()

    Returns:
        ValidationResult with a config when valid, otherwise every error found
    """
    result = ValidationResult()

    for key, option, label in REQUIRED_SETTINGS:
        if _is_blank(settings.get(key)):
            result.errors.append(ConfigurationError(option, f"{label} is missing ({option})"))

    for key, option, label in IDENTIFIER_SETTINGS:
        value = settings.get(key)
        if not _is_blank(value) and not is_valid_identifier(value.strip()):
            result.errors.append(
                ConfigurationError(option, f"{label} {value!r} is not a valid Db2 identifier")
            )

    connection = None
    if not _is_blank(settings.get("connection_url")):
        try:
            connection = parse_connection_url(settings["connection_url"])
        except ConfigurationError as e:
            result.errors.append(e)

    max_differences = DEFAULT_MAX_DIFFERENCES
    if settings.get("max_differences") is not None:
        try:
            max_differences = parse_max_differences(settings["max_differences"])
        except ConfigurationError as e:
            result.errors.append(e)

    output_format = settings.get("output_format") or "console"
    if output_format not in FORMATS:
        result.errors.append(
            ConfigurationError(
                "--format",
                f"Unsupported output format {output_format!r}, choose from {', '.join(FORMATS)}",
            )
        )

    if result.errors:
        return result

    result.config = ComparisonConfig(
        table=TableIdentity(settings["table_schema"].strip(), settings["table_name"].strip()),
        connection=connection,
        user=settings["user"],
        password=settings["password"],
        accelerator=settings["accelerator"].strip(),
        max_differences=max_differences,
        output_format=output_format,
        output_file=settings.get("output_file") or None,
        debug=bool(settings.get("debug")),
        odbc_driver=settings.get("odbc_driver") or DEFAULT_ODBC_DRIVER,
        log_file=settings.get("log_file") or None,
        log_json=bool(settings.get("log_json")),
        metrics_file=settings.get("metrics_file") or None,
        trace_console=bool(settings.get("trace_console")),
        otlp_endpoint=settings.get("otlp_endpoint") or None,
    )
    return result

"""
Credential and settings resolution for the CLI.

Each setting is taken from the command line first, then from HashiCorp Vault
(with --use-vault), then from the environment.
"""

import argparse
import logging
import os
from collections.abc import Mapping
from typing import Any

import requests

from acceldiff.exceptions import ConfigurationError
from acceldiff.utils.vault_client import VaultClient

logger = logging.getLogger(__name__)

ENV_USER = "DB2_USER"
ENV_PASSWORD = "DB2_PASSWORD"
ENV_CONNECTION_URL = "DB2_CONNECTION_URL"
ENV_ACCELERATOR = "DB2_ACCELERATOR"
ENV_ODBC_DRIVER = "DB2_ODBC_DRIVER"
ENV_LOG_FILE = "LOG_FILE"
ENV_LOG_JSON = "LOG_JSON"
ENV_OTLP_ENDPOINT = "OTLP_ENDPOINT"

TRUE_VALUES = ("true", "1", "yes")


def get_credentials_from_vault() -> dict[str, Any]:
    """
    Fetch Db2 credentials from Vault

    Returns:
        Dictionary with user, password, connection_url and, when the secret
        defines one, accelerator

    Raises:
        ConfigurationError: If Vault is not configured or the secret cannot be read
    """
    try:
        secret = VaultClient().get_db2_credentials()
    except (ValueError, requests.RequestException) as e:
        raise ConfigurationError(
            "--use-vault", f"Failed to fetch credentials from Vault: {e}"
        ) from e

    credentials = {
        "user": secret["username"],
        "password": secret["password"],
        "connection_url": secret["connection_url"],
    }
    if secret.get("accelerator"):
        credentials["accelerator"] = secret["accelerator"]

    logger.info("Successfully fetched credentials from Vault")
    return credentials


def resolve_settings(
    args: argparse.Namespace,
    environ: Mapping[str, str] | None = None,
) -> dict[str, Any]:
    """
    Merge command-line options, Vault credentials and environment variables

    Args:
        args: Parsed command-line arguments
        environ: Environment to read (default: os.environ)

    Returns:
        Raw settings for validate_config()

    Raises:
        ConfigurationError: If --use-vault is set and Vault cannot be read
    """
    env = os.environ if environ is None else environ
    vault = get_credentials_from_vault() if args.use_vault else {}

    def pick(arg_value: Any, key: str, env_name: str) -> Any:
        if arg_value:
            return arg_value
        if vault.get(key):
            return vault[key]
        return env.get(env_name)

    return {
        "table_schema": args.table_schema,
        "table_name": args.table_name,
        "user": pick(args.user, "user", ENV_USER),
        "password": pick(args.password, "password", ENV_PASSWORD),
        "connection_url": pick(args.connection_url, "connection_url", ENV_CONNECTION_URL),
        "accelerator": pick(args.accelerator, "accelerator", ENV_ACCELERATOR),
        "odbc_driver": args.odbc_driver or env.get(ENV_ODBC_DRIVER),
        "max_differences": args.max_differences,
        "output_format": args.output_format,
        "output_file": args.output_file,
        "debug": args.debug,
        "log_file": args.log_file or env.get(ENV_LOG_FILE),
        "log_json": args.log_json or env.get(ENV_LOG_JSON, "").lower() in TRUE_VALUES,
        "metrics_file": args.metrics_file,
        "trace_console": args.trace_console,
        "otlp_endpoint": args.otlp_endpoint or env.get(ENV_OTLP_ENDPOINT),
    }

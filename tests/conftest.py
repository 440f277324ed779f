"""
Pytest configuration and fixtures for acceldiff tests.
Provides shared row fixtures, environment isolation and logging cleanup.
"""

import logging

import pytest

from acceldiff.compare import SequenceRowSource


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: fast tests without external dependencies")
    config.addinivalue_line("markers", "property: property-based tests with hypothesis")


ISOLATED_ENV_VARS = (
    "DB2_USER",
    "DB2_PASSWORD",
    "DB2_CONNECTION_URL",
    "DB2_ACCELERATOR",
    "DB2_ODBC_DRIVER",
    "VAULT_ADDR",
    "VAULT_TOKEN",
    "LOG_LEVEL",
    "LOG_FILE",
    "LOG_JSON",
    "LOG_CONSOLE",
    "OTLP_ENDPOINT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove settings the CLI would pick up from the environment."""
    for name in ISOLATED_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def isolated_logging():
    """Drop handlers installed by setup_logging() and restore the root level."""
    root = logging.getLogger()
    saved_level = root.level

    yield root

    # pytest manages its own capture handlers per test phase
    for handler in root.handlers[:]:
        if not type(handler).__module__.startswith("_pytest"):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(saved_level)


@pytest.fixture
def sample_rows() -> list[tuple]:
    """Five rows ordered by their first column."""
    return [
        (1, "ALPHA", "2024-01-01"),
        (2, "BRAVO", "2024-01-02"),
        (3, "CHARLIE", None),
        (4, "DELTA", "2024-01-04"),
        (5, "ECHO", "2024-01-05"),
    ]


@pytest.fixture
def make_source():
    """Factory for in-memory row sources."""
    def _make(rows, name="sequence"):
        return SequenceRowSource(rows, name=name)
    return _make

"""
Exception hierarchy for accelerator data comparison.

Every failure the tool reports to the user derives from AccelDiffError so the
CLI can map it to an exit status in one place.
"""


class AccelDiffError(Exception):
    """Base exception for comparison errors."""

    pass


class ConfigurationError(AccelDiffError):
    """Raised when a required option is missing, blank or malformed."""

    def __init__(self, option: str, message: str):
        self.option = option
        self.message = message
        super().__init__(message)


class MetadataNotFound(AccelDiffError):
    """Raised when the catalog has no column information for a table."""

    pass


class SourceReadError(AccelDiffError):
    """Raised when a row source fails while streaming rows."""

    def __init__(self, source_name: str, message: str):
        self.source_name = source_name
        super().__init__(f"{source_name}: {message}")


class ConnectionSetupError(AccelDiffError):
    """Raised when a database connection or session cannot be prepared."""

    pass

"""Custom exceptions for configuration management."""

from datedfiles.errors import DatedFilesError


class ConfigError(DatedFilesError):
    """Raised when configuration data cannot be loaded, merged, or validated."""

class ConfigurationError(Exception):
    """Base exception for invalid startup configuration."""


class InvalidDurationError(ConfigurationError):
    """Raised when an interval string cannot be parsed into a positive duration."""

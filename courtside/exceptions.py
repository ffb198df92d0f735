"""Exceptions for Courtside."""


class CourtsideError(Exception):
    """Base exception for Courtside."""

    pass


class InvalidEventError(CourtsideError):
    """Raised when an incoming record is missing fields or has bad values."""

    def __init__(self, message: str = "Invalid testimony event."):
        super().__init__(message)


class ConfigurationError(CourtsideError):
    """Raised when a settings file cannot be applied."""

    def __init__(self, message: str = "Invalid configuration."):
        super().__init__(message)

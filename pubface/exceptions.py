"""General custom exceptions.

This module contains custom exception classes for failures that abort a whole resolution run.
"""


class ConfigurationError(Exception):
    """Raised when there's an issue with configuration or settings."""

    def __init__(self, message: str):
        super().__init__(message)


class InterfaceEnumerationError(Exception):
    """Raised when the local network interfaces cannot be listed."""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f'Unable to enumerate local network interfaces: {type(cause).__name__}: {cause}')

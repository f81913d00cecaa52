"""Networking-related custom exceptions.

This module contains custom exception classes for resolution and probing operations.
"""
from typing import Literal


class InvalidIPAddressError(Exception):
    """Exception raised when a string is neither a valid IPv4 nor IPv6 address."""

    def __init__(self, ip_address: str) -> None:
        """Initialize the exception with the invalid IP address.

        Args:
            ip_address (str): The invalid IP address that caused the error.
        """
        self.ip_address = ip_address
        super().__init__(f'Invalid IP address: {ip_address!r}')


class DnsResolutionError(Exception):
    """Raised when a forward or reverse DNS lookup fails."""

    def __init__(self, query_name: str, record_type: str, cause: BaseException) -> None:
        self.query_name = query_name
        self.record_type = record_type
        self.cause = cause
        super().__init__(f'{record_type} lookup for {query_name} failed: {type(cause).__name__}: {cause}')


class ResolutionError(Exception):
    """Raised when the IP resolution service returns an unusable response body."""

    def __init__(self, message: str = 'No response from IP server') -> None:
        super().__init__(message)


class ResolutionTimeoutError(Exception):
    """Raised when a probe does not settle before its deadline.

    The `source` attribute holds the local address the probe was bound to, or False for the default route probe.
    """

    def __init__(self, source: str | Literal[False]) -> None:
        self.source = source
        suffix = f' (source: {source})' if source else ''
        super().__init__(f'Resolving requested resource timed out{suffix}')

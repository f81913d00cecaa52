"""Module for defining networking utility functions."""
import enum
from contextlib import suppress
from ipaddress import AddressValueError, IPv4Address, IPv6Address

import dns.exception
import dns.reversename

from pubface.networking.exceptions import InvalidIPAddressError


class AddressFamily(enum.StrEnum):
    """IP address family, valued by the label used in reports."""

    IPV4 = 'IPv4'
    IPV6 = 'IPv6'

    @property
    def record_type(self):
        """The DNS record type holding addresses of this family."""
        return 'A' if self is AddressFamily.IPV4 else 'AAAA'


def is_ipv4_address(ipv4_address: str, /, *, raise_exception: bool = False):
    """Check if the given IPv4 address is valid.

    If `raise_exception` is True, raises an `InvalidIPAddressError` if the IP address is invalid.

    Args:
        ipv4_address (str): The IP address to check.
        raise_exception (bool): If True, raise an exception for invalid IP addresses.

    Returns:
        bool: True if the IP address is valid, False otherwise.

    Raises:
        InvalidIPAddressError: If the IP address is invalid and `raise_exception` is True.
    """
    with suppress(AddressValueError):
        IPv4Address(ipv4_address)
        return True
    if raise_exception:
        raise InvalidIPAddressError(ipv4_address)
    return False


def is_ipv6_address(ipv6_address: str, /, *, raise_exception: bool = False):
    """Check if the given IPv6 address is valid. Scoped addresses (`fe80::1%eth0`) are accepted."""
    with suppress(AddressValueError):
        IPv6Address(ipv6_address)
        return True
    if raise_exception:
        raise InvalidIPAddressError(ipv6_address)
    return False


def classify_family(ip_address: str, /) -> AddressFamily | None:
    """Return the family of the given IP literal, or None when it is not an IP address at all."""
    if is_ipv4_address(ip_address):
        return AddressFamily.IPV4
    if is_ipv6_address(ip_address):
        return AddressFamily.IPV6
    return None


def reverse_query_name(ip_address: str, /) -> str:
    """Build the PTR query name for the given IP address.

    Any IPv6 scope id (`%eth0`) is dropped before the name is built.

    Args:
        ip_address (str): The IP address to build the query name for.

    Returns:
        str: The fully-qualified reverse DNS name, with a trailing dot.

    Raises:
        InvalidIPAddressError: If the input is neither a valid IPv4 nor IPv6 address.
    """
    if classify_family(ip_address) is None:
        raise InvalidIPAddressError(ip_address)

    try:
        return dns.reversename.from_address(ip_address.partition('%')[0]).to_text()
    except dns.exception.SyntaxError as e:
        raise InvalidIPAddressError(ip_address) from e


def format_host_for_url(ip_address: str, /):
    """Return the IP address in the form it takes inside a URL authority (IPv6 bracketed)."""
    if classify_family(ip_address) is AddressFamily.IPV6:
        return f'[{ip_address}]'
    return ip_address

"""This module provides functionality for performing reverse DNS lookups.

It includes a function `lookup` which resolves hostnames from IP addresses.
"""
import logging

import dns.exception
import dns.resolver

from pubface.networking.exceptions import InvalidIPAddressError
from pubface.networking.utils import reverse_query_name

logger = logging.getLogger(__name__)


def lookup(target_ip: str, resolver: dns.resolver.Resolver) -> str | None:
    """Perform a reverse DNS lookup for the given IP address.

    If a hostname is found, it returns the hostname. If no valid hostname
    is found or an error occurs during lookup, it returns None.

    Args:
        target_ip (str): The IP address to look up.
        resolver (dns.resolver.Resolver): The resolver used to send the PTR query.

    Returns:
        str | None: The resolved hostname, or None if no valid hostname is found.
    """
    try:
        rev_name = reverse_query_name(target_ip)
        answer = resolver.resolve(rev_name, 'PTR')
    except (InvalidIPAddressError, dns.exception.DNSException) as e:
        logger.debug('PTR lookup for %s failed: %s', target_ip, e)
        return None

    ptr_record = next(iter(answer), None)
    if not ptr_record:
        return None

    hostname = str(ptr_record).rstrip('.')
    if not hostname:
        return None

    return hostname

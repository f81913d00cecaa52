"""Ask the IP resolution service which public address it sees for a given local source address."""
import logging
from typing import Literal

import dns.resolver
import requests
from pydantic.dataclasses import dataclass

from pubface.networking.dns_cache import ResolverDNSCache
from pubface.networking.exceptions import ResolutionError
from pubface.networking.reverse_dns import lookup as reverse_dns_lookup
from pubface.networking.unsafe_https import (
    HEADERS,
    create_unsafe_https_session,
    pin_url_to_address,
)
from pubface.networking.utils import AddressFamily
from pubface.utils import format_type_error

logger = logging.getLogger(__name__)


@dataclass(kw_only=True, slots=True)
class ProbeResult:
    local_address:     str | Literal[False]
    ip:                str
    name:              str | None           = None
    family:            AddressFamily | None = None
    default_interface: bool | None          = None

    def to_report_entry(self):
        """Return the result as a report entry, leaving out unset optional fields."""
        entry: dict[str, str | bool] = {
            'localAddress': self.local_address,
            'ip': self.ip,
        }
        if self.name is not None:
            entry['name'] = self.name
        if self.family is not None:
            entry['family'] = str(self.family)
        if self.default_interface is not None:
            entry['defaultInterface'] = self.default_interface
        return entry


def parse_resolution_response(response: requests.Response):
    """Extract the public IP from the IP resolution service response.

    Raises:
        ResolutionError: If the body is not JSON or carries no `ip` string.
    """
    try:
        data = response.json()
    except requests.exceptions.JSONDecodeError as e:
        raise ResolutionError(f'Invalid JSON response from IP server: {e}') from e

    if not isinstance(data, dict):
        raise ResolutionError(format_type_error(data, dict))
    ip = data.get('ip')
    if not ip or not isinstance(ip, str):
        raise ResolutionError

    return ip


class ProbeRunner:
    """Run single probes against the IP resolution service.

    Args:
        service_url (str): URL of the IP resolution service.
        cache (ResolverDNSCache): Refreshed cache holding the pinned service addresses.
        resolver (dns.resolver.Resolver): Resolver used for PTR lookups of the discovered addresses.
        timeout (float): Connect and read timeout of the HTTP request, in seconds.
    """

    def __init__(self, service_url: str, cache: ResolverDNSCache, resolver: dns.resolver.Resolver, *, timeout: float):
        self.service_url = service_url
        self.cache = cache
        self.resolver = resolver
        self.timeout = timeout

    def create_session(self, local_address: str | Literal[False], server_hostname: str | None = None):
        return create_unsafe_https_session(
            HEADERS,
            local_address=local_address or None,
            server_hostname=server_hostname,
        )

    def fetch_public_ip(self, local_address: str | Literal[False], family: AddressFamily):
        url = self.service_url
        headers = {}
        server_hostname = None

        pinned_host = self.cache.host_for(family)
        if pinned_host is not None and pinned_host != self.cache.hostname:
            url, headers['Host'] = pin_url_to_address(url, pinned_host)
            server_hostname = self.cache.hostname

        with self.create_session(local_address, server_hostname) as session:
            response = session.get(url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            return parse_resolution_response(response)

    def probe(self, local_address: str | Literal[False], family: AddressFamily):
        """Discover the public IP used when connecting from `local_address`.

        Args:
            local_address (str | Literal[False]): Local IP to bind to, or False for the default route.
            family (AddressFamily): Family of the pinned service address to connect to.

        Returns:
            ProbeResult: The public IP, with its PTR hostname when one resolves.

        Raises:
            ResolutionError: If the service response is unusable.
            requests.RequestException: If the HTTP request fails.
        """
        ip = self.fetch_public_ip(local_address, family)
        name = reverse_dns_lookup(ip, self.resolver)

        logger.debug('Probe from %s returned %s (%s)', local_address or 'default route', ip, name)
        return ProbeResult(local_address=local_address, ip=ip, name=name)

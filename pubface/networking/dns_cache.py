"""Pin the IP resolution service's own address, per address family, for a limited time.

Every probe of a run connects to the same pinned address instead of resolving the
service hostname on its own. `ResolverDNSCache.refresh` must complete before any
probe reads the cache.
"""
import dataclasses
import logging
import time
from urllib.parse import urlsplit

import dns.exception
import dns.resolver

from pubface.constants.standalone import RESOLVER_HOST_TTL
from pubface.exceptions import ConfigurationError
from pubface.networking.exceptions import DnsResolutionError
from pubface.networking.utils import AddressFamily, classify_family

logger = logging.getLogger(__name__)


@dataclasses.dataclass(kw_only=True, slots=True)
class CacheEntry:
    host:     str | None = None
    expires:  float = 0.0
    error:    DnsResolutionError | None = None
    disabled: bool = False

    def is_usable(self):
        """Return True if probes of this family have an address to connect to."""
        return not self.disabled and self.host is not None

    def needs_refresh(self, now: float):
        return not self.disabled and (self.host is None or self.error is not None or self.expires <= now)


class ResolverDNSCache:
    """Per-family cache of the IP resolution service address.

    Args:
        service_url (str): URL of the IP resolution service.
        resolver (dns.resolver.Resolver): Resolver used for the A/AAAA lookups.
        ttl (float): Seconds a resolved address stays fresh.
    """

    def __init__(self, service_url: str, resolver: dns.resolver.Resolver, *, ttl: float = RESOLVER_HOST_TTL):
        hostname = urlsplit(service_url).hostname
        if not hostname:
            raise ConfigurationError(f'No host in IP resolution service URL: {service_url!r}')

        self.service_url = service_url
        self.hostname = hostname
        self.resolver = resolver
        self.ttl = ttl
        self._entries: dict[AddressFamily, CacheEntry] = {}

    def get(self, family: AddressFamily):
        return self._entries.get(family)

    def is_usable(self, family: AddressFamily):
        entry = self._entries.get(family)
        return entry is not None and entry.is_usable()

    def host_for(self, family: AddressFamily):
        """Return the pinned service address for the given family, or None."""
        entry = self._entries.get(family)
        if entry is None or not entry.is_usable():
            return None
        return entry.host

    def snapshot(self):
        """Return a copy of the cache state keyed by family."""
        return {family: dataclasses.replace(entry) for family, entry in self._entries.items()}

    def refresh(self, now: float | None = None):
        """Bring both family slots up to date.

        A literal IP service host pins its own family and disables the other one.
        Otherwise every empty, expired or failed slot is looked up again. Lookup
        failures are recorded on the slot and never raised; a previously resolved
        host is kept so probes can still use it.

        Args:
            now (float | None): Current `time.monotonic()` value, taken when omitted.
        """
        if now is None:
            now = time.monotonic()

        literal_family = classify_family(self.hostname)
        if literal_family is not None:
            for family in AddressFamily:
                if family is literal_family:
                    self._entries[family] = CacheEntry(host=self.hostname, expires=now + self.ttl)
                else:
                    self._entries[family] = CacheEntry(disabled=True)
            return

        for family in AddressFamily:
            entry = self._entries.setdefault(family, CacheEntry())
            if not entry.needs_refresh(now):
                logger.debug('Cached %s address %s for %s is still fresh', family.record_type, entry.host, self.hostname)
                continue
            self._refresh_entry(entry, family, now)

    def _refresh_entry(self, entry: CacheEntry, family: AddressFamily, now: float):
        record_type = family.record_type

        try:
            answer = self.resolver.resolve(self.hostname, record_type)
        except dns.exception.DNSException as e:
            entry.error = DnsResolutionError(self.hostname, record_type, e)
            logger.info('%s', entry.error)
            return

        addresses = [rdata.address for rdata in answer]
        if not addresses:
            return

        entry.host = addresses[0]
        entry.expires = now + self.ttl
        entry.error = None
        logger.debug('Pinned %s address %s for %s', record_type, entry.host, self.hostname)

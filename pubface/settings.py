"""Load the resolution settings from the environment."""
import logging
import os
from collections.abc import Mapping
from dataclasses import field
from urllib.parse import urlsplit

from pydantic.dataclasses import dataclass

from pubface.constants.standalone import DEFAULT_RESOLV_TIMEOUT, DEFAULT_RESOLV_URL
from pubface.exceptions import ConfigurationError
from pubface.networking.utils import classify_family

logger = logging.getLogger(__name__)

SUPPORTED_URL_SCHEMES = ('http', 'https')


def parse_timeout(value: str | float | None):
    """Convert a timeout setting to seconds, falling back to the default for missing, invalid or non-positive values."""
    if value is None or value == '':
        return DEFAULT_RESOLV_TIMEOUT

    try:
        timeout = float(value)
    except ValueError:
        logger.warning('Ignoring invalid RESOLV_TIMEOUT %r, using %s seconds', value, DEFAULT_RESOLV_TIMEOUT)
        return DEFAULT_RESOLV_TIMEOUT

    if not timeout > 0:
        logger.warning('Ignoring non-positive RESOLV_TIMEOUT %r, using %s seconds', value, DEFAULT_RESOLV_TIMEOUT)
        return DEFAULT_RESOLV_TIMEOUT

    return timeout


def parse_nameservers(value: str | None):
    if not value:
        return []
    return [nameserver.strip() for nameserver in value.split(',') if nameserver.strip()]


@dataclass(kw_only=True, slots=True)
class Settings:
    """Resolution settings.

    Attributes:
        service_url (str): IP resolution service queried by every probe (`RESOLV_URL`).
        timeout (float): Per-probe deadline in seconds (`RESOLV_TIMEOUT`).
        nameservers (list[str]): Nameservers for the A/AAAA/PTR lookups, empty for the system ones (`RESOLV_NAMESERVERS`).
    """
    service_url: str       = DEFAULT_RESOLV_URL
    timeout:     float     = DEFAULT_RESOLV_TIMEOUT
    nameservers: list[str] = field(default_factory=list)

    def __post_init__(self):
        parts = urlsplit(self.service_url)
        if parts.scheme not in SUPPORTED_URL_SCHEMES or not parts.hostname:
            raise ConfigurationError(f'Invalid IP resolution service URL: {self.service_url!r}')

        for nameserver in self.nameservers:
            if classify_family(nameserver) is None:
                raise ConfigurationError(f'Invalid nameserver address: {nameserver!r}')

        self.timeout = parse_timeout(self.timeout)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str] | None = None):
        """Build the settings from `RESOLV_URL`, `RESOLV_TIMEOUT` and `RESOLV_NAMESERVERS`."""
        if environ is None:
            environ = os.environ

        return cls(
            service_url=environ.get('RESOLV_URL') or DEFAULT_RESOLV_URL,
            timeout=parse_timeout(environ.get('RESOLV_TIMEOUT')),
            nameservers=parse_nameservers(environ.get('RESOLV_NAMESERVERS')),
        )

"""Provide HTTP sessions with a relaxed SSL context, bound to a local source address.

Certificate verification is disabled: the IP resolution service is reached through
the address pinned by the DNS cache, so its identity is trusted by IP rather than
by certificate chain.
"""
import ssl
from ssl import SSLContext
from urllib.parse import urlsplit, urlunsplit

import requests
import urllib3
from requests.adapters import HTTPAdapter
from urllib3.exceptions import InsecureRequestWarning
from urllib3.poolmanager import PoolManager
from urllib3.util import create_urllib3_context

from pubface.constants.local import USER_AGENT
from pubface.networking.utils import format_host_for_url

# Workaround unsecure request warnings
urllib3.disable_warnings(InsecureRequestWarning)

HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept': 'application/json',
}


# Allow custom ssl context, source address and SNI for adapters
class CustomSSLContextHTTPAdapter(HTTPAdapter):
    def __init__(
        self,
        ssl_context: SSLContext | None,
        *,
        source_address: tuple[str, int] | None = None,
        server_hostname: str | None = None,
        **kwargs,
    ):
        self.ssl_context = ssl_context
        self.source_address = source_address
        self.server_hostname = server_hostname
        super().__init__(**kwargs)

    def init_poolmanager(self, connections: int, maxsize: int, block: bool = False, **pool_kwargs):  # noqa: ARG002, FBT001, FBT002
        connection_pool_kw = {}
        if self.source_address is not None:
            connection_pool_kw['source_address'] = self.source_address
        if self.server_hostname is not None:
            connection_pool_kw['server_hostname'] = self.server_hostname

        self.poolmanager = PoolManager(
            num_pools=connections,
            maxsize=maxsize,
            block=block,
            ssl_context=self.ssl_context,
            **connection_pool_kw,
        )


def create_unsafe_ssl_context():
    context = create_urllib3_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def create_unsafe_https_session(
    headers: dict[str, str] | None = None,
    *,
    local_address: str | None = None,
    server_hostname: str | None = None,
):
    """Create a session that skips certificate checks and optionally binds its sockets.

    Args:
        headers (dict[str, str] | None): Headers sent with every request.
        local_address (str | None): Local IP to bind outgoing connections to. None lets the OS pick the route.
        server_hostname (str | None): Name sent as TLS SNI when connecting to an IP address.

    Returns:
        requests.Session: The configured session.
    """
    source_address = None if local_address is None else (local_address, 0)
    adapter = CustomSSLContextHTTPAdapter(
        create_unsafe_ssl_context(),
        source_address=source_address,
        server_hostname=server_hostname,
    )

    session = requests.session()
    session.mount('https://', adapter)
    session.mount('http://', adapter)
    if headers:
        session.headers.update(headers)
    session.verify = False

    return session


def pin_url_to_address(url: str, ip_address: str):
    """Replace the host of `url` with `ip_address`, keeping the port.

    Returns:
        tuple[str, str]: The rewritten URL and the original `Host` header value.
    """
    parts = urlsplit(url)
    netloc = format_host_for_url(ip_address)
    if parts.port is not None:
        netloc = f'{netloc}:{parts.port}'
    return urlunsplit(parts._replace(netloc=netloc)), parts.netloc.rpartition('@')[2]

"""Module for defining constants that don't require imports or functions."""

TITLE = 'pubface'
DEFAULT_RESOLV_URL = 'https://api.nodemailer.com/'
DEFAULT_RESOLV_TIMEOUT = 5.0
RESOLVER_HOST_TTL = 10 * 60.0  # seconds a pinned resolver service address stays fresh

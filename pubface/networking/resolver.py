"""Build the DNS resolver shared by the forward (A/AAAA) and reverse (PTR) lookups."""
import dns.resolver

from pubface.exceptions import ConfigurationError


def create_resolver(nameservers: list[str] | None = None, lifetime: float | None = None):
    """Create a `dns.resolver.Resolver`.

    Args:
        nameservers (list[str] | None): Nameserver IPs to query. When empty, the system configuration is used.
        lifetime (float | None): Total time allowed for a single query, in seconds.

    Returns:
        dns.resolver.Resolver: The configured resolver.

    Raises:
        ConfigurationError: If no nameservers are given and the system has no resolver configuration.
    """
    if nameservers:
        resolver = dns.resolver.Resolver(configure=False)
        resolver.nameservers = list(nameservers)
    else:
        try:
            resolver = dns.resolver.Resolver()
        except dns.resolver.NoResolverConfiguration as e:
            raise ConfigurationError(f'No system DNS configuration found, set RESOLV_NAMESERVERS: {e}') from e

    if lifetime is not None:
        resolver.lifetime = lifetime

    return resolver

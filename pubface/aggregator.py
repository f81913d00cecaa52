"""Resolve the public address behind every local network interface.

One probe is launched per local interface address plus one unbound probe per address
family. The unbound probe reveals the public address of the default route, which is
then matched against the per-interface results to flag the default interface.
"""
import dataclasses
import logging
import time
from collections.abc import Callable
from concurrent.futures import Future
from typing import Literal

import requests

from pubface.networking.dns_cache import ResolverDNSCache
from pubface.networking.exceptions import (
    InvalidIPAddressError,
    ResolutionError,
    ResolutionTimeoutError,
)
from pubface.networking.interfaces import InterfaceRecord, get_public_interfaces
from pubface.networking.probe import ProbeResult, ProbeRunner
from pubface.networking.resolver import create_resolver
from pubface.networking.timeout_guard import submit_daemon, with_timeout
from pubface.networking.utils import AddressFamily, is_ipv6_address
from pubface.settings import Settings
from pubface.utils import pluralize

logger = logging.getLogger(__name__)

PROBE_FAILURES = (
    requests.RequestException,
    OSError,
    ResolutionError,
    ResolutionTimeoutError,
    InvalidIPAddressError,
)

type InterfaceEnumerator = Callable[[], dict[AddressFamily, list[InterfaceRecord]]]


@dataclasses.dataclass(frozen=True, slots=True)
class PendingProbe:
    future:     Future[ProbeResult]
    tag:        str | Literal[False]
    started_at: float


@dataclasses.dataclass(frozen=True, slots=True)
class ProbeOutcome:
    tag:    str | Literal[False]
    result: ProbeResult | None = None
    error:  BaseException | None = None

    @property
    def fulfilled(self):
        return self.result is not None


def settle_all(pending_probes: list[PendingProbe], timeout: float):
    """Wait for every probe, turning each one into an outcome instead of letting failures escape."""
    outcomes: list[ProbeOutcome] = []

    for pending in pending_probes:
        try:
            result = with_timeout(pending.future, timeout, pending.tag, started_at=pending.started_at)
        except PROBE_FAILURES as e:
            logger.info('Probe from %s failed: %s', pending.tag or 'default route', e)
            outcomes.append(ProbeOutcome(pending.tag, error=e))
        else:
            outcomes.append(ProbeOutcome(pending.tag, result=result))

    return outcomes


def get_result_family(result: ProbeResult):
    return AddressFamily.IPV6 if is_ipv6_address(result.ip or result.local_address or '') else AddressFamily.IPV4


def sort_key(result: ProbeResult):
    return (str(result.family), not result.default_interface, result.name or result.ip)


def sort_report(results: list[ProbeResult]):
    """Order by family label, then the default interface first, then hostname (or IP)."""
    return sorted(results, key=sort_key)


def reconcile_results(results: list[ProbeResult]):
    """Merge the default route results into the per-interface results.

    An interface result with the same public IP as its family's default route result
    is flagged as the default interface, and that default result is consumed. Only the
    first matching interface is flagged. A default result that no interface consumed
    is reported by itself, flagged as the default interface.

    Args:
        results (list[ProbeResult]): Fulfilled probe results, default route ones included.

    Returns:
        list[ProbeResult]: The sorted report.
    """
    defaults: dict[AddressFamily, ProbeResult | None] = {}
    interface_results: list[ProbeResult] = []

    for result in results:
        result.family = get_result_family(result)
        if result.local_address is False:
            defaults[result.family] = result
        else:
            interface_results.append(result)

    for result in interface_results:
        default = defaults.get(result.family)
        if default is not None and default.ip == result.ip:
            result.default_interface = True
            defaults[result.family] = None

    for family in AddressFamily:
        default = defaults.get(family)
        if default is not None:
            default.default_interface = True
            interface_results.append(default)

    return sort_report(interface_results)


class PublicInterfaceResolver:
    """Run resolution cycles against the IP resolution service.

    The DNS cache is kept between calls of `resolve`, so its pinned service addresses
    are reused for as long as they stay fresh.

    Args:
        settings (Settings): Service URL, timeout and nameservers.
        cache (ResolverDNSCache | None): Cache of the service addresses. Built from `settings` when omitted.
        runner (ProbeRunner | None): Probe runner. Built from `settings` when omitted.
        enumerate_interfaces (InterfaceEnumerator): Source of the local interface addresses.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        cache: ResolverDNSCache | None = None,
        runner: ProbeRunner | None = None,
        enumerate_interfaces: InterfaceEnumerator = get_public_interfaces,
    ):
        self.settings = settings

        if cache is None or runner is None:
            resolver = create_resolver(settings.nameservers, lifetime=settings.timeout)
            if cache is None:
                cache = ResolverDNSCache(settings.service_url, resolver)
            if runner is None:
                runner = ProbeRunner(settings.service_url, cache, resolver, timeout=settings.timeout)

        self.cache = cache
        self.runner = runner
        self.enumerate_interfaces = enumerate_interfaces

    def launch_probes(self, interfaces: dict[AddressFamily, list[InterfaceRecord]]):
        pending_probes: list[PendingProbe] = []

        for family in AddressFamily:
            if not self.cache.is_usable(family):
                logger.info('No %s address for %s, skipping %s probes', family.record_type, self.cache.hostname, family)
                continue

            local_addresses: list[str | Literal[False]] = [False]
            local_addresses.extend(record.address for record in interfaces.get(family, []))
            for local_address in local_addresses:
                future = submit_daemon(self.runner.probe, local_address, family, name=f'pubface_probe_{family}_{local_address or "default"}')
                pending_probes.append(PendingProbe(future, local_address, time.monotonic()))

        return pending_probes

    def resolve(self):
        """Resolve the public addresses of all local interfaces.

        Probe failures and timeouts only remove that probe from the report.

        Returns:
            list[ProbeResult]: The sorted report.

        Raises:
            InterfaceEnumerationError: If the local interfaces cannot be listed.
        """
        interfaces = self.enumerate_interfaces()

        # Must complete before any probe reads the cache
        self.cache.refresh()

        # Deadlines count from submission, timed out probes are abandoned
        pending_probes = self.launch_probes(interfaces)
        if not pending_probes:
            return []

        outcomes = settle_all(pending_probes, self.settings.timeout)

        results = [outcome.result for outcome in outcomes if outcome.fulfilled]
        logger.info('%d of %d probe%s succeeded', len(results), len(outcomes), pluralize(len(outcomes)))

        return reconcile_results(results)


def resolve_public_interfaces(settings: Settings | None = None):
    """Resolve the public addresses of all local interfaces with the given (or environment) settings."""
    if settings is None:
        settings = Settings.from_environ()
    return PublicInterfaceResolver(settings).resolve()

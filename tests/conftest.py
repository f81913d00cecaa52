"""Shared fakes for the DNS resolver and the probe runner.

No test talks to the network: DNS answers and probe outcomes are scripted.
"""
import threading

import dns.resolver
import pytest

from pubface.networking.exceptions import ResolutionError
from pubface.networking.probe import ProbeResult

HANG = object()


class FakeRdata:
    def __init__(self, address: str):
        self.address = address

    def __str__(self):
        return self.address


class FakeResolver:
    """Answer queries from a `{(qname, rdtype): answer}` script.

    An answer may be a list of records or an exception to raise. Unscripted queries raise NXDOMAIN.
    """

    def __init__(self, answers: dict | None = None):
        self.answers = dict(answers or {})
        self.queries: list[tuple[str, str]] = []

    def resolve(self, qname, rdtype):
        self.queries.append((str(qname), rdtype))
        answer = self.answers.get((str(qname), rdtype))
        if answer is None:
            raise dns.resolver.NXDOMAIN
        if isinstance(answer, BaseException):
            raise answer
        return answer


class FakeRunner:
    """Return scripted probe outcomes keyed by `(family, local_address)`.

    An outcome is an `(ip, name)` tuple, an exception to raise, or `HANG` to block
    until `release` is set.
    """

    def __init__(self, outcomes: dict):
        self.outcomes = outcomes
        self.calls: list[tuple] = []
        self.release = threading.Event()
        self._lock = threading.Lock()

    def probe(self, local_address, family):
        with self._lock:
            self.calls.append((family, local_address))

        outcome = self.outcomes[(family, local_address)]
        if outcome is HANG:
            self.release.wait(10)
            raise ResolutionError
        if isinstance(outcome, BaseException):
            raise outcome

        ip, name = outcome
        return ProbeResult(local_address=local_address, ip=ip, name=name)


@pytest.fixture
def service_resolver():
    """Resolver knowing an A and an AAAA record for the resolution service."""
    return FakeResolver({
        ('api.example.com', 'A'): [FakeRdata('192.0.2.1'), FakeRdata('192.0.2.2')],
        ('api.example.com', 'AAAA'): [FakeRdata('2001:db8::1')],
    })

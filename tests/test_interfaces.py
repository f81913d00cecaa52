import socket
from collections import namedtuple

import psutil
import pytest

from pubface.exceptions import InterfaceEnumerationError
from pubface.networking.interfaces import InterfaceRecord, get_public_interfaces
from pubface.networking.utils import AddressFamily

snicaddr = namedtuple('snicaddr', ['family', 'address', 'netmask', 'broadcast', 'ptp'])


def test_loopback_and_link_layer_addresses_are_skipped(monkeypatch):
    monkeypatch.setattr(psutil, 'net_if_addrs', lambda: {
        'lo': [
            snicaddr(socket.AF_INET, '127.0.0.1', '255.0.0.0', None, None),
            snicaddr(socket.AF_INET6, '::1', 'ffff:ffff:ffff:ffff:ffff:ffff:ffff:ffff', None, None),
        ],
        'eth0': [
            snicaddr(psutil.AF_LINK, '00:11:22:33:44:55', None, 'ff:ff:ff:ff:ff:ff', None),
            snicaddr(socket.AF_INET, '10.0.0.5', '255.255.255.0', '10.0.0.255', None),
            snicaddr(socket.AF_INET6, 'fe80::1%eth0', 'ffff:ffff:ffff:ffff::', None, None),
        ],
        'eth1': [
            snicaddr(socket.AF_INET, '10.0.1.6', '255.255.255.0', '10.0.1.255', None),
        ],
    })

    interfaces = get_public_interfaces()

    assert interfaces[AddressFamily.IPV4] == [
        InterfaceRecord(iface='eth0', family=AddressFamily.IPV4, address='10.0.0.5'),
        InterfaceRecord(iface='eth1', family=AddressFamily.IPV4, address='10.0.1.6'),
    ]
    assert interfaces[AddressFamily.IPV6] == [
        InterfaceRecord(iface='eth0', family=AddressFamily.IPV6, address='fe80::1%eth0'),
    ]


def test_no_interfaces_yields_empty_families(monkeypatch):
    monkeypatch.setattr(psutil, 'net_if_addrs', dict)

    assert get_public_interfaces() == {AddressFamily.IPV4: [], AddressFamily.IPV6: []}


def test_enumeration_failure_is_wrapped(monkeypatch):
    def net_if_addrs():
        raise PermissionError('denied')

    monkeypatch.setattr(psutil, 'net_if_addrs', net_if_addrs)

    with pytest.raises(InterfaceEnumerationError) as exc_info:
        get_public_interfaces()

    assert isinstance(exc_info.value.cause, PermissionError)

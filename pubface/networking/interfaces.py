"""List the host's non-loopback IP addresses, grouped by address family."""
import socket
from ipaddress import ip_address

import psutil
from pydantic.dataclasses import dataclass

from pubface.exceptions import InterfaceEnumerationError
from pubface.networking.utils import AddressFamily

SOCKET_FAMILIES = {
    socket.AF_INET: AddressFamily.IPV4,
    socket.AF_INET6: AddressFamily.IPV6,
}


@dataclass(frozen=True, kw_only=True, slots=True)
class InterfaceRecord:
    iface:   str
    family:  AddressFamily
    address: str


def is_internal_address(address: str, /):
    """Return True for loopback addresses."""
    return ip_address(address).is_loopback


def get_public_interfaces():
    """Enumerate the local non-internal interface addresses.

    Returns:
        dict[AddressFamily, list[InterfaceRecord]]: Records for every family, in `psutil` order.

    Raises:
        InterfaceEnumerationError: If the operating system refuses to list the interfaces.
    """
    try:
        interfaces = psutil.net_if_addrs()
    except (OSError, psutil.Error) as e:
        raise InterfaceEnumerationError(e) from e

    public_interfaces: dict[AddressFamily, list[InterfaceRecord]] = {family: [] for family in AddressFamily}
    for iface, addresses in interfaces.items():
        for snicaddr in addresses:
            family = SOCKET_FAMILIES.get(snicaddr.family)
            if family is None or is_internal_address(snicaddr.address):
                continue
            public_interfaces[family].append(InterfaceRecord(iface=iface, family=family, address=snicaddr.address))

    return public_interfaces

"""UDP transmission of magic packets."""

import errno
import ipaddress
import socket
from typing import Optional

from wol.core.address import HardwareAddress, SecureOnToken
from wol.core.packet import build_magic_packet

DEFAULT_HOST = "255.255.255.255"
DEFAULT_IPV6_HOST = "ff02::1"
DEFAULT_PORT = 9

Destination = tuple[str, int]


def _family_for(host: str) -> int:
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return socket.AF_INET
    return socket.AF_INET6 if ip.version == 6 else socket.AF_INET


def resolve_destination(host: str, port: int, prefer_ipv6: bool = False) -> Destination:
    """
    Turn a host (IP literal or DNS name) and port into a socket destination.

    Literal IPv4 and IPv6 addresses are used as given. DNS names are looked
    up; the first result wins, or the first IPv6 result with ``prefer_ipv6``.

    Args:
        host: IP address or DNS name; normally a broadcast or multicast address
        port: UDP port
        prefer_ipv6: Only accept IPv6 results when resolving a DNS name

    Returns:
        ``(ip, port)`` tuple

    Raises:
        socket.gaierror: If the resolver fails
        OSError: If the name is not a valid host name, or no suitable
            address was found
    """
    try:
        return str(ipaddress.ip_address(host)), port
    except ValueError:
        pass

    try:
        infos = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)
    except UnicodeError as exc:
        # IDNA rejects empty labels and labels over 63 characters
        raise OSError(errno.EINVAL, f"Invalid host name {host!r}") from exc
    if prefer_ipv6:
        infos = [info for info in infos if info[0] == socket.AF_INET6]
    if not infos:
        raise OSError(errno.EHOSTUNREACH, f"Host {host} not reachable")
    sockaddr = infos[0][4]
    return str(sockaddr[0]), port


def send_packet(payload: bytes, destination: Destination, source_port: Optional[int] = None) -> None:
    """
    Send ``payload`` as a single UDP datagram with broadcast permission.

    The socket binds the unspecified address of the destination's family,
    on ``source_port`` or an ephemeral port, and is closed before returning.
    Errors are raised unmodified and never retried; success only means the
    datagram left the local stack.

    Args:
        payload: Bytes to send
        destination: ``(ip, port)`` tuple
        source_port: Local port to bind, ephemeral if None

    Raises:
        OSError: On socket creation, bind or send failure
    """
    host, _ = destination
    family = _family_for(host)
    bind_host = "::" if family == socket.AF_INET6 else "0.0.0.0"
    with socket.socket(family, socket.SOCK_DGRAM) as sock:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
        sock.bind((bind_host, source_port or 0))
        sent = sock.sendto(payload, destination)
        if sent != len(payload):
            raise OSError(errno.EMSGSIZE, f"Sent {sent} of {len(payload)} bytes")


def send_magic_packet(
    address: HardwareAddress,
    secure_on: Optional[SecureOnToken] = None,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    source_port: Optional[int] = None,
    prefer_ipv6: bool = False,
) -> Destination:
    """
    Build a magic packet for ``address`` and send it to ``host``:``port``.

    Returns:
        The resolved ``(ip, port)`` destination the packet was sent to
    """
    packet = build_magic_packet(address, secure_on)
    destination = resolve_destination(host, port, prefer_ipv6=prefer_ipv6)
    send_packet(packet, destination, source_port=source_port)
    return destination

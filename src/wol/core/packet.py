"""Magic packet assembly."""

from typing import BinaryIO, Optional

from wol.core.address import HardwareAddress, SecureOnToken

SYNC_STREAM = b"\xff" * 6
ADDRESS_REPEAT = 16
PACKET_SIZE = len(SYNC_STREAM) + 6 * ADDRESS_REPEAT  # 102
SECURE_ON_PACKET_SIZE = PACKET_SIZE + 6  # 108


def _check_types(address: HardwareAddress, secure_on: Optional[SecureOnToken]) -> None:
    if not isinstance(address, HardwareAddress):
        raise TypeError(f"address must be a HardwareAddress, got {type(address).__name__}")
    if secure_on is not None and not isinstance(secure_on, SecureOnToken):
        raise TypeError(f"secure_on must be a SecureOnToken, got {type(secure_on).__name__}")


def build_magic_packet(
    address: HardwareAddress, secure_on: Optional[SecureOnToken] = None
) -> bytes:
    """
    Build the magic packet that wakes ``address``.

    Layout: six 0xFF bytes, the hardware address sixteen times, then the
    SecureOn token once if one is given.

    Args:
        address: Hardware address of the machine to wake
        secure_on: Optional SecureOn token to append

    Returns:
        102 bytes, or 108 bytes with a SecureOn token
    """
    _check_types(address, secure_on)
    packet = SYNC_STREAM + address.octets * ADDRESS_REPEAT
    if secure_on is not None:
        packet += secure_on.octets
    return packet


def write_magic_packet(
    sink: BinaryIO, address: HardwareAddress, secure_on: Optional[SecureOnToken] = None
) -> int:
    """Write a magic packet to a binary stream and return the number of bytes written."""
    packet = build_magic_packet(address, secure_on)
    sink.write(packet)
    return len(packet)

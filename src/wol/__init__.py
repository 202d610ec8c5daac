"""wol: wake up remote hosts with Wake-on-LAN magic packets."""

from wol.core.address import (
    HardwareAddress,
    InvalidFormat,
    SecureOnToken,
    parse_hardware_address,
    parse_secure_on,
)
from wol.core.packet import build_magic_packet
from wol.core.transmit import send_magic_packet, send_packet
from wol.core.wakeup_file import WakeRequest, iter_wakeup_file, read_wakeup_file

__version__ = "0.3.0"

__all__ = [
    "HardwareAddress",
    "InvalidFormat",
    "SecureOnToken",
    "WakeRequest",
    "build_magic_packet",
    "iter_wakeup_file",
    "parse_hardware_address",
    "parse_secure_on",
    "read_wakeup_file",
    "send_magic_packet",
    "send_packet",
]

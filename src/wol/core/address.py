"""Hardware addresses and SecureOn tokens."""

from dataclasses import dataclass
from typing import Optional, TypeVar

# Accepted textual forms:
#   "XX:XX:XX:XX:XX:XX"   e.g. "12:13:14:15:16:17"
#   "XX-XX-XX-XX-XX-XX"   e.g. "aa-bb-cc-dd-ee-ff"
_SEPARATORS = ":-"
_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")
OCTET_COUNT = 6

_T = TypeVar("_T", bound="_Octets")


class InvalidFormat(ValueError):
    """Raised for a malformed address, token or wakeup-file line."""

    def __init__(self, text: str, reason: str, line_no: Optional[int] = None) -> None:
        self.text = text
        self.reason = reason
        self.line_no = line_no
        super().__init__(text, reason, line_no)

    def __str__(self) -> str:
        message = f"{self.reason}: {self.text!r}"
        if self.line_no is not None:
            return f"Line {self.line_no}: {message}"
        return message


def _parse_octets(text: str) -> bytes:
    if not isinstance(text, str):
        raise TypeError(f"expected str, got {type(text).__name__}")
    value = text.strip()
    separator = next((c for c in value if c in _SEPARATORS), None)
    if separator is None:
        raise InvalidFormat(text, "expected octets separated by ':' or '-'")
    other = _SEPARATORS.replace(separator, "")
    if other in value:
        raise InvalidFormat(text, "mixed ':' and '-' separators")

    groups = value.split(separator)
    if len(groups) != OCTET_COUNT:
        raise InvalidFormat(text, f"expected {OCTET_COUNT} octets, got {len(groups)}")
    for group in groups:
        if len(group) != 2 or not _HEX_DIGITS.issuperset(group):
            raise InvalidFormat(text, f"invalid octet {group!r}")
    return bytes.fromhex("".join(groups))


@dataclass(frozen=True, order=True, repr=False)
class _Octets:
    octets: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.octets, (bytes, bytearray)):
            raise TypeError(f"expected bytes, got {type(self.octets).__name__}")
        if len(self.octets) != OCTET_COUNT:
            raise ValueError(f"expected {OCTET_COUNT} bytes, got {len(self.octets)}")
        # Normalise bytearray input so instances stay hashable
        object.__setattr__(self, "octets", bytes(self.octets))

    @classmethod
    def parse(cls: type[_T], text: str) -> _T:
        """Parse ``XX:XX:XX:XX:XX:XX`` or ``XX-XX-XX-XX-XX-XX`` (hex, any case)."""
        return cls(_parse_octets(text))

    @classmethod
    def from_bytes(cls: type[_T], value: bytes) -> _T:
        """Wrap 6 raw bytes (``bytes`` or ``bytearray``)."""
        return cls(bytes(value))

    def format(self, separator: str = ":") -> str:
        if separator not in (":", "-"):
            raise ValueError(f"separator must be ':' or '-', got {separator!r}")
        return separator.join(f"{b:02X}" for b in self.octets)

    def __bytes__(self) -> bytes:
        return self.octets

    def __str__(self) -> str:
        return self.format(":")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.format(':')!r})"


class HardwareAddress(_Octets):
    """A 6-byte link-layer (MAC) address."""


class SecureOnToken(_Octets):
    """
    A 6-byte SecureOn password.

    Some network interfaces only act on a magic packet that ends with the
    token configured in their firmware. The token travels in clear text,
    so it keeps off casual wake-ups but is not a secret.
    """


def parse_hardware_address(text: str) -> HardwareAddress:
    """
    Parse a hardware address.

    Args:
        text: Address such as "12:13:14:15:16:17" or "12-13-14-15-16-17"

    Returns:
        The parsed HardwareAddress

    Raises:
        InvalidFormat: If the text is not six uniformly separated hex octets
    """
    return HardwareAddress.parse(text)


def parse_secure_on(text: str) -> SecureOnToken:
    """Parse a SecureOn token; same grammar as :func:`parse_hardware_address`."""
    return SecureOnToken.parse(text)

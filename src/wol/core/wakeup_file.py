"""
Wakeup file parsing.

A wakeup file lists one machine per line::

    # office
    12:13:14:15:16:17
    aa-bb-cc-dd-ee-ff host=192.168.1.255 port=7
    26:CE:55:A5:C2:33 host=nas.lan secure-on=12:13:14:15:16:42

Each line is a hardware address followed by optional ``key=value``
modifiers (``host``, ``port``, ``secure-on``). Blank lines and lines
starting with ``#`` are skipped.
"""

import re
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from wol.core.address import HardwareAddress, InvalidFormat, SecureOnToken

COMMENT_MARKER = "#"
MODIFIERS = ("host", "port", "secure-on")

_PORT_RE = re.compile(r"^[0-9]{1,5}$")


@dataclass(frozen=True)
class WakeRequest:
    """One machine to wake, with optional per-target overrides."""

    hardware_address: HardwareAddress
    secure_on: Optional[SecureOnToken] = None
    host: Optional[str] = None
    port: Optional[int] = None
    # 1-based line in the wakeup file this request came from
    line_no: Optional[int] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.hardware_address, HardwareAddress):
            raise TypeError(
                f"hardware_address must be a HardwareAddress, "
                f"got {type(self.hardware_address).__name__}"
            )
        if self.secure_on is not None and not isinstance(self.secure_on, SecureOnToken):
            raise TypeError(
                f"secure_on must be a SecureOnToken, got {type(self.secure_on).__name__}"
            )


ParseResult = Union[WakeRequest, InvalidFormat]


def _parse_port(value: str, line: str, line_no: Optional[int]) -> int:
    if not _PORT_RE.match(value) or int(value) > 65535:
        raise InvalidFormat(line, f"invalid port {value!r}", line_no)
    return int(value)


def parse_line(line: str, line_no: Optional[int] = None) -> Optional[WakeRequest]:
    """
    Parse one wakeup-file line.

    Args:
        line: Raw line, surrounding whitespace allowed
        line_no: 1-based line number attached to errors and the request

    Returns:
        The WakeRequest, or None for blank and comment lines

    Raises:
        InvalidFormat: If the address, a modifier or its value is invalid
    """
    stripped = line.strip()
    if not stripped or stripped.startswith(COMMENT_MARKER):
        return None

    first, *tokens = stripped.split()
    try:
        address = HardwareAddress.parse(first)
    except InvalidFormat as exc:
        raise InvalidFormat(
            stripped, f"invalid hardware address {first!r} ({exc.reason})", line_no
        ) from exc

    values: dict[str, str] = {}
    for token in tokens:
        key, sep, value = token.partition("=")
        key = key.lower()
        if not sep:
            raise InvalidFormat(stripped, f"expected key=value modifier, got {token!r}", line_no)
        if key not in MODIFIERS:
            raise InvalidFormat(stripped, f"unknown modifier {key!r}", line_no)
        if key in values:
            raise InvalidFormat(stripped, f"duplicate modifier {key!r}", line_no)
        if not value:
            raise InvalidFormat(stripped, f"empty value for {key!r}", line_no)
        values[key] = value

    secure_on = None
    if "secure-on" in values:
        try:
            secure_on = SecureOnToken.parse(values["secure-on"])
        except InvalidFormat as exc:
            raise InvalidFormat(
                stripped, f"invalid SecureOn token ({exc.reason})", line_no
            ) from exc

    port = _parse_port(values["port"], stripped, line_no) if "port" in values else None

    return WakeRequest(
        hardware_address=address,
        secure_on=secure_on,
        host=values.get("host"),
        port=port,
        line_no=line_no,
    )


def _decode_line(raw: bytes, line_no: int) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        text = raw.decode("utf-8", errors="replace").strip()
        raise InvalidFormat(text, "invalid UTF-8", line_no) from exc


def iter_wakeup_file(
    lines: Union[str, bytes, Iterable[Union[str, bytes]]], fail_fast: bool = True
) -> Iterator[ParseResult]:
    """
    Lazily parse wakeup-file lines into WakeRequests.

    By default the first malformed line raises InvalidFormat out of the
    iterator. With ``fail_fast=False`` each error is yielded in place of
    its line and parsing continues. Byte lines are decoded as UTF-8 one at
    a time, so an undecodable line is just another malformed line.

    Args:
        lines: Open file (text or binary), any iterable of lines, or a whole
            document as str or bytes
        fail_fast: Abort on the first malformed line

    Yields:
        WakeRequest per target line, or InvalidFormat when not failing fast
    """
    if isinstance(lines, (str, bytes)):
        lines = lines.splitlines()
    for line_no, line in enumerate(lines, start=1):
        try:
            if isinstance(line, bytes):
                line = _decode_line(line, line_no)
            request = parse_line(line, line_no)
        except InvalidFormat as exc:
            if fail_fast:
                raise
            yield exc
            continue
        if request is not None:
            yield request


def read_wakeup_file(path: Union[str, Path], fail_fast: bool = True) -> Iterator[ParseResult]:
    """
    Open a wakeup file (UTF-8) and parse it lazily; ``-`` reads stdin.

    The file is closed once the iterator is exhausted or closed. Reading
    the file again needs a new call.
    """
    if str(path) == "-":
        stream = getattr(sys.stdin, "buffer", sys.stdin)
        yield from iter_wakeup_file(stream, fail_fast=fail_fast)
        return
    with open(path, "rb") as f:
        yield from iter_wakeup_file(f, fail_fast=fail_fast)

"""Sequential wake-up of one or more targets."""

import logging
import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Optional, Union

from wol.core.address import HardwareAddress, InvalidFormat, SecureOnToken
from wol.core.transmit import (
    DEFAULT_HOST,
    DEFAULT_IPV6_HOST,
    DEFAULT_PORT,
    Destination,
    send_magic_packet,
)
from wol.core.wakeup_file import WakeRequest

logger = logging.getLogger(__name__)


@dataclass
class WakeSettings:
    """Run-wide defaults; per-request overrides take precedence."""

    host: Optional[str] = None
    port: int = DEFAULT_PORT
    prefer_ipv6: bool = False
    secure_on: Optional[SecureOnToken] = None
    wait: float = 0.0  # seconds between packets
    fail_fast: bool = False
    source_port: Optional[int] = None

    @property
    def effective_host(self) -> str:
        if self.host:
            return self.host
        return DEFAULT_IPV6_HOST if self.prefer_ipv6 else DEFAULT_HOST


@dataclass
class WakeResult:
    """Outcome of one wake attempt (or one invalid input entry)."""

    request: Optional[WakeRequest]
    success: bool
    destination: Optional[Destination] = None
    error: Optional[Exception] = None

    @property
    def label(self) -> str:
        if self.request is not None:
            return str(self.request.hardware_address)
        if isinstance(self.error, InvalidFormat) and self.error.line_no is not None:
            return f"line {self.error.line_no}"
        return "<invalid entry>"


def requests_from_addresses(
    addresses: Iterable[Union[str, HardwareAddress]],
) -> list[WakeRequest]:
    """
    Build WakeRequests for plain hardware addresses.

    Raises:
        InvalidFormat: If a string address is malformed
    """
    requests: list[WakeRequest] = []
    for address in addresses:
        if isinstance(address, str):
            address = HardwareAddress.parse(address)
        requests.append(WakeRequest(hardware_address=address))
    return requests


def wake_target(request: WakeRequest, settings: WakeSettings) -> WakeResult:
    """
    Send one magic packet for ``request``.

    Socket and resolver errors are captured in the result, never retried.
    """
    host = request.host or settings.effective_host
    port = request.port if request.port is not None else settings.port
    secure_on = request.secure_on if request.secure_on is not None else settings.secure_on

    logger.info("Waking up %s via %s:%d", request.hardware_address, host, port)
    try:
        destination = send_magic_packet(
            request.hardware_address,
            secure_on,
            host=host,
            port=port,
            source_port=settings.source_port,
            prefer_ipv6=settings.prefer_ipv6,
        )
    except OSError as exc:
        logger.info("Failed to wake up %s: %s", request.hardware_address, exc)
        return WakeResult(request=request, success=False, error=exc)

    logger.debug("Magic packet for %s sent to %s:%d", request.hardware_address, *destination)
    return WakeResult(request=request, success=True, destination=destination)


def iter_wake(
    items: Iterable[Union[WakeRequest, InvalidFormat]],
    settings: WakeSettings,
) -> Iterator[WakeResult]:
    """
    Wake each target in turn, yielding one result per item.

    InvalidFormat items (from a wakeup file parsed with ``fail_fast=False``)
    become failed results without sending anything. ``settings.wait``
    seconds pass between consecutive packets. A failure stops the run only
    when ``settings.fail_fast`` is set.
    """
    sent = 0
    for item in items:
        if isinstance(item, InvalidFormat):
            logger.info("Skipping invalid entry: %s", item)
            result = WakeResult(request=None, success=False, error=item)
        else:
            if sent and settings.wait > 0:
                time.sleep(settings.wait)
            result = wake_target(item, settings)
            sent += 1
        yield result
        if not result.success and settings.fail_fast:
            logger.warning("Stopping after failure for %s", result.label)
            return


def wake_all(
    items: Iterable[Union[WakeRequest, InvalidFormat]],
    settings: WakeSettings,
) -> list[WakeResult]:
    """Run :func:`iter_wake` to completion and collect the results."""
    return list(iter_wake(items, settings))

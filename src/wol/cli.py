"""Command-line interface for wol."""

import itertools
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import click

from wol import __version__
from wol.core.address import HardwareAddress, InvalidFormat, SecureOnToken
from wol.core.wake import WakeSettings, iter_wake, requests_from_addresses
from wol.core.wakeup_file import read_wakeup_file

DEFAULT_CONFIG = Path.home() / ".config" / "wol" / "config.yaml"


class _OctetsType(click.ParamType):
    """Click parameter type for hardware addresses and SecureOn tokens."""

    def __init__(self, kind: type, name: str) -> None:
        self.kind = kind
        self.name = name

    def convert(
        self, value: Any, param: Optional[click.Parameter], ctx: Optional[click.Context]
    ) -> Any:
        if isinstance(value, self.kind):
            return value
        try:
            return self.kind.parse(value)
        except InvalidFormat as exc:
            self.fail(str(exc), param, ctx)


HARDWARE_ADDRESS = _OctetsType(HardwareAddress, "mac-address")
SECURE_ON = _OctetsType(SecureOnToken, "secure-on")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
        datefmt="%H:%M:%S",
    )


def _load_settings(config: Optional[str]) -> WakeSettings:
    from wol.config.loader import ConfigError, load_settings

    if config is None:
        # The default file is optional
        if not DEFAULT_CONFIG.exists():
            return WakeSettings()
        path = DEFAULT_CONFIG
    else:
        path = Path(config)
        if not path.exists():
            click.echo(f"Config file not found: {path}", err=True)
            sys.exit(1)
    try:
        return load_settings(path)
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)


@click.command(context_settings={"help_option_names": ["-?", "--help"]})
@click.version_option(version=__version__, prog_name="wol")
@click.option(
    "--host",
    "-h",
    "-i",
    "--ipaddr",
    default=None,
    help="Send the magic packet to HOST (IP or DNS name, usually a broadcast "
    "address). Defaults to 255.255.255.255, or ff02::1 with --ipv6.",
)
@click.option("--ipv6", "-6", is_flag=True, help="Prefer IPv6 when resolving HOST")
@click.option(
    "--port", "-p", type=click.IntRange(0, 65535), default=None, help="Destination port [default: 9]"
)
@click.option(
    "--file",
    "-f",
    "wakeup_file",
    type=click.Path(exists=True, dir_okay=False, allow_dash=True),
    default=None,
    help="Read targets from a wakeup file, or stdin if FILE is -",
)
@click.option("--passwd", type=SECURE_ON, default=None, help="SecureOn password XX:XX:XX:XX:XX:XX")
@click.option(
    "--wait",
    "-w",
    type=click.IntRange(min=0),
    default=None,
    metavar="MSECS",
    help="Wait MSECS milliseconds between magic packets",
)
@click.option(
    "--keep-going",
    is_flag=True,
    help="Report invalid wakeup file lines and continue instead of aborting",
)
@click.option("--fail-fast", is_flag=True, help="Stop at the first target that fails")
@click.option(
    "--config",
    "-c",
    default=None,
    envvar="WOL_CONFIG",
    show_default=str(DEFAULT_CONFIG),
    help="Path to wol config.yaml",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.argument("hardware_addresses", nargs=-1, type=HARDWARE_ADDRESS, metavar="[MAC-ADDRESS]...")
def main(
    host: Optional[str],
    ipv6: bool,
    port: Optional[int],
    wakeup_file: Optional[str],
    passwd: Optional[SecureOnToken],
    wait: Optional[int],
    keep_going: bool,
    fail_fast: bool,
    config: Optional[str],
    verbose: bool,
    hardware_addresses: tuple[HardwareAddress, ...],
) -> None:
    """Wake up hosts with Wake-on-LAN magic packets."""
    _setup_logging(verbose)
    if not hardware_addresses and not wakeup_file:
        raise click.UsageError("Give at least one MAC-ADDRESS or --file.")

    settings = _load_settings(config)
    if host:
        settings.host = host
    if ipv6:
        settings.prefer_ipv6 = True
    if port is not None:
        settings.port = port
    if passwd is not None:
        settings.secure_on = passwd
    if wait is not None:
        settings.wait = wait / 1000
    if fail_fast:
        settings.fail_fast = True

    items: Any = requests_from_addresses(hardware_addresses)
    if wakeup_file:
        items = itertools.chain(items, read_wakeup_file(wakeup_file, fail_fast=not keep_going))

    failed = False
    try:
        for result in iter_wake(items, settings):
            if result.success:
                ip, dest_port = result.destination or (settings.effective_host, settings.port)
                click.echo(f"Sent magic packet for {result.label} to {ip} port {dest_port}")
            else:
                failed = True
                click.echo(f"Failed to wake up {result.label}: {result.error}", err=True)
    except InvalidFormat as exc:
        click.echo(f"Invalid wakeup file {wakeup_file}: {exc}", err=True)
        sys.exit(1)
    except OSError as exc:
        click.echo(f"Cannot read wakeup file {wakeup_file}: {exc}", err=True)
        sys.exit(1)

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()

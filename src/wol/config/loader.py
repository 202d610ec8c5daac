"""YAML defaults file loader and validator."""

from pathlib import Path
from typing import Any, Optional

import yaml

from wol.core.address import InvalidFormat, SecureOnToken
from wol.core.wake import WakeSettings

# Example:
#   defaults:
#     host: 192.168.1.255
#     port: 9
#     ipv6: false
#     wait: 0.5
#     secure_on: "12:13:14:15:16:42"
_TOP_LEVEL_KEYS = {"defaults"}
_DEFAULT_KEYS = {"host", "port", "ipv6", "wait", "secure_on"}


class ConfigError(Exception):
    """Raised for invalid or unreadable configuration."""


def load_config(path: Path) -> Optional[dict[str, Any]]:
    """
    Load configuration from a YAML file.

    Args:
        path: Path to the YAML config file

    Returns:
        Parsed configuration dictionary, or None if file is empty

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If YAML is invalid
    """
    with open(path, encoding="utf-8") as f:
        result: Optional[dict[str, Any]] = yaml.safe_load(f)
        return result


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Any) -> list[str]:
    """
    Validate a loaded configuration dictionary.

    Returns:
        List of validation error messages (empty list = valid)
    """
    if not isinstance(config, dict):
        return ["Config root must be a YAML mapping"]

    errors: list[str] = []
    for key in config:
        if key not in _TOP_LEVEL_KEYS:
            errors.append(f"unknown key '{key}'")

    defaults = config.get("defaults") or {}
    if not isinstance(defaults, dict):
        errors.append("'defaults' must be a mapping")
        return errors

    for key in defaults:
        if key not in _DEFAULT_KEYS:
            errors.append(f"defaults: unknown key '{key}'")

    host = defaults.get("host")
    if host is not None and (not isinstance(host, str) or not host.strip()):
        errors.append("defaults.host: must be a non-empty string")

    port = defaults.get("port")
    if port is not None and (
        not isinstance(port, int) or isinstance(port, bool) or not 0 <= port <= 65535
    ):
        errors.append(f"defaults.port: must be an integer between 0 and 65535, got {port!r}")

    ipv6 = defaults.get("ipv6")
    if ipv6 is not None and not isinstance(ipv6, bool):
        errors.append("defaults.ipv6: must be true or false")

    wait = defaults.get("wait")
    if wait is not None and (not _is_number(wait) or wait < 0):
        errors.append(f"defaults.wait: must be a non-negative number of seconds, got {wait!r}")

    secure_on = defaults.get("secure_on")
    if secure_on is not None:
        if not isinstance(secure_on, str):
            # Unquoted 12:13:14:15:16:17 is a YAML 1.1 sexagesimal integer
            errors.append("defaults.secure_on: must be a quoted string")
        else:
            try:
                SecureOnToken.parse(secure_on)
            except InvalidFormat as exc:
                errors.append(f"defaults.secure_on: {exc}")

    return errors


def settings_from_config(config: Optional[dict[str, Any]]) -> WakeSettings:
    """
    Construct WakeSettings from a validated config dict.

    Args:
        config: Parsed and validated config dictionary, or None

    Returns:
        WakeSettings with the file's defaults applied
    """
    defaults = (config or {}).get("defaults") or {}
    settings = WakeSettings()
    if defaults.get("host"):
        settings.host = defaults["host"].strip()
    if defaults.get("port") is not None:
        settings.port = int(defaults["port"])
    settings.prefer_ipv6 = bool(defaults.get("ipv6", False))
    settings.wait = float(defaults.get("wait") or 0)
    if defaults.get("secure_on"):
        settings.secure_on = SecureOnToken.parse(defaults["secure_on"])
    return settings


def load_settings(path: Path) -> WakeSettings:
    """
    Load, validate and convert a defaults file in one step.

    Raises:
        ConfigError: If the file is unreadable, not YAML, or fails validation
    """
    try:
        raw = load_config(path)
    except OSError as exc:
        raise ConfigError(f"Cannot read config file {path}: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    if raw is None:
        return WakeSettings()
    errors = validate_config(raw)
    if errors:
        raise ConfigError("; ".join(errors))
    return settings_from_config(raw)

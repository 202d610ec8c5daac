"""Tests for the wol CLI."""

import errno
from pathlib import Path
from unittest.mock import MagicMock, patch

import yaml
from click.testing import CliRunner, Result

from wol.cli import main
from wol.core.address import HardwareAddress, SecureOnToken

MAC = HardwareAddress(bytes([0x12, 0x13, 0x14, 0x15, 0x16, 0x17]))


# ── Helpers ───────────────────────────────────────────────────────────────────


def _invoke(tmp_path: Path, args: list[str], defaults: object = None, **kwargs: object) -> Result:
    """Run the CLI against a config file in tmp_path (empty unless defaults given)."""
    cfg = tmp_path / "config.yaml"
    cfg.write_text(yaml.dump({"defaults": defaults}) if defaults else "")
    return CliRunner().invoke(main, ["--config", str(cfg), *args], **kwargs)  # type: ignore[arg-type]


def _ok(host: str = "255.255.255.255", port: int = 9) -> tuple[str, int]:
    return host, port


# ── Argument handling ─────────────────────────────────────────────────────────


class TestArguments:
    def test_no_targets_is_usage_error(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, [])
        assert result.exit_code == 2
        assert "MAC-ADDRESS" in result.output

    def test_invalid_address_is_usage_error(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, ["12:13-14:15:16:17"])
        assert result.exit_code == 2
        assert "mixed" in result.output

    def test_invalid_passwd_is_usage_error(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, ["--passwd", "aa:bb", "12:13:14:15:16:17"])
        assert result.exit_code == 2

    def test_port_out_of_range(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, ["--port", "70000", "12:13:14:15:16:17"])
        assert result.exit_code == 2

    def test_help_short_flag(self) -> None:
        result = CliRunner().invoke(main, ["-?"])
        assert result.exit_code == 0
        assert "--host" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "wol" in result.output


# ── Sending ───────────────────────────────────────────────────────────────────


class TestSend:
    @patch("wol.core.wake.send_magic_packet")
    def test_single_address_defaults(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok()

        result = _invoke(tmp_path, ["12:13:14:15:16:17"])

        assert result.exit_code == 0
        assert "12:13:14:15:16:17" in result.output
        mock_send.assert_called_once_with(
            MAC, None, host="255.255.255.255", port=9, source_port=None, prefer_ipv6=False
        )

    @patch("wol.core.wake.send_magic_packet")
    def test_options_applied(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok("192.168.1.255", 7)

        result = _invoke(
            tmp_path,
            ["-h", "192.168.1.255", "-p", "7", "--passwd", "aa-bb-cc-dd-ee-ff", "12-13-14-15-16-17"],
        )

        assert result.exit_code == 0
        mock_send.assert_called_once_with(
            MAC,
            SecureOnToken(b"\xaa\xbb\xcc\xdd\xee\xff"),
            host="192.168.1.255",
            port=7,
            source_port=None,
            prefer_ipv6=False,
        )

    @patch("wol.core.wake.send_magic_packet")
    def test_ipv6_default_host(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok("ff02::1")

        result = _invoke(tmp_path, ["-6", "12:13:14:15:16:17"])

        assert result.exit_code == 0
        assert mock_send.call_args.kwargs["host"] == "ff02::1"
        assert mock_send.call_args.kwargs["prefer_ipv6"] is True

    @patch("wol.core.wake.send_magic_packet")
    def test_config_defaults_used(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok("10.0.0.255", 7)

        result = _invoke(
            tmp_path, ["12:13:14:15:16:17"], defaults={"host": "10.0.0.255", "port": 7}
        )

        assert result.exit_code == 0
        assert mock_send.call_args.kwargs["host"] == "10.0.0.255"
        assert mock_send.call_args.kwargs["port"] == 7

    @patch("wol.core.wake.send_magic_packet")
    def test_options_override_config(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok("192.0.2.255", 9)

        _invoke(
            tmp_path,
            ["--ipaddr", "192.0.2.255", "--port", "9", "12:13:14:15:16:17"],
            defaults={"host": "10.0.0.255", "port": 7},
        )

        assert mock_send.call_args.kwargs["host"] == "192.0.2.255"
        assert mock_send.call_args.kwargs["port"] == 9

    @patch("wol.core.wake.time.sleep")
    @patch("wol.core.wake.send_magic_packet")
    def test_wait_in_milliseconds(
        self, mock_send: MagicMock, mock_sleep: MagicMock, tmp_path: Path
    ) -> None:
        mock_send.return_value = _ok()

        _invoke(tmp_path, ["-w", "250", "12:13:14:15:16:17", "aa:bb:cc:dd:ee:ff"])

        mock_sleep.assert_called_once_with(0.25)

    @patch("wol.core.wake.send_magic_packet")
    def test_send_failure_exits_1_and_continues(
        self, mock_send: MagicMock, tmp_path: Path
    ) -> None:
        mock_send.side_effect = [OSError(errno.ENETUNREACH, "Network is unreachable"), _ok()]

        result = _invoke(tmp_path, ["12:13:14:15:16:17", "aa:bb:cc:dd:ee:ff"])

        assert result.exit_code == 1
        assert mock_send.call_count == 2
        assert "Failed to wake up 12:13:14:15:16:17" in result.output

    @patch("wol.core.wake.send_magic_packet")
    def test_fail_fast_stops(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.side_effect = OSError(errno.ENETUNREACH, "Network is unreachable")

        result = _invoke(tmp_path, ["--fail-fast", "12:13:14:15:16:17", "aa:bb:cc:dd:ee:ff"])

        assert result.exit_code == 1
        assert mock_send.call_count == 1


# ── Wakeup files ──────────────────────────────────────────────────────────────


class TestWakeupFile:
    @patch("wol.core.wake.send_magic_packet")
    def test_file_targets(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok()
        wakeup = tmp_path / "hosts.txt"
        wakeup.write_text("# lab\n12:13:14:15:16:17 port=7\n\naa:bb:cc:dd:ee:ff host=nas.lan\n")

        result = _invoke(tmp_path, ["-f", str(wakeup)])

        assert result.exit_code == 0
        assert mock_send.call_count == 2
        first, second = mock_send.call_args_list
        assert first.kwargs["port"] == 7
        assert second.kwargs["host"] == "nas.lan"

    @patch("wol.core.wake.send_magic_packet")
    def test_invalid_line_aborts_by_default(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok()
        wakeup = tmp_path / "hosts.txt"
        wakeup.write_text("12:13:14:15:16:17\nbogus\naa:bb:cc:dd:ee:ff\n")

        result = _invoke(tmp_path, ["-f", str(wakeup)])

        assert result.exit_code == 1
        assert "Line 2" in result.output
        assert mock_send.call_count == 1

    @patch("wol.core.wake.send_magic_packet")
    def test_keep_going_reports_and_continues(
        self, mock_send: MagicMock, tmp_path: Path
    ) -> None:
        mock_send.return_value = _ok()
        wakeup = tmp_path / "hosts.txt"
        wakeup.write_text("12:13:14:15:16:17\nbogus\naa:bb:cc:dd:ee:ff\n")

        result = _invoke(tmp_path, ["--keep-going", "-f", str(wakeup)])

        assert result.exit_code == 1
        assert mock_send.call_count == 2
        assert "line 2" in result.output

    @patch("wol.core.wake.send_magic_packet")
    def test_keep_going_past_undecodable_line(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok()
        wakeup = tmp_path / "hosts.txt"
        wakeup.write_bytes(b"12:13:14:15:16:17 host=127.0.0.1\n\xff\xfe bad\naa:bb:cc:dd:ee:ff\n")

        result = _invoke(tmp_path, ["--keep-going", "-f", str(wakeup)])

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert mock_send.call_count == 2
        assert "line 2" in result.output

    @patch("wol.core.wake.send_magic_packet")
    def test_stdin(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok()

        result = _invoke(tmp_path, ["-f", "-"], input="12:13:14:15:16:17\n")

        assert result.exit_code == 0
        mock_send.assert_called_once()

    @patch("wol.core.wake.send_magic_packet")
    def test_addresses_and_file_combined(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok()
        wakeup = tmp_path / "hosts.txt"
        wakeup.write_text("aa:bb:cc:dd:ee:ff\n")

        result = _invoke(tmp_path, ["-f", str(wakeup), "12:13:14:15:16:17"])

        assert result.exit_code == 0
        assert [c.args[0] for c in mock_send.call_args_list] == [
            MAC,
            HardwareAddress(b"\xaa\xbb\xcc\xdd\xee\xff"),
        ]

    def test_missing_file_is_usage_error(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, ["-f", str(tmp_path / "missing.txt")])
        assert result.exit_code == 2


# ── Config errors ─────────────────────────────────────────────────────────────


class TestConfigErrors:
    def test_explicit_missing_config_exits_1(self, tmp_path: Path) -> None:
        result = CliRunner().invoke(
            main, ["--config", str(tmp_path / "nope.yaml"), "12:13:14:15:16:17"]
        )
        assert result.exit_code == 1
        assert "Config file not found" in result.output

    @patch("wol.core.wake.send_magic_packet")
    def test_default_missing_config_ignored(
        self, mock_send: MagicMock, tmp_path: Path
    ) -> None:
        mock_send.return_value = _ok()
        with patch("wol.cli.DEFAULT_CONFIG", tmp_path / "absent.yaml"):
            result = CliRunner().invoke(main, ["12:13:14:15:16:17"], env={"WOL_CONFIG": None})
        assert result.exit_code == 0

    @patch("wol.core.wake.send_magic_packet")
    def test_default_config_loaded(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok()
        cfg = tmp_path / "config.yaml"
        cfg.write_text(yaml.dump({"defaults": {"port": 7}}))
        with patch("wol.cli.DEFAULT_CONFIG", cfg):
            result = CliRunner().invoke(main, ["12:13:14:15:16:17"], env={"WOL_CONFIG": None})
        assert result.exit_code == 0
        assert mock_send.call_args.kwargs["port"] == 7

    @patch("wol.core.wake.send_magic_packet")
    def test_config_from_environment(self, mock_send: MagicMock, tmp_path: Path) -> None:
        mock_send.return_value = _ok()
        cfg = tmp_path / "env.yaml"
        cfg.write_text(yaml.dump({"defaults": {"host": "10.1.1.255"}}))
        result = CliRunner().invoke(main, ["12:13:14:15:16:17"], env={"WOL_CONFIG": str(cfg)})
        assert result.exit_code == 0
        assert mock_send.call_args.kwargs["host"] == "10.1.1.255"

    def test_invalid_config_exits_1(self, tmp_path: Path) -> None:
        result = _invoke(tmp_path, ["12:13:14:15:16:17"], defaults={"port": 70000})
        assert result.exit_code == 1
        assert "defaults.port" in result.output

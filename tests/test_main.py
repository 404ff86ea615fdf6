import json
import os

import pytest

from chatlib import main as main_module
from chatlib.config import loader
from chatlib.config.loader import AppConfig
from chatlib.logging_config import parse_log_level


class _QuietConfigurator:
    def __init__(self, level=None):
        self.level = level

    def configure(self) -> int:
        return parse_log_level(self.level)


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    # Keep the root handlers pytest installed.
    monkeypatch.setattr(main_module, "LoggerConfigurator", _QuietConfigurator)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch):
    monkeypatch.setattr(loader, "CONF_SEARCH_DIRS", (".",))
    for key in [k for k in os.environ if k.startswith("CHATLIB_")]:
        monkeypatch.delenv(key)


def test_parser_start_flags():
    args = main_module.build_parser().parse_args(
        [
            "-l",
            "debug",
            "start",
            "--server",
            "irc.example.org",
            "--channel",
            "#a",
            "--channel",
            "#b",
            "--no-tls",
        ]
    )
    assert args.command == "start"
    assert args.log_level == "debug"
    assert args.channels == ["#a", "#b"]
    assert args.no_tls is True
    assert args.port is None


def test_resolve_config_from_flags(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    args = main_module.build_parser().parse_args(
        ["start", "--server", "h", "--nick", "bob", "--no-tls", "--port", "7000"]
    )
    app = main_module.resolve_config(args)
    assert app.irc.host == "h"
    assert app.irc.nick == "bob"
    assert app.irc.port == 7000
    assert not app.irc.tls_enabled


def test_resolve_config_uses_default_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "chatlib.conf").write_text(
        json.dumps({"log": {"level": "warn"}, "irc": {"server": "file-host"}}),
        encoding="utf-8",
    )
    args = main_module.build_parser().parse_args(["start"])
    app = main_module.resolve_config(args)
    assert app.irc.host == "file-host"
    assert app.log_level == "warn"


def test_main_reports_missing_server(tmp_path, monkeypatch, caplog):
    monkeypatch.chdir(tmp_path)
    assert main_module.main(["start"]) == 1
    assert "Configuration error" in caplog.text


def test_main_reports_missing_config_file(tmp_path, caplog):
    missing = str(tmp_path / "absent.conf")
    assert main_module.main(["--config", missing, "start"]) == 1
    assert "config file not found" in caplog.text


def test_main_reports_bad_log_level(tmp_path, monkeypatch, caplog):
    monkeypatch.chdir(tmp_path)
    assert main_module.main(["-l", "chatty", "start", "--server", "h"]) == 1
    assert "invalid log level: chatty" in caplog.text


@pytest.mark.asyncio
async def test_run_bot_with_irc_disabled(caplog):
    await main_module.run_bot(AppConfig(irc_enabled=False))
    assert "nothing to do" in caplog.text


def test_common_options_after_subcommand(tmp_path):
    conf = str(tmp_path / "x.conf")
    parser = main_module.build_parser()
    after = parser.parse_args(["start", "--config", conf, "-l", "error"])
    before = parser.parse_args(["--config", conf, "-l", "error", "start"])
    assert (after.config, after.log_level) == (conf, "error")
    assert (before.config, before.log_level) == (conf, "error")


def test_resolve_config_full_flag_set(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    args = main_module.build_parser().parse_args(
        [
            "start",
            "--server",
            "irc.example.org",
            "--auth-method",
            "sasl",
            "--auth-password",
            "hunter2",
            "--dial-timeout",
            "3.5",
            "--keepalive",
            "30",
            "--login-delay",
            "0.5",
            "--msg-buffer-size",
            "64",
            "--tls-server-name",
            "irc.internal",
            "--tls-ca-cert",
            "/ca/one.pem",
            "--tls-ca-cert",
            "/ca/two.pem",
            "--tls-client-cert",
            "/me.crt",
            "--tls-client-key",
            "/me.key",
            "--tls-insecure-skip-verify",
        ]
    )
    irc = main_module.resolve_config(args).irc
    assert irc.auth_method.value == "sasl"
    assert irc.auth_password == "hunter2"
    assert irc.dial_timeout == 3.5
    assert irc.keepalive == 30
    assert irc.login_delay == 0.5
    assert irc.msg_buffer_size == 64
    assert irc.port == 6697
    assert irc.server_name == "irc.internal"
    assert irc.tls.ca_certs == ("/ca/one.pem", "/ca/two.pem")
    assert (irc.tls.client_cert, irc.tls.client_key) == ("/me.crt", "/me.key")
    assert irc.tls.insecure_skip_verify is True


def test_unset_tls_switch_keeps_verification(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    args = main_module.build_parser().parse_args(["start", "--server", "h"])
    assert args.tls_insecure_skip_verify is None
    assert main_module.resolve_config(args).irc.tls.insecure_skip_verify is False


def test_resolve_config_reads_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CHATLIB_IRC_SERVER", "env-host")
    monkeypatch.setenv("CHATLIB_IRC_CHANNELS", "#a,#b")
    monkeypatch.setenv("CHATLIB_LOG_LEVEL", "error")
    args = main_module.build_parser().parse_args(["start", "--nick", "bob"])
    app = main_module.resolve_config(args)
    assert app.irc.host == "env-host"
    assert app.irc.channels == ("#a", "#b")
    assert app.irc.nick == "bob"
    assert app.log_level == "error"


def test_flags_beat_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CHATLIB_IRC_SERVER", "env-host")
    args = main_module.build_parser().parse_args(["start", "--server", "cli-host"])
    assert main_module.resolve_config(args).irc.host == "cli-host"


def test_config_file_from_environment(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    conf = tmp_path / "elsewhere.json"
    conf.write_text(json.dumps({"irc": {"host": "env-file-host"}}), encoding="utf-8")
    monkeypatch.setenv("CHATLIB_CONF_FILE", str(conf))
    args = main_module.build_parser().parse_args(["start", "--server", "cli-host"])
    app = main_module.resolve_config(args)
    assert app.irc.host == "cli-host"
    assert app.irc.server_name == "cli-host"


def test_config_file_found_in_search_dirs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    (home / "chatlib.conf").write_text(
        json.dumps({"irc": {"server": "searched"}}), encoding="utf-8"
    )
    monkeypatch.setattr(loader, "CONF_SEARCH_DIRS", (str(tmp_path / "etc"), str(home)))
    args = main_module.build_parser().parse_args(["start"])
    assert main_module.resolve_config(args).irc.host == "searched"

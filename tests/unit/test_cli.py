"""Unit tests for command line parsing."""

import pytest

from httpserve.bootstrap.config import (
    DEFAULT_SHUTDOWN_GRACE_SECONDS,
    DEFAULT_SOCKET_TIMEOUT,
    build_server_config,
    parse_cli_args,
)


def test_defaults():
    config = build_server_config(parse_cli_args(["public"]))

    assert config.directory == "public"
    assert config.address == "127.0.0.1"
    assert config.port == 3000
    assert config.redirect_http is False
    assert config.tls_enabled is False
    assert config.socket_timeout == DEFAULT_SOCKET_TIMEOUT
    assert config.shutdown_grace_seconds == DEFAULT_SHUTDOWN_GRACE_SECONDS


def test_short_flags():
    args = parse_cli_args(["-a", "0.0.0.0", "-p", "8443", "-r", "site"])
    config = build_server_config(args)

    assert config.directory == "site"
    assert config.address == "0.0.0.0"
    assert config.port == 8443
    assert config.redirect_http is True


def test_long_flags():
    args = parse_cli_args(
        [
            "site",
            "--address",
            "::1",
            "--port",
            "8080",
            "--redirect-http",
            "--cert",
            "cert.pem",
            "--key",
            "key.pem",
            "--log-level",
            "debug",
            "--log-destination",
            "/tmp/httpserve.log",
            "--socket-timeout",
            "5",
            "--shutdown-grace-seconds",
            "1",
        ]
    )
    config = build_server_config(args)

    assert config.address == "::1"
    assert config.port == 8080
    assert config.redirect_http is True
    assert config.tls_enabled is True
    assert config.log_level == "DEBUG"
    assert config.log_destination == "/tmp/httpserve.log"
    assert config.socket_timeout == 5
    assert config.shutdown_grace_seconds == 1


def test_cert_without_key_is_not_tls():
    config = build_server_config(parse_cli_args(["site", "--cert", "cert.pem"]))

    assert config.tls_enabled is False


def test_directory_is_required(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_cli_args([])

    assert excinfo.value.code == 2
    assert "DIR" in capsys.readouterr().err


def test_invalid_port_is_rejected():
    with pytest.raises(SystemExit) as excinfo:
        parse_cli_args(["site", "--port", "http"])

    assert excinfo.value.code == 2


def test_log_settings_from_environment(monkeypatch):
    monkeypatch.setenv("HTTPSERVE_LOG_LEVEL", "warning")
    monkeypatch.setenv("HTTPSERVE_LOG_DESTINATION", "/var/log/httpserve.log")

    args = parse_cli_args(["site"])

    assert args.log_level == "WARNING"
    assert args.log_destination == "/var/log/httpserve.log"


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as excinfo:
        parse_cli_args(["--version"])

    assert excinfo.value.code == 0
    assert capsys.readouterr().out.startswith("httpserve ")

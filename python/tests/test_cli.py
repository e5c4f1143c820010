"""Tests for tdfclient.cli module."""

import json

import pytest
from typer.testing import CliRunner

from tdfclient import client as client_module
from tdfclient.cli import app

from conftest import StubTransport

runner = CliRunner()


@pytest.fixture
def stub(monkeypatch):
    """Route the CLI's default transport to a stub."""
    transport = StubTransport('{"cash": 100}')
    monkeypatch.setattr(client_module, "RequestsTransport", lambda: transport)
    for name in ("TDF_PROTOCOL", "TDF_HOSTNAME", "TDF_PORT", "TDF_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("TDF_CONFIG", "/nonexistent/tdf.yaml")
    return transport


def test_version():
    """Test version command outputs version string."""
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "tdfclient" in result.output


def test_status(stub):
    result = runner.invoke(app, ["--hostname", "tdf.local", "status", "1", "--api-key", "k"])
    assert result.exit_code == 0
    assert json.loads(result.output) == {"cash": 100}
    assert stub.calls == [("GET", "http://tdf.local:80/agents/1/composition", {"apikey": "k"})]


def test_trade_parses_legs(stub):
    result = runner.invoke(app, ["trade", "1", "GOOG=24", "AAPL=-1.5", "--api-key", "k"])
    assert result.exit_code == 0
    assert stub.calls[0][2] == {"apikey": "k", "GOOG": 24, "AAPL": -1.5}


def test_trade_rejects_bad_leg(stub):
    result = runner.invoke(app, ["trade", "1", "GOOG", "--api-key", "k"])
    assert result.exit_code != 0
    assert stub.calls == []


def test_config_file_and_env(stub, tmp_path, monkeypatch):
    """Test command line beats config file, which beats the environment."""
    path = tmp_path / "tdf.yaml"
    path.write_text("server:\n  hostname: from-config\n")
    monkeypatch.setenv("TDF_HOSTNAME", "from-env")
    monkeypatch.setenv("TDF_PORT", "3000")
    result = runner.invoke(app, ["--config", str(path), "--protocol", "https", "history", "GOOG"])
    assert result.exit_code == 0
    assert stub.calls[0][1] == "https://from-config:3000/history/GOOG"


def test_all_histories_options(stub):
    result = runner.invoke(app, ["all-histories", "--select", "last", "-n", "3"])
    assert result.exit_code == 0
    assert stub.calls[0][2] == {"select": "last", "n": 3}


def test_server_error_exits_nonzero(stub):
    stub.body = "Not authorized to operate on agent."
    result = runner.invoke(app, ["status", "1", "--api-key", "bad"])
    assert result.exit_code == 1
    assert "Unauthorized" in result.output


def test_invalid_select_exits_nonzero(stub):
    result = runner.invoke(app, ["all-histories", "--select", "mid"])
    assert result.exit_code == 1
    assert stub.calls == []


@pytest.mark.parametrize("text", ["server: [unclosed\n", "- just\n- a list\n"])
def test_bad_config_file_is_a_usage_error(stub, tmp_path, text):
    """Test malformed or non-mapping YAML config exits with a usage error."""
    path = tmp_path / "tdf.yaml"
    path.write_text(text)
    result = runner.invoke(app, ["--config", str(path), "history"])
    assert result.exit_code == 2
    assert stub.calls == []

import json
from textwrap import dedent

import pytest
from typer.testing import CliRunner

from validator_dashboard.main import app

runner = CliRunner()


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "networks.toml"
    path.write_text(
        dedent(
            """
            [[networks]]
            id = "alpha"
            name = "Alpha"
            token = "ALP"
            ecosystem = "other"
            adapter = "scripted"
            address = "ok"
            price_id = "alpha"
            apr = { min = 10, max = 20 }

            [[networks]]
            id = "beta"
            name = "Beta"
            token = "BET"
            ecosystem = "other"
            adapter = "scripted"
            address = "down"
            price_id = "beta"
            """
        ).strip()
    )
    return path


def test_show_config_redacts_secrets(monkeypatch):
    monkeypatch.setenv("ETHERSCAN_API_KEY", "very-secret")

    result = runner.invoke(app, ["--show-config", "--log-level", "CRITICAL"])

    assert result.exit_code == 0
    assert "very-secret" not in result.stdout
    data = json.loads(result.stdout)
    assert data["etherscan_api_key"] == "***redacted***"
    assert data["log_level"] == "CRITICAL"


def test_prints_full_aggregation(scripted, registry_file):
    result = runner.invoke(
        app, ["--registry", str(registry_file), "--log-level", "CRITICAL", "--compact"]
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert [n["network"]["id"] for n in data["networks"]] == ["alpha", "beta"]
    assert data["networks"][0]["freshness"] == "live"
    assert data["networks"][0]["stake"] == {"amount": 100.0, "usd_value": 200.0}
    assert data["networks"][1]["stake"] is None
    assert data["errors"] == [
        {"network_id": "beta", "kind": "NetworkUnavailable", "message": "connection refused"}
    ]
    assert data["metrics"]["total_stake_usd"] == 200.0
    assert data["from_cache"] is False


def test_prints_single_network(scripted, registry_file):
    result = runner.invoke(
        app, ["beta", "--registry", str(registry_file), "--log-level", "CRITICAL"]
    )

    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["network"]["id"] == "beta"
    assert data["freshness"] == "no_data"
    assert [e["kind"] for e in data["errors"]] == ["NetworkUnavailable"]


def test_network_argument_after_options(scripted, registry_file):
    result = runner.invoke(
        app, ["--registry", str(registry_file), "--log-level", "CRITICAL", "alpha"]
    )

    assert result.exit_code == 0
    assert json.loads(result.stdout)["network"]["id"] == "alpha"


def test_unknown_network_argument(scripted, registry_file):
    result = runner.invoke(
        app, ["gamma", "--registry", str(registry_file), "--log-level", "CRITICAL"]
    )

    assert result.exit_code == 2


def test_registry_error_exits_with_code_2(tmp_path):
    broken = tmp_path / "broken.toml"
    broken.write_text('title = "no networks"\n')

    result = runner.invoke(app, ["--registry", str(broken), "--log-level", "CRITICAL"])

    assert result.exit_code == 2
    assert "Registry error" in result.output

"""Tests for the clusteradm init command."""

import logging
from unittest.mock import MagicMock
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from clusteradm_cli.client import ComponentResolutionError
from clusteradm_cli.discovery.errors import RateLimitExceededError
from clusteradm_cli.discovery.models import ComponentResources
from clusteradm_cli.discovery.models import Resource
from clusteradm_cli.logging_setup import JsonlHandler
from clusteradm_cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run every command from an empty project with no user settings or tokens."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CLUSTERADM_LOG_PATH", str(tmp_path / "clusteradm.log.jsonl"))
    monkeypatch.delenv("CLUSTERADM_GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    yield
    root = logging.getLogger()
    for handler in list(root.handlers):
        if isinstance(handler, JsonlHandler):
            root.removeHandler(handler)
            handler.close()


@pytest.fixture
def mock_client():
    client = MagicMock()
    client.init.side_effect = lambda config: [
        ComponentResources(resources=[Resource(path=f"{c}.yaml", content=b"x")]) for c in config.components()
    ]
    with patch("clusteradm_cli.main.ClusteradmClient", return_value=client):
        yield client


def test_init_builds_config(runner, mock_client):
    result = runner.invoke(
        cli,
        [
            "init",
            "--providers",
            "aws,vsphere",
            "--bootstrap",
            "kubeadm",
            "--repositories",
            "aws=/tmp/aws",
            "--github-token",
            "secret",
        ],
    )

    assert result.exit_code == 0, result.output
    config = mock_client.init.call_args.args[0]
    assert config.providers == ["aws", "vsphere"]
    assert config.bootstrap == "kubeadm"
    assert config.repositories == {"aws": "/tmp/aws"}
    assert config.github_token == "secret"
    assert "performing init..." in result.output
    assert "applying 4 component resources to the management cluster..." in result.output


def test_bootstrap_defaults_to_kubeadm_when_given_without_value(runner, mock_client):
    result = runner.invoke(cli, ["init", "--bootstrap", "--providers", "aws"])

    assert result.exit_code == 0, result.output
    assert mock_client.init.call_args.args[0].bootstrap == "kubeadm"


def test_no_bootstrap(runner, mock_client):
    result = runner.invoke(cli, ["init", "--providers", "aws"])

    assert result.exit_code == 0, result.output
    assert mock_client.init.call_args.args[0].bootstrap is None


def test_token_from_env(runner, mock_client, monkeypatch):
    monkeypatch.setenv("CLUSTERADM_GITHUB_TOKEN", "env-token")

    result = runner.invoke(cli, ["init", "--providers", "aws"])

    assert result.exit_code == 0, result.output
    assert mock_client.init.call_args.args[0].github_token == "env-token"


def test_repositories_from_project_settings(runner, mock_client, tmp_path):
    settings = tmp_path / ".clusteradm" / "settings.yaml"
    settings.parent.mkdir()
    settings.write_text("repositories:\n  aws: /settings/aws\n  CAPI: /settings/capi\n")

    result = runner.invoke(cli, ["init", "--providers", "aws", "--repositories", "aws=/flag/aws"])

    assert result.exit_code == 0, result.output
    assert mock_client.init.call_args.args[0].repositories == {"aws": "/flag/aws", "CAPI": "/settings/capi"}


def test_providers_required(runner, mock_client):
    result = runner.invoke(cli, ["init"])

    assert result.exit_code != 0
    assert "--providers" in result.output
    mock_client.init.assert_not_called()


def test_malformed_repository(runner, mock_client):
    result = runner.invoke(cli, ["init", "--providers", "aws", "--repositories", "aws"])

    assert result.exit_code == 2
    assert "component=url" in result.output
    mock_client.init.assert_not_called()


def test_resolution_failure_exits_with_error(runner, mock_client):
    mock_client.init.side_effect = ComponentResolutionError("CAPI", RateLimitExceededError())

    result = runner.invoke(cli, ["init", "--providers", "aws"])

    assert result.exit_code == 1
    assert "failed to get resources for 'CAPI'" in result.output
    assert "rate limit" in result.output

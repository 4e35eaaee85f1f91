"""Tests for resolver configuration files."""

import pytest
from pydantic import ValidationError

from ethr_status.config import ConfigFileNotFoundError, StatusSettings

from conftest import REGISTRY_A, REGISTRY_B


CHAINS_TOML = f"""
default_chain_id = 11155111

[[chains]]
chain_id = 11155111
address = "{REGISTRY_A}"
rpc_url = "https://sepolia.example"

[[chains]]
chain_id = 137
address = "{REGISTRY_B}"
rpc_url = "https://polygon.example"

[deployments]
137 = "{REGISTRY_B}"
"""


def test_load_chains(tmp_path, clients, client_factory):
    """Test loading an explicit chain list."""
    path = tmp_path / "ethr-status.toml"
    path.write_text(CHAINS_TOML)

    settings = StatusSettings.from_config_file(path)
    registry = settings.build_registry(client_factory=client_factory)

    assert settings.deployments == {137: REGISTRY_B}
    assert registry.routes() == [(REGISTRY_A, 11155111), (REGISTRY_B, 137)]
    assert registry.default_chain_id == 11155111
    assert registry.default_registry == REGISTRY_A
    assert set(clients) == {"https://sepolia.example", "https://polygon.example"}


def test_load_project_id(tmp_path, clients, client_factory):
    """Test loading a project id configuration."""
    path = tmp_path / "ethr-status.toml"
    path.write_text(
        f'project_id = "abc"\nnetwork_name = "mainnet"\nregistry_address = "{REGISTRY_A}"\n'
    )

    registry = StatusSettings.from_config_file(str(path)).build_registry(
        client_factory=client_factory
    )

    assert registry.default_chain_id == 1
    assert "https://holesky.infura.io/v3/abc" in clients


def test_neither_shape():
    """Test that a configuration needs a project id or chains."""
    with pytest.raises(ValidationError):
        StatusSettings.model_validate({"network_name": "mainnet"})


def test_both_shapes():
    """Test that project id and chains are exclusive."""
    with pytest.raises(ValidationError):
        StatusSettings.model_validate({
            "project_id": "abc",
            "chains": [{"chain_id": 1, "address": REGISTRY_A, "rpc_url": "https://x"}],
        })


def test_config_from_environment(tmp_path, monkeypatch):
    """Test finding the config file through the environment."""
    path = tmp_path / "custom.toml"
    path.write_text('project_id = "abc"\n')
    monkeypatch.setenv("ETHR_STATUS_CONFIG", str(path))

    assert StatusSettings.search_default_config_locations() == path


def test_config_not_found(tmp_path, monkeypatch):
    """Test that a missing config file is reported."""
    monkeypatch.delenv("ETHR_STATUS_CONFIG", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)

    with pytest.raises(ConfigFileNotFoundError):
        StatusSettings.from_config_file()

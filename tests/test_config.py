"""Tests for environment configuration."""

import pytest

from moca_id_sdk.authorization import (
    MOCA_NODE,
    PERMISSION_MW_MUMBAI,
    REGISTER_WITH_PARENT_SCHEMA,
    VConvention,
)
from moca_id_sdk.config import DEFAULTS, build_registrar_config, load_config
from moca_id_sdk.registrar import resolve_config


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Clear config variables and point dotenv at an empty file."""
    for key in DEFAULTS:
        monkeypatch.delenv(key, raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("")
    return env_file


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self, clean_env):
        """Test defaults when nothing is set."""
        config = load_config(clean_env)

        assert config["CHAIN_ID"] == 80001
        assert config["PERMISSION_MW_ADDRESS"] == PERMISSION_MW_MUMBAI
        assert config["DOMAIN_NAME"] == "PermissionMw"
        assert config["DEADLINE_SECONDS"] == 3600
        assert config["TX_TIMEOUT"] == 120.0
        assert config["MOCA_NODE"] == ""

    def test_environment_overrides(self, clean_env, monkeypatch):
        """Test that environment variables override defaults."""
        monkeypatch.setenv("CHAIN_ID", "137")
        monkeypatch.setenv("TX_TIMEOUT", "30")
        config = load_config(clean_env)

        assert config["CHAIN_ID"] == 137
        assert config["TX_TIMEOUT"] == 30.0

    def test_dotenv_file(self, clean_env):
        """Test values read from a .env file."""
        clean_env.write_text(f"MOCA_NODE={MOCA_NODE}\nV_CONVENTION=parity\n")
        config = load_config(clean_env)

        assert config["MOCA_NODE"] == MOCA_NODE
        assert config["V_CONVENTION"] == "parity"


class TestBuildRegistrarConfig:
    """Tests for build_registrar_config."""

    def test_base_variant(self, clean_env):
        """Test a config without a parent node."""
        registrar_config = build_registrar_config(load_config(clean_env))

        assert "moca_node" not in registrar_config
        assert registrar_config["domain"].verifying_contract == PERMISSION_MW_MUMBAI
        assert registrar_config["v_convention"] is VConvention.ETHEREUM

    def test_hierarchical_variant(self, clean_env, monkeypatch):
        """Test that MOCA_NODE selects the hierarchical variant."""
        monkeypatch.setenv("MOCA_NODE", MOCA_NODE)
        monkeypatch.setenv("V_CONVENTION", "parity")
        registrar_config = build_registrar_config(load_config(clean_env))
        resolved = resolve_config(registrar_config)

        assert resolved.moca_node == MOCA_NODE
        assert resolved.schema == REGISTER_WITH_PARENT_SCHEMA
        assert resolved.v_convention is VConvention.PARITY

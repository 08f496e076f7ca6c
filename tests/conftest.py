"""Shared test fixtures."""

import pytest


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Keep Settings() away from the developer's Solana CLI config and shell env."""
    monkeypatch.setenv("SOLANA_CONFIG_FILE", str(tmp_path / "missing-config.yml"))
    for name in ("HELIUS_API_KEY", "JSON_RPC_URL", "KEYPAIR_PATH", "LOG_LEVEL", "LOG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)

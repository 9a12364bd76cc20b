"""Tests for settings configuration loading."""

from __future__ import annotations

from textwrap import dedent

import pytest

from loop_liquidity.constants import DEFAULT_SEPOLIA_RPC_URL, MAINNET_TOKENS
from loop_liquidity.settings import LoopSettings, Network


def test_loads_values_from_toml_table(tmp_path, monkeypatch):
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        dedent(
            """
            [loop_liquidity]
            network = "sepolia"
            wallet_url = "http://127.0.0.1:9000/rpc"
            poll_interval = 2.5
            poll_max_attempts = 7

            [loop_liquidity.token_addresses]
            USDC = "0x0123"
            """
        ).strip()
    )
    monkeypatch.setenv("LOOP_LIQUIDITY_CONFIG", str(config_path))

    settings = LoopSettings()

    assert settings.network is Network.SEPOLIA
    assert settings.wallet_url == "http://127.0.0.1:9000/rpc"
    assert settings.rpc_url_resolved == DEFAULT_SEPOLIA_RPC_URL
    assert settings.tokens["USDC"] == "0x0123"
    assert settings.poll_policy.interval == 2.5
    assert settings.poll_policy.max_attempts == 7


def test_precedence_cli_over_env_over_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config.toml"
    config_path.write_text('rpc_url = "https://file.example"\nlog_level = "ERROR"\n')
    monkeypatch.setenv("LOOP_LIQUIDITY_CONFIG", str(config_path))
    monkeypatch.setenv("LOOP_LIQUIDITY_RPC_URL", "https://env.example")

    assert LoopSettings().rpc_url == "https://env.example"
    assert LoopSettings().log_level == "ERROR"
    assert LoopSettings(rpc_url="https://cli.example").rpc_url == "https://cli.example"


def test_secret_in_toml_is_rejected(tmp_path, monkeypatch):
    config_path = tmp_path / "config.toml"
    config_path.write_text('wallet_bridge_token = "oops"\n')
    monkeypatch.setenv("LOOP_LIQUIDITY_CONFIG", str(config_path))

    with pytest.raises(ValueError, match="Security violation"):
        LoopSettings()


def test_secret_is_redacted():
    settings = LoopSettings(wallet_bridge_token="s3cret")

    assert settings.wallet_bridge_token is not None
    assert settings.wallet_bridge_token.get_secret_value() == "s3cret"
    assert settings.as_safe_dict()["wallet_bridge_token"] == "***redacted***"


def test_zero_attempts_means_unbounded():
    settings = LoopSettings(poll_max_attempts=0, poll_timeout_seconds=0)

    assert settings.poll_policy.max_attempts is None
    assert settings.poll_policy.timeout is None


def test_poll_interval_cap_must_cover_interval():
    with pytest.raises(ValueError):
        LoopSettings(poll_interval=10.0, poll_max_interval=1.0)


def test_default_tokens_are_mainnet():
    settings = LoopSettings(network=Network.MAINNET, token_addresses={})

    assert settings.tokens == dict(MAINNET_TOKENS)

from pathlib import Path

import pytest

from devnet.config import (
    LOCAL_VALIDATOR_HOST,
    REMOTE_VALIDATOR_HOST,
    ConfigurationError,
    DevnetConfig,
    load_devnet_config,
)

_ENV_NAMES = (
    "CHAINID",
    "VALIDATOR_NAME",
    "MONIKER",
    "STAKE_AMOUNT",
    "COIN_AMOUNT",
    "KEYRING_BACKEND",
    "P2P_NETWORK",
    "APP_BINARY",
    "NODE_BINARY",
    "APP_PATH",
    "NODE_PATH",
    "VALIDATOR_HOST",
    "VALIDATOR_PORT",
    "GRPC_PORT",
    "API_PORT",
    "GRPC_WEB_PORT",
    "BRIDGE_RPC_PORT",
    "BRIDGE_GATEWAY_PORT",
    "READINESS_MAX_ATTEMPTS",
    "READINESS_INTERVAL_SECONDS",
    "BLOCK_MAX_ATTEMPTS",
    "BLOCK_INTERVAL_SECONDS",
    "STABILIZE_DELAY_SECONDS",
    "REQUEST_TIMEOUT_SECONDS",
    "TRUSTED_HEIGHT",
    "BRIDGE_START_ATTEMPTS",
    "BRIDGE_GRACE_SECONDS",
    "BRIDGE_RPC_GRACE_SECONDS",
    "BRIDGE_EXTENDED_GRACE_SECONDS",
    "BRIDGE_RETRY_BACKOFF_SECONDS",
    "LOG_DIR",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_defaults_match_dataclass_defaults():
    config = load_devnet_config()

    assert config == DevnetConfig()
    assert config.endpoints.validator_host == LOCAL_VALIDATOR_HOST
    assert config.endpoints.validator_rpc_url == "http://127.0.0.1:26657"
    assert config.endpoints.bridge_rpc_url == "http://localhost:26658"
    assert config.readiness.trusted_height is None
    assert config.start_policy.max_attempts == 3


def test_bridge_mode_host_default_is_overridable(monkeypatch):
    assert load_devnet_config(default_validator_host=REMOTE_VALIDATOR_HOST).endpoints.validator_host == REMOTE_VALIDATOR_HOST

    monkeypatch.setenv("VALIDATOR_HOST", "10.0.0.5")
    config = load_devnet_config(default_validator_host=REMOTE_VALIDATOR_HOST)
    assert config.endpoints.validator_rpc_url == "http://10.0.0.5:26657"


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("CHAINID", "test-chain")
    monkeypatch.setenv("APP_PATH", str(tmp_path / "app"))
    monkeypatch.setenv("BRIDGE_RPC_PORT", "36658")
    monkeypatch.setenv("READINESS_MAX_ATTEMPTS", "5")
    monkeypatch.setenv("BLOCK_INTERVAL_SECONDS", "0.5")
    monkeypatch.setenv("TRUSTED_HEIGHT", "1")
    monkeypatch.setenv("BRIDGE_START_ATTEMPTS", "2")
    monkeypatch.setenv("BRIDGE_GRACE_SECONDS", "0")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.setenv("LOG_LEVEL", "debug")

    config = load_devnet_config()

    assert config.chain.chain_id == "test-chain"
    assert config.paths.app_path == tmp_path / "app"
    assert config.endpoints.bridge_rpc_url == "http://localhost:36658"
    assert config.readiness.max_attempts == 5
    assert config.readiness.block_interval_seconds == 0.5
    assert config.readiness.trusted_height == 1
    assert config.start_policy.max_attempts == 2
    assert config.start_policy.grace_delay == 0.0
    assert config.log_dir == Path(tmp_path / "logs")
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    ("name", "value"),
    [
        ("VALIDATOR_PORT", "abc"),
        ("VALIDATOR_PORT", "0"),
        ("READINESS_MAX_ATTEMPTS", "0"),
        ("BRIDGE_GRACE_SECONDS", "-2"),
        ("TRUSTED_HEIGHT", "0"),
    ],
)
def test_malformed_values_raise(monkeypatch, name, value):
    monkeypatch.setenv(name, value)

    with pytest.raises(ConfigurationError):
        load_devnet_config()


def test_config_is_immutable():
    config = DevnetConfig()

    with pytest.raises(AttributeError):
        config.log_level = "DEBUG"  # type: ignore[misc]

"""Immutable devnet configuration assembled once at startup."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..start_retry.policy import StartRetryPolicy
from .errors import ConfigurationError
from .runtime import env_attempts, env_int, env_port, env_seconds, env_str

DEFAULT_APP_PATH = "/home/celestia/.celestia-app"
DEFAULT_NODE_PATH = "/home/celestia/bridge"
LOCAL_VALIDATOR_HOST = "127.0.0.1"
REMOTE_VALIDATOR_HOST = "celestia-validator"


@dataclass(frozen=True)
class ChainSettings:
    """Genesis and key parameters for the single validator."""

    chain_id: str = "private"
    validator_name: str = "validator"
    moniker: str = "celestia-devnet"
    stake_amount: str = "5000000000utia"
    coin_amount: str = "1000000000000utia"
    keyring_backend: str = "test"
    p2p_network: str = "private"


@dataclass(frozen=True)
class PathSettings:
    """Binaries and on-disk homes of the two processes."""

    app_binary: str = "celestia-appd"
    node_binary: str = "celestia"
    app_path: Path = Path(DEFAULT_APP_PATH)
    node_path: Path = Path(DEFAULT_NODE_PATH)


@dataclass(frozen=True)
class EndpointSettings:
    """Host and port layout of the validator and the bridge."""

    validator_host: str = LOCAL_VALIDATOR_HOST
    validator_port: int = 26657
    grpc_port: int = 9090
    api_port: int = 1317
    grpc_web_port: int = 9091
    bridge_rpc_port: int = 26658
    bridge_gateway_port: int = 26659

    @property
    def validator_rpc_url(self) -> str:
        return f"http://{self.validator_host}:{self.validator_port}"

    @property
    def bridge_rpc_url(self) -> str:
        return f"http://localhost:{self.bridge_rpc_port}"

    @property
    def bridge_gateway_url(self) -> str:
        return f"http://localhost:{self.bridge_gateway_port}"


@dataclass(frozen=True)
class ReadinessSettings:
    """Polling budgets for the validator status and block endpoints."""

    max_attempts: int = 30
    interval_seconds: float = 2.0
    block_max_attempts: int = 15
    block_interval_seconds: float = 3.0
    stabilize_delay_seconds: float = 10.0
    request_timeout_seconds: float = 5.0
    trusted_height: Optional[int] = None


@dataclass(frozen=True)
class DevnetConfig:
    """Complete configuration for one devnet run."""

    chain: ChainSettings = ChainSettings()
    paths: PathSettings = PathSettings()
    endpoints: EndpointSettings = EndpointSettings()
    readiness: ReadinessSettings = ReadinessSettings()
    start_policy: StartRetryPolicy = StartRetryPolicy()
    log_dir: Optional[Path] = None
    log_level: str = "INFO"


def _str(name: str, default: str) -> str:
    return env_str(name, or_value=default) or default


def _seconds(name: str, default: float) -> float:
    value = env_seconds(name, or_value=default)
    return default if value is None else value


def _load_trusted_height() -> Optional[int]:
    height = env_int("TRUSTED_HEIGHT")
    if height is not None and height < 1:
        raise ConfigurationError.invalid_value("TRUSTED_HEIGHT", height, "Block heights start at 1")
    return height


def load_devnet_config(*, default_validator_host: str = LOCAL_VALIDATOR_HOST) -> DevnetConfig:
    """
    Build a DevnetConfig from the environment (and .env defaults).

    Args:
        default_validator_host: Validator host used when VALIDATOR_HOST is unset.
            The combined entrypoint talks to a local validator, the bridge-only
            entrypoint to a sibling container.

    Raises:
        ConfigurationError: If any value is malformed
    """
    chain = ChainSettings(
        chain_id=_str("CHAINID", ChainSettings.chain_id),
        validator_name=_str("VALIDATOR_NAME", ChainSettings.validator_name),
        moniker=_str("MONIKER", ChainSettings.moniker),
        stake_amount=_str("STAKE_AMOUNT", ChainSettings.stake_amount),
        coin_amount=_str("COIN_AMOUNT", ChainSettings.coin_amount),
        keyring_backend=_str("KEYRING_BACKEND", ChainSettings.keyring_backend),
        p2p_network=_str("P2P_NETWORK", ChainSettings.p2p_network),
    )
    paths = PathSettings(
        app_binary=_str("APP_BINARY", PathSettings.app_binary),
        node_binary=_str("NODE_BINARY", PathSettings.node_binary),
        app_path=Path(_str("APP_PATH", DEFAULT_APP_PATH)).expanduser(),
        node_path=Path(_str("NODE_PATH", DEFAULT_NODE_PATH)).expanduser(),
    )
    endpoints = EndpointSettings(
        validator_host=_str("VALIDATOR_HOST", default_validator_host),
        validator_port=env_port("VALIDATOR_PORT", EndpointSettings.validator_port),
        grpc_port=env_port("GRPC_PORT", EndpointSettings.grpc_port),
        api_port=env_port("API_PORT", EndpointSettings.api_port),
        grpc_web_port=env_port("GRPC_WEB_PORT", EndpointSettings.grpc_web_port),
        bridge_rpc_port=env_port("BRIDGE_RPC_PORT", EndpointSettings.bridge_rpc_port),
        bridge_gateway_port=env_port("BRIDGE_GATEWAY_PORT", EndpointSettings.bridge_gateway_port),
    )
    readiness = ReadinessSettings(
        max_attempts=env_attempts("READINESS_MAX_ATTEMPTS", ReadinessSettings.max_attempts),
        interval_seconds=_seconds("READINESS_INTERVAL_SECONDS", ReadinessSettings.interval_seconds),
        block_max_attempts=env_attempts("BLOCK_MAX_ATTEMPTS", ReadinessSettings.block_max_attempts),
        block_interval_seconds=_seconds("BLOCK_INTERVAL_SECONDS", ReadinessSettings.block_interval_seconds),
        stabilize_delay_seconds=_seconds("STABILIZE_DELAY_SECONDS", ReadinessSettings.stabilize_delay_seconds),
        request_timeout_seconds=_seconds("REQUEST_TIMEOUT_SECONDS", ReadinessSettings.request_timeout_seconds),
        trusted_height=_load_trusted_height(),
    )
    start_policy = StartRetryPolicy(
        max_attempts=env_attempts("BRIDGE_START_ATTEMPTS", StartRetryPolicy.max_attempts),
        grace_delay=_seconds("BRIDGE_GRACE_SECONDS", StartRetryPolicy.grace_delay),
        rpc_grace_delay=_seconds("BRIDGE_RPC_GRACE_SECONDS", StartRetryPolicy.rpc_grace_delay),
        extended_grace_delay=_seconds("BRIDGE_EXTENDED_GRACE_SECONDS", StartRetryPolicy.extended_grace_delay),
        backoff_delay=_seconds("BRIDGE_RETRY_BACKOFF_SECONDS", StartRetryPolicy.backoff_delay),
    )
    log_dir = env_str("LOG_DIR")
    return DevnetConfig(
        chain=chain,
        paths=paths,
        endpoints=endpoints,
        readiness=readiness,
        start_policy=start_policy,
        log_dir=Path(log_dir).expanduser() if log_dir else None,
        log_level=_str("LOG_LEVEL", "INFO").upper(),
    )


__all__ = [
    "ChainSettings",
    "DevnetConfig",
    "EndpointSettings",
    "LOCAL_VALIDATOR_HOST",
    "PathSettings",
    "REMOTE_VALIDATOR_HOST",
    "ReadinessSettings",
    "load_devnet_config",
]

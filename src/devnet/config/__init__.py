"""Shared configuration helpers and dataclasses."""

from .errors import ConfigurationError
from .runtime import (
    env_attempts,
    env_float,
    env_int,
    env_port,
    env_seconds,
    env_str,
)
from .settings import (
    LOCAL_VALIDATOR_HOST,
    REMOTE_VALIDATOR_HOST,
    ChainSettings,
    DevnetConfig,
    EndpointSettings,
    PathSettings,
    ReadinessSettings,
    load_devnet_config,
)

__all__ = [
    "ChainSettings",
    "ConfigurationError",
    "DevnetConfig",
    "EndpointSettings",
    "LOCAL_VALIDATOR_HOST",
    "PathSettings",
    "REMOTE_VALIDATOR_HOST",
    "ReadinessSettings",
    "env_attempts",
    "env_float",
    "env_int",
    "env_port",
    "env_seconds",
    "env_str",
    "load_devnet_config",
]

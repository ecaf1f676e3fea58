from __future__ import annotations

"""Environment lookups with ``.env`` fallbacks and typed coercion."""


import os
from pathlib import Path
from typing import Callable, Optional, TypeVar

from .errors import ConfigurationError

_DOTENV_CANDIDATES = (Path(".env"), Path.home() / ".devnet.env")

_DEFAULT_VALUES: dict[str, str] | None = None

_T = TypeVar("_T")


def _load_default_values() -> dict[str, str]:
    """Merge every dotenv candidate once; earlier files win on duplicate keys."""
    from .runtime_helpers import DotenvLoader

    global _DEFAULT_VALUES
    if _DEFAULT_VALUES is None:
        merged: dict[str, str] = {}
        for path in _DOTENV_CANDIDATES:
            for key, value in DotenvLoader.load_from_file(path).items():
                merged.setdefault(key, value)
        _DEFAULT_VALUES = merged
    return _DEFAULT_VALUES


def _lookup(name: str, *, strip: bool, allow_blank: bool) -> Optional[str]:
    for candidate in (os.getenv(name), _load_default_values().get(name)):
        if candidate is None:
            continue
        value = candidate.strip() if strip else candidate
        if value or allow_blank:
            return value
    return None


def env_str(
    name: str,
    or_value: str | None = None,
    *,
    required: bool = False,
    strip: bool = True,
    allow_blank: bool = False,
) -> str | None:
    """
    Read ``name`` from the process environment, then from dotenv defaults.

    Blank values count as unset unless ``allow_blank`` is given.
    """
    value = _lookup(name, strip=strip, allow_blank=allow_blank)
    if value is not None:
        return value
    if required:
        raise ConfigurationError.missing_value(name, "set it in the environment or a .env file")
    return or_value


def _coerce(name: str, or_value: _T | None, convert: Callable[[str], _T], kind: str) -> _T | None:
    raw = env_str(name)
    if raw is None:
        return or_value
    try:
        return convert(raw)
    except ValueError as exc:
        raise ConfigurationError.invalid_format(name, raw, kind) from exc


def env_int(name: str, or_value: int | None = None) -> int | None:
    return _coerce(name, or_value, int, "an integer")


def env_float(name: str, or_value: float | None = None) -> float | None:
    return _coerce(name, or_value, float, "a number")


def env_seconds(name: str, or_value: float | None = None) -> float | None:
    """Fetch a non-negative duration in seconds; fractional values are allowed."""

    value = env_float(name, or_value=or_value)
    if value is not None and value < 0:
        raise ConfigurationError.invalid_value(name, value, "Durations cannot be negative")
    return value


def env_attempts(name: str, or_value: int) -> int:
    """Fetch an attempt budget, which must be at least one."""

    value = env_int(name, or_value=or_value)
    if value is None or value < 1:
        raise ConfigurationError.invalid_value(name, value, "Attempt budgets must be at least 1")
    return value


def env_port(name: str, or_value: int) -> int:
    value = env_int(name, or_value=or_value)
    if value is None or not 0 < value < 65536:
        raise ConfigurationError.invalid_value(name, value, "Ports must be between 1 and 65535")
    return value


__all__ = [
    "ConfigurationError",
    "env_attempts",
    "env_float",
    "env_int",
    "env_port",
    "env_seconds",
    "env_str",
]

"""Exception hierarchy for the devnet orchestrator.

Exception classes support two patterns:
1. No-argument raise: raise TrustedStateNotFound()
2. Contextual attributes: err = ReadinessTimeout(url="...", attempts=30); raise err
"""

from typing import Any


class DevnetError(Exception):
    """Base exception for all devnet orchestration errors.

    Supports keyword arguments that are stored as attributes for debugging.
    """

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = self.__class__.__doc__ or "Devnet orchestration error occurred"
        super().__init__(message)
        for key, value in kwargs.items():
            setattr(self, key, value)


class EndpointUnavailable(DevnetError):
    """HTTP endpoint did not return a decodable JSON response."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "HTTP endpoint did not return a decodable JSON response"
        super().__init__(message, **kwargs)


class ReadinessTimeout(DevnetError):
    """Readiness polling exhausted its attempt budget."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Readiness polling exhausted its attempt budget"
        super().__init__(message, **kwargs)


class TrustedStateNotFound(DevnetError):
    """Trusted block identifier is absent, null or stale."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Trusted block identifier is absent, null or stale"
        super().__init__(message, **kwargs)


class ConfigWriteError(DevnetError):
    """Persisted configuration does not hold the value that was written."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Persisted configuration does not hold the value that was written"
        super().__init__(message, **kwargs)


class CommandFailedError(DevnetError):
    """One-shot CLI step exited with a non-zero status."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "One-shot CLI step exited with a non-zero status"
        super().__init__(message, **kwargs)


class ProcessExitedEarly(DevnetError):
    """Child process terminated before passing its liveness check."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "Child process terminated before passing its liveness check"
        super().__init__(message, **kwargs)


class ShutdownRequested(DevnetError):
    """SIGTERM or SIGINT arrived before the devnet finished starting."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "SIGTERM or SIGINT arrived before the devnet finished starting"
        kwargs.setdefault("process", None)
        super().__init__(message, **kwargs)


class StartupExhausted(DevnetError):
    """All start attempts for a dependent process failed."""

    def __init__(self, message: str = "", **kwargs: Any) -> None:
        if not message:
            message = "All start attempts for a dependent process failed"
        kwargs.setdefault("attempts", ())
        super().__init__(message, **kwargs)


__all__ = [
    "CommandFailedError",
    "ConfigWriteError",
    "DevnetError",
    "EndpointUnavailable",
    "ProcessExitedEarly",
    "ReadinessTimeout",
    "ShutdownRequested",
    "StartupExhausted",
    "TrustedStateNotFound",
]

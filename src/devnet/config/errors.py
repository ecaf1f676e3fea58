from __future__ import annotations

"""Exception types for configuration handling."""


class ConfigurationError(RuntimeError):
    """Raised when an environment setting is missing or malformed."""

    @classmethod
    def invalid_format(cls, name: str, raw: str, expected: str) -> "ConfigurationError":
        return cls(f"Environment variable {name!r} must be {expected} (got {raw!r})")

    @classmethod
    def missing_value(cls, name: str, hint: str = "") -> "ConfigurationError":
        msg = f"Required environment variable {name!r} is not set"
        return cls(f"{msg}; {hint}" if hint else msg)

    @classmethod
    def invalid_value(cls, name: str, value: object, reason: str = "") -> "ConfigurationError":
        """Value parsed but falls outside the accepted range."""
        msg = f"Invalid value for {name}: {value!r}"
        return cls(f"{msg}. {reason}" if reason else msg)


__all__ = ["ConfigurationError"]

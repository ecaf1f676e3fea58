"""Type definitions for readiness polling."""

from dataclasses import dataclass
from typing import Any, Callable

ReadyPredicate = Callable[[Any], bool]


@dataclass(frozen=True)
class ReadinessQuery:
    """One endpoint to poll and the condition that marks it ready."""

    name: str
    url: str
    predicate: ReadyPredicate
    interval_seconds: float
    max_attempts: int

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1 (got {self.max_attempts})")
        if self.interval_seconds < 0:
            raise ValueError(f"interval_seconds must be non-negative (got {self.interval_seconds})")

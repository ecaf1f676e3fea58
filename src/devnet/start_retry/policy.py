"""Pure start-retry decisions, kept apart from the effectful launch calls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence


class AttemptOutcome(Enum):
    """How a single start attempt ended."""

    SUCCESS = "success"
    PROCESS_EXITED = "process_exited"
    UNRESPONSIVE = "unresponsive"


class StartDecision(Enum):
    """What the orchestrator should do after an attempt."""

    SUCCEED = "succeed"
    RETRY = "retry"
    EXHAUST = "exhaust"


@dataclass(frozen=True)
class RetryAttempt:
    """Diagnostic record of one start attempt."""

    index: int
    outcome: AttemptOutcome
    elapsed_seconds: float
    exit_code: Optional[int] = None

    def describe(self) -> str:
        detail = f"attempt {self.index}: {self.outcome.value} after {self.elapsed_seconds:.1f}s"
        if self.exit_code is not None:
            detail += f" (exit code {self.exit_code})"
        return detail


@dataclass(frozen=True)
class StartRetryPolicy:
    """Fixed start-retry budget and the delays around each check."""

    max_attempts: int = 3
    grace_delay: float = 5.0
    rpc_grace_delay: float = 3.0
    extended_grace_delay: float = 5.0
    backoff_delay: float = 5.0

    def decide(self, history: Sequence[RetryAttempt]) -> StartDecision:
        """
        Decide the next step from the attempts made so far.

        Args:
            history: Attempts in the order they were made

        Returns:
            SUCCEED when the latest attempt succeeded, RETRY while budget
            remains, EXHAUST once ``max_attempts`` attempts have failed
        """
        if not history:
            return StartDecision.RETRY
        if history[-1].outcome is AttemptOutcome.SUCCESS:
            return StartDecision.SUCCEED
        if len(history) >= self.max_attempts:
            return StartDecision.EXHAUST
        return StartDecision.RETRY

    def backoff_after(self, attempt: RetryAttempt) -> float:
        """Delay before relaunching; an unresponsive child was already given its extended grace."""
        if attempt.outcome is AttemptOutcome.PROCESS_EXITED:
            return self.backoff_delay
        return 0.0


__all__ = ["AttemptOutcome", "RetryAttempt", "StartDecision", "StartRetryPolicy"]

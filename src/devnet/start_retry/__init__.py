"""Bounded start-retry orchestration for the dependent process."""

from .orchestrator import ReadinessProbe, StartResult, StartRetryOrchestrator
from .policy import AttemptOutcome, RetryAttempt, StartDecision, StartRetryPolicy

__all__ = [
    "AttemptOutcome",
    "ReadinessProbe",
    "RetryAttempt",
    "StartDecision",
    "StartResult",
    "StartRetryOrchestrator",
    "StartRetryPolicy",
]

"""Readiness polling against JSON status endpoints."""

from .poller import ReadinessPoller, SleepFunc
from .predicates import block_hash, block_height, has_block_hash, has_block_height, latest_height
from .types import ReadinessQuery, ReadyPredicate

__all__ = [
    "ReadinessPoller",
    "ReadinessQuery",
    "ReadyPredicate",
    "SleepFunc",
    "block_hash",
    "block_height",
    "has_block_hash",
    "has_block_height",
    "latest_height",
]

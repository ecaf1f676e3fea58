"""Trusted-state extraction from a validator that is already known to be ready."""

import logging
from dataclasses import dataclass
from typing import Optional

from .exceptions import ReadinessTimeout, TrustedStateNotFound
from .readiness import ReadinessPoller, ReadinessQuery, block_hash, has_block_hash, has_block_height, latest_height

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrustedState:
    """Known-good block reference handed to the bridge."""

    value: str
    height: int

    def __post_init__(self) -> None:
        if not self.value or not self.value.strip():
            raise TrustedStateNotFound("Trusted hash must be a non-empty string", height=self.height)


class TrustedStateExtractor:
    """
    Reads a block hash the bridge can trust.

    Two fields are cross-checked: the status endpoint must report a latest
    height above zero (the validator is producing blocks, not merely
    initialised) and the block at the trusted height must carry a real hash.
    Only call this after the validator's readiness poll has succeeded.
    """

    def __init__(
        self,
        poller: ReadinessPoller,
        rpc_url: str,
        *,
        max_attempts: int,
        interval_seconds: float,
        trusted_height: Optional[int] = None,
    ):
        self.poller = poller
        self.rpc_url = rpc_url.rstrip("/")
        self.max_attempts = max_attempts
        self.interval_seconds = interval_seconds
        self.trusted_height = trusted_height

    async def extract(self) -> TrustedState:
        """
        Raises:
            TrustedStateNotFound: If the height cross-check or the hash lookup
                fails within the attempt budget
        """
        try:
            status = await self.poller.poll_until_ready(
                ReadinessQuery(
                    name="validator block production",
                    url=f"{self.rpc_url}/status",
                    predicate=has_block_height,
                    interval_seconds=self.interval_seconds,
                    max_attempts=self.max_attempts,
                )
            )
        except ReadinessTimeout as exc:
            raise TrustedStateNotFound(f"Validator reports no produced blocks: {exc}", url=self.rpc_url) from exc

        current_height = latest_height(status)
        logger.info("📊 Latest block height: %s", current_height)
        target_height = self.trusted_height or current_height

        try:
            block = await self.poller.poll_until_ready(
                ReadinessQuery(
                    name=f"block {target_height}",
                    url=f"{self.rpc_url}/block?height={target_height}",
                    predicate=has_block_hash,
                    interval_seconds=self.interval_seconds,
                    max_attempts=self.max_attempts,
                )
            )
        except ReadinessTimeout as exc:
            raise TrustedStateNotFound(
                f"No usable hash for block {target_height}: {exc}", url=self.rpc_url, height=target_height
            ) from exc

        value = block_hash(block)
        if value is None:
            raise TrustedStateNotFound(f"Block {target_height} hash is empty", height=target_height)
        logger.info("✅ Retrieved trusted hash %s at height %s", value, target_height)
        return TrustedState(value=value, height=target_height)


__all__ = ["TrustedState", "TrustedStateExtractor"]

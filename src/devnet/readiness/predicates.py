"""Shape-aware readiness predicates for CometBFT RPC responses.

An HTTP 200 is never enough: a payload only counts as ready when it parses
into the expected shape and the signal field carries a meaningful value.
"""

from typing import Any, Optional

_PLACEHOLDER_VALUES = {"", "null", "none", "nil", "<nil>", "0x"}


def _dig(payload: Any, *keys: str) -> Any:
    current = payload
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def latest_height(payload: Any) -> int:
    """Return ``result.sync_info.latest_block_height`` or 0 when absent or malformed."""
    raw = _dig(payload, "result", "sync_info", "latest_block_height")
    if isinstance(raw, bool) or raw is None:
        return 0
    try:
        height = int(str(raw).strip())
    except ValueError:
        return 0
    return max(height, 0)


def has_block_height(payload: Any) -> bool:
    """Status payload reports at least one produced block."""
    return latest_height(payload) > 0


def block_hash(payload: Any) -> Optional[str]:
    """Return ``result.block_id.hash`` unless it is missing or a placeholder."""
    if _dig(payload, "result", "block") is None:
        return None
    raw = _dig(payload, "result", "block_id", "hash")
    if not isinstance(raw, str):
        return None
    value = raw.strip()
    if value.lower() in _PLACEHOLDER_VALUES or set(value) == {"0"}:
        return None
    return value


def has_block_hash(payload: Any) -> bool:
    return block_hash(payload) is not None


def block_height(payload: Any) -> int:
    """Height recorded in a ``/block`` response header, 0 when absent."""
    raw = _dig(payload, "result", "block", "header", "height")
    try:
        return int(str(raw).strip()) if raw is not None else 0
    except ValueError:
        return 0


__all__ = ["block_hash", "block_height", "has_block_hash", "has_block_height", "latest_height"]

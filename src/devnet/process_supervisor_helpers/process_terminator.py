"""Terminate child processes with graceful shutdown then force kill."""

import asyncio
import logging

logger = logging.getLogger(__name__)


async def terminate_process(
    handle: asyncio.subprocess.Process,
    *,
    name: str,
    graceful_timeout: float,
    force_timeout: float,
) -> int:
    """
    Send SIGTERM, wait, then SIGKILL if the process persists.

    Args:
        handle: asyncio subprocess handle
        name: Process name for logging
        graceful_timeout: Seconds to wait after SIGTERM
        force_timeout: Seconds to wait after SIGKILL

    Returns:
        Exit status of the reaped process

    Raises:
        RuntimeError: If the process persists after SIGKILL
    """
    if handle.returncode is not None:
        return handle.returncode

    try:
        handle.terminate()
    except ProcessLookupError:
        logger.debug("%s process %s exited before SIGTERM", name, handle.pid)
        return await handle.wait()

    try:
        return await asyncio.wait_for(handle.wait(), timeout=graceful_timeout)
    except asyncio.TimeoutError:
        logger.warning("⏱️ %s (PID %s) did not terminate within %ss; sending SIGKILL", name, handle.pid, graceful_timeout)

    try:
        handle.kill()
    except ProcessLookupError:
        logger.debug("%s process %s exited before SIGKILL", name, handle.pid)
    try:
        return await asyncio.wait_for(handle.wait(), timeout=force_timeout)
    except asyncio.TimeoutError as kill_exc:
        raise RuntimeError(
            f"{name} process {handle.pid} persisted after SIGKILL for {force_timeout}s; manual intervention required."
        ) from kill_exc

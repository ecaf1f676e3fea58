"""Liveness checks that never block on the child."""

import psutil


class PidValidator:
    """psutil view of a child PID, independent of asyncio's reaper."""

    @staticmethod
    def is_running(pid: int) -> bool:
        """False once the PID is gone, inaccessible, or only a zombie entry remains."""
        try:
            status = psutil.Process(pid).status()
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            return False
        return status not in (psutil.STATUS_ZOMBIE, psutil.STATUS_DEAD)

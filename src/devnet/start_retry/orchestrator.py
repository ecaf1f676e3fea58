"""
Start-retry loop for a dependent process.

Per attempt: launch -> grace delay -> alive? -> RPC grace -> probe ->
(extended grace -> probe) -> Ready | Retry | Exhausted. A running child is
not trusted until it also answers a functional RPC call.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional, Sequence, Tuple

from ..exceptions import ProcessExitedEarly, ShutdownRequested, StartupExhausted
from ..process_supervisor import ManagedProcess, ProcessSupervisor
from ..readiness import SleepFunc
from .policy import AttemptOutcome, RetryAttempt, StartDecision, StartRetryPolicy

logger = logging.getLogger(__name__)

ReadinessProbe = Callable[[], Awaitable[bool]]


@dataclass(frozen=True)
class StartResult:
    """Live child and the attempts it took to get there."""

    process: ManagedProcess
    attempts: Tuple[RetryAttempt, ...]


class StartRetryOrchestrator:
    """Drives StartRetryPolicy decisions against real launches."""

    def __init__(
        self,
        supervisor: ProcessSupervisor,
        policy: StartRetryPolicy,
        sleep: SleepFunc = asyncio.sleep,
        stop_event: Optional[asyncio.Event] = None,
    ):
        self.supervisor = supervisor
        self.policy = policy
        self._sleep = sleep
        self._stop_event = stop_event

    async def start(self, name: str, command: Sequence[str], probe: ReadinessProbe) -> StartResult:
        """
        Launch ``command`` until it is both alive and answering ``probe``.

        Raises:
            StartupExhausted: After ``policy.max_attempts`` failed attempts;
                ``attempts`` holds the full history
            ShutdownRequested: If ``stop_event`` is set before a launch or after
                a delay; ``process`` is the child of the attempt in flight, if any
        """
        history: List[RetryAttempt] = []
        while True:
            self._check_stop(name)
            index = len(history) + 1
            logger.info("Starting %s (attempt %s/%s)", name, index, self.policy.max_attempts)
            attempt, process = await self._attempt(index, name, command, probe)
            history.append(attempt)

            decision = self.policy.decide(history)
            if decision is StartDecision.SUCCEED and process is not None:
                logger.info("✅ %s started and responding to RPC", name)
                return StartResult(process=process, attempts=tuple(history))
            if decision is StartDecision.EXHAUST:
                summary = "; ".join(item.describe() for item in history)
                logger.error("⚠️ Failed to start %s after %s attempts: %s", name, len(history), summary)
                raise StartupExhausted(f"{name} failed to start after {len(history)} attempts", attempts=tuple(history))

            backoff = self.policy.backoff_after(attempt)
            if backoff > 0:
                logger.info("Retrying %s in %s seconds...", name, backoff)
                await self._sleep(backoff)

    async def _attempt(
        self, index: int, name: str, command: Sequence[str], probe: ReadinessProbe
    ) -> Tuple[RetryAttempt, Optional[ManagedProcess]]:
        started = time.monotonic()
        process = await self.supervisor.launch(name, command)
        try:
            await self._sleep(self.policy.grace_delay)
            self._check_stop(name, process)
            await self._require_alive(name, process)

            await self._sleep(self.policy.rpc_grace_delay)
            self._check_stop(name, process)
            if await probe():
                return self._record(index, AttemptOutcome.SUCCESS, started), process

            logger.warning("⚠️ %s process is running but not responding to RPC yet...", name)
            await self._sleep(self.policy.extended_grace_delay)
            self._check_stop(name, process)
            if await probe():
                return self._record(index, AttemptOutcome.SUCCESS, started), process
            await self._require_alive(name, process)
        except ProcessExitedEarly as exc:
            logger.error("❌ %s", exc)
            return self._record(index, AttemptOutcome.PROCESS_EXITED, started, exc.exit_code), None

        logger.warning("%s still unresponsive; stopping PID %s before the next attempt", name, process.pid)
        exit_code = await self.supervisor.terminate(process)
        return self._record(index, AttemptOutcome.UNRESPONSIVE, started, exit_code), None

    def _check_stop(self, name: str, process: Optional[ManagedProcess] = None) -> None:
        if self._stop_event is not None and self._stop_event.is_set():
            raise ShutdownRequested(f"Shutdown requested while starting {name}", process=process)

    async def _require_alive(self, name: str, process: ManagedProcess) -> None:
        if self.supervisor.is_alive(process):
            return
        exit_code = await self.supervisor.wait(process)
        raise ProcessExitedEarly(f"{name} process failed to start (exit code {exit_code})", name=name, exit_code=exit_code)

    @staticmethod
    def _record(index: int, outcome: AttemptOutcome, started: float, exit_code: Optional[int] = None) -> RetryAttempt:
        return RetryAttempt(index=index, outcome=outcome, elapsed_seconds=time.monotonic() - started, exit_code=exit_code)


__all__ = ["ReadinessProbe", "StartResult", "StartRetryOrchestrator"]

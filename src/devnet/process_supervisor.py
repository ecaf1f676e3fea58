"""
Process supervisor for the devnet child processes.

Launches long-running children (validator, bridge), answers "is it still
alive?" without blocking, and waits for exit. One-shot CLI steps (init, keys,
genesis) go through ``run_command`` and fail fast on a non-zero status.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .exceptions import CommandFailedError
from .process_supervisor_helpers import PidValidator, terminate_process

logger = logging.getLogger(__name__)

DEFAULT_GRACEFUL_TIMEOUT_SECONDS = 10.0
DEFAULT_FORCE_TIMEOUT_SECONDS = 5.0


@dataclass
class ManagedProcess:
    """A child process launched and owned by a ProcessSupervisor."""

    name: str
    command: List[str]
    handle: asyncio.subprocess.Process
    started_at: float = field(default_factory=time.monotonic)

    @property
    def pid(self) -> int:
        return self.handle.pid

    @property
    def returncode(self) -> Optional[int]:
        return self.handle.returncode


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a one-shot CLI step."""

    command: List[str]
    exit_code: int
    stdout: str
    stderr: str


class ProcessSupervisor:
    """Launches, probes and reaps OS child processes."""

    def __init__(
        self,
        graceful_timeout: float = DEFAULT_GRACEFUL_TIMEOUT_SECONDS,
        force_timeout: float = DEFAULT_FORCE_TIMEOUT_SECONDS,
    ):
        self.graceful_timeout = graceful_timeout
        self.force_timeout = force_timeout
        self._processes: List[ManagedProcess] = []

    @property
    def processes(self) -> List[ManagedProcess]:
        return list(self._processes)

    async def launch(self, name: str, command: Sequence[str]) -> ManagedProcess:
        """
        Start a long-running child whose output goes to the container log.

        Args:
            name: Identifier used in logs
            command: argv of the child

        Returns:
            ManagedProcess tracking the child

        Raises:
            CommandFailedError: If the binary cannot be executed
        """
        argv = [str(part) for part in command]
        try:
            handle = await asyncio.create_subprocess_exec(*argv)
        except OSError as exc:
            raise CommandFailedError(f"Failed to launch {name}: {exc}", command=argv, exit_code=None, output="") from exc
        process = ManagedProcess(name=name, command=argv, handle=handle)
        self._processes.append(process)
        logger.info("🔄 %s started with PID %s", name, process.pid)
        return process

    def is_alive(self, process: ManagedProcess) -> bool:
        """Non-blocking liveness check; never reaps or signals the child."""
        if process.handle.returncode is not None:
            return False
        return PidValidator.is_running(process.pid)

    async def wait(self, process: ManagedProcess) -> int:
        """Block until the child terminates and return its exit status."""
        exit_code = await process.handle.wait()
        self._forget(process)
        logger.info("%s (PID %s) exited with code %s", process.name, process.pid, exit_code)
        return exit_code

    async def terminate(self, process: ManagedProcess) -> int:
        """Stop a child with SIGTERM, escalating to SIGKILL."""
        exit_code = await terminate_process(
            process.handle,
            name=process.name,
            graceful_timeout=self.graceful_timeout,
            force_timeout=self.force_timeout,
        )
        self._forget(process)
        return exit_code

    async def terminate_all(self) -> None:
        """Forward shutdown to every child that is still tracked."""
        for process in list(self._processes):
            logger.info("Stopping %s (PID %s)", process.name, process.pid)
            await self.terminate(process)

    async def run_command(self, command: Sequence[str], *, description: str = "") -> CommandResult:
        """
        Run a one-shot CLI step to completion, capturing its output.

        Raises:
            CommandFailedError: If the command exits non-zero or cannot be executed
        """
        argv = [str(part) for part in command]
        label = description or " ".join(argv)
        logger.debug("Running %s", label)
        try:
            handle = await asyncio.create_subprocess_exec(
                *argv,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            raise CommandFailedError(f"Failed to execute {label}: {exc}", command=argv, exit_code=None, output="") from exc

        stdout, stderr = await handle.communicate()
        result = CommandResult(
            command=argv,
            exit_code=handle.returncode if handle.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        if result.exit_code != 0:
            output = (result.stderr or result.stdout).strip()
            raise CommandFailedError(
                f"{label} exited with code {result.exit_code}: {output}",
                command=argv,
                exit_code=result.exit_code,
                output=output,
            )
        return result

    def _forget(self, process: ManagedProcess) -> None:
        if process in self._processes:
            self._processes.remove(process)


__all__ = ["CommandResult", "ManagedProcess", "ProcessSupervisor"]

"""
Top-level devnet orchestration.

Three modes mirror the container entrypoints:

- ``standalone``: validator and bridge in one container. A bridge that never
  becomes ready degrades the run to validator-only instead of failing it.
- ``validator``: prepare, start and supervise only the validator.
- ``bridge``: bootstrap a bridge against a validator in another container.

``run`` returns the process exit code and only returns once every launched
child has exited. After SIGTERM or SIGINT no further child is launched; every
running child is stopped and ``run`` returns the first non-zero child exit
code (0 when nothing had been launched yet).
"""

import asyncio
import logging
import signal
from enum import Enum
from typing import Any, List, Optional, Tuple

from .bridge_bootstrapper import BridgeBootstrapper
from .bridge_client import BridgeRpcClient
from .config import DevnetConfig
from .exceptions import (
    CommandFailedError,
    ConfigWriteError,
    ReadinessTimeout,
    ShutdownRequested,
    StartupExhausted,
    TrustedStateNotFound,
)
from .http_client import JsonHttpClient
from .process_supervisor import ManagedProcess, ProcessSupervisor
from .readiness import ReadinessPoller, ReadinessQuery, SleepFunc, has_block_height
from .start_retry import StartRetryOrchestrator
from .summary import format_connection_summary
from .trusted_state import TrustedState, TrustedStateExtractor
from .validator_setup import ValidatorSetup

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1

VALIDATOR_PROCESS = "celestia-appd"
BRIDGE_PROCESS = "celestia-bridge"

FATAL_ERRORS = (ReadinessTimeout, TrustedStateNotFound, ConfigWriteError, CommandFailedError)


class DevnetMode(Enum):
    STANDALONE = "standalone"
    VALIDATOR = "validator"
    BRIDGE = "bridge"


class DevnetRunner:
    """Sequences setup, readiness, trusted-state hand-off and supervision."""

    def __init__(
        self,
        config: DevnetConfig,
        *,
        supervisor: Optional[ProcessSupervisor] = None,
        client: Optional[Any] = None,
        validator_setup: Optional[ValidatorSetup] = None,
        bridge_bootstrapper: Optional[BridgeBootstrapper] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.config = config
        self.supervisor = supervisor or ProcessSupervisor()
        self.validator_setup = validator_setup or ValidatorSetup(config, self.supervisor)
        self.bridge_bootstrapper = bridge_bootstrapper or BridgeBootstrapper(config, self.supervisor)
        self._client = client
        self._sleep = sleep
        self._stop_event = asyncio.Event()
        self._shutdown_task: Optional["asyncio.Task[None]"] = None
        self._children: List[ManagedProcess] = []

    async def run(self, mode: DevnetMode) -> int:
        """Run ``mode`` to completion and return the exit code."""
        logger.info("🚀 Starting Celestia devnet (%s mode)", mode.value)
        logger.info("Chain ID: %s", self.config.chain.chain_id)
        if self._client is not None:
            return await self._run_guarded(mode, self._client)
        async with JsonHttpClient(self.config.readiness.request_timeout_seconds) as client:
            return await self._run_guarded(mode, client)

    async def _run_guarded(self, mode: DevnetMode, client: Any) -> int:
        self._install_signal_handlers()
        try:
            if mode is DevnetMode.VALIDATOR:
                return await self._run_validator(client)
            if mode is DevnetMode.BRIDGE:
                return await self._run_bridge(client)
            return await self._run_standalone(client)
        except ShutdownRequested as exc:
            logger.info("🛑 %s", exc)
            if exc.process is not None:
                self._children.append(exc.process)
            return await self._stop_children()
        except FATAL_ERRORS as exc:
            logger.error("❌ %s", exc)
            if self._stop_event.is_set():
                return await self._stop_children()
            await self.supervisor.terminate_all()
            return EXIT_FAILURE
        finally:
            self._remove_signal_handlers()
            if self._shutdown_task is not None:
                await self._shutdown_task

    async def _run_validator(self, client: Any) -> int:
        validator = await self._launch_validator()
        await self._poller(client).poll_until_ready(self._validator_query())
        self._log_lines(format_connection_summary(self.config.endpoints))
        return await self._wait_all([validator])

    async def _run_standalone(self, client: Any) -> int:
        validator = await self._launch_validator()
        trusted_state = await self._await_trusted_state(client)
        try:
            bridge, auth_token = await self._start_bridge(client, trusted_state)
        except StartupExhausted:
            self._log_lines(format_connection_summary(self.config.endpoints, degraded=True))
            return await self._wait_all([validator])

        self._log_lines(format_connection_summary(self.config.endpoints, auth_token=auth_token))
        return await self._wait_all([validator, bridge])

    async def _run_bridge(self, client: Any) -> int:
        logger.info("🌉 Bridge-only mode against validator %s", self.config.endpoints.validator_rpc_url)
        trusted_state = await self._await_trusted_state(client)
        try:
            bridge, auth_token = await self._start_bridge(client, trusted_state)
        except StartupExhausted as exc:
            logger.error("⚠️ %s", exc)
            return EXIT_FAILURE

        self._log_lines(format_connection_summary(self.config.endpoints, include_validator=False, auth_token=auth_token))
        return await self._wait_all([bridge])

    async def _launch_validator(self) -> ManagedProcess:
        await self.validator_setup.prepare()
        self._check_stop("before launching the validator")
        logger.info("🚀 Starting %s", self.config.paths.app_binary)
        validator = await self.supervisor.launch(VALIDATOR_PROCESS, self.validator_setup.start_command())
        self._children.append(validator)
        return validator

    async def _await_trusted_state(self, client: Any) -> TrustedState:
        readiness = self.config.readiness
        poller = self._poller(client)
        logger.info("⏳ Waiting for validator to be ready...")
        await poller.poll_until_ready(self._validator_query())

        if readiness.stabilize_delay_seconds > 0:
            logger.info("⏳ Waiting %ss for validator to stabilize", readiness.stabilize_delay_seconds)
            await self._sleep(readiness.stabilize_delay_seconds)

        logger.info("🔍 Fetching trusted hash from validator")
        extractor = TrustedStateExtractor(
            poller,
            self.config.endpoints.validator_rpc_url,
            max_attempts=readiness.block_max_attempts,
            interval_seconds=readiness.block_interval_seconds,
            trusted_height=readiness.trusted_height,
        )
        return await extractor.extract()

    async def _start_bridge(self, client: Any, trusted_state: TrustedState) -> Tuple[ManagedProcess, str]:
        self._check_stop("before bootstrapping the bridge")
        await self.bridge_bootstrapper.bootstrap(trusted_state)
        auth_token = await self.bridge_bootstrapper.generate_auth_token()
        rpc = BridgeRpcClient(client, self.config.endpoints.bridge_rpc_url, auth_token)
        orchestrator = StartRetryOrchestrator(
            self.supervisor, self.config.start_policy, sleep=self._sleep, stop_event=self._stop_event
        )
        logger.info("🌉 Starting Celestia bridge node")
        result = await orchestrator.start(BRIDGE_PROCESS, self.bridge_bootstrapper.start_command(), rpc.is_responding)
        self._children.append(result.process)
        self._check_stop("after the bridge started")
        return result.process, auth_token

    def _validator_query(self) -> ReadinessQuery:
        readiness = self.config.readiness
        return ReadinessQuery(
            name="validator",
            url=f"{self.config.endpoints.validator_rpc_url}/status",
            predicate=has_block_height,
            interval_seconds=readiness.interval_seconds,
            max_attempts=readiness.max_attempts,
        )

    def _poller(self, client: Any) -> ReadinessPoller:
        return ReadinessPoller(client, sleep=self._sleep, stop_event=self._stop_event)

    async def _wait_all(self, processes: List[ManagedProcess]) -> int:
        exit_codes = await asyncio.gather(*(self.supervisor.wait(process) for process in processes))
        for process, exit_code in zip(processes, exit_codes):
            if exit_code != 0:
                logger.warning("%s exited with code %s", process.name, exit_code)
                return exit_code
        return EXIT_OK

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.add_signal_handler(sig, self._request_shutdown, sig)
            except (NotImplementedError, RuntimeError, ValueError):
                logger.debug("Cannot install handler for %s in this context", sig)

    def _remove_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            try:
                loop.remove_signal_handler(sig)
            except (NotImplementedError, RuntimeError, ValueError):
                logger.debug("Cannot remove handler for %s in this context", sig)

    def _request_shutdown(self, sig: signal.Signals) -> None:
        if self._stop_event.is_set():
            logger.info("Received %s; shutdown already in progress", sig.name)
            return
        logger.info("Received %s; stopping child processes", sig.name)
        self._stop_event.set()
        self._shutdown_task = asyncio.ensure_future(self.supervisor.terminate_all())

    def _check_stop(self, stage: str) -> None:
        if self._stop_event.is_set():
            raise ShutdownRequested(f"Shutdown requested {stage}")

    async def _stop_children(self) -> int:
        """Finish the signal-triggered shutdown and report the children's exit codes."""
        if self._shutdown_task is not None:
            await self._shutdown_task
        await self.supervisor.terminate_all()
        return await self._wait_all(self._children)

    @staticmethod
    def _log_lines(lines: List[str]) -> None:
        for line in lines:
            logger.info(line)


__all__ = ["DevnetMode", "DevnetRunner", "EXIT_FAILURE", "EXIT_OK"]

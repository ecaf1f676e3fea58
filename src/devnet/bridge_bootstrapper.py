"""Bridge (dependent process) store initialisation and trusted-hash injection."""

import logging
from pathlib import Path
from typing import List

from .config import DevnetConfig
from .config_files import TomlConfigEditor
from .exceptions import ConfigWriteError
from .process_supervisor import ProcessSupervisor
from .trusted_state import TrustedState
from .validator_setup import wipe_directory

logger = logging.getLogger(__name__)

TRUSTED_HASH_KEY = ("Header", "TrustedHash")


class BridgeBootstrapper:
    """
    Initialises the bridge store so it syncs from a trusted block.

    ``bootstrap`` performs, in order and all-or-nothing: wipe and init the
    store, write the trusted hash into its config.toml, re-read the file to
    confirm the value landed. Any failure propagates before a launch happens.
    """

    def __init__(self, config: DevnetConfig, supervisor: ProcessSupervisor, editor: TomlConfigEditor | None = None):
        self.config = config
        self.supervisor = supervisor
        self.editor = editor or TomlConfigEditor()

    @property
    def store(self) -> Path:
        return self.config.paths.node_path

    @property
    def config_file(self) -> Path:
        return self.store / "config.toml"

    def _bridge(self, *args: str) -> List[str]:
        return [self.config.paths.node_binary, "bridge", *args]

    async def bootstrap(self, trusted_state: TrustedState) -> None:
        """
        Raises:
            ConfigWriteError: If the trusted state is empty or the hash is not
                present in the persisted config after writing
            CommandFailedError: If ``bridge init`` fails
        """
        if trusted_state is None or not trusted_state.value:
            raise ConfigWriteError("Refusing to bootstrap the bridge without a trusted hash", path=self.config_file)

        wipe_directory(self.store)
        logger.info("🔧 Initializing bridge store at %s", self.store)
        await self.supervisor.run_command(
            self._bridge(
                "init",
                "--p2p.network",
                self.config.chain.p2p_network,
                "--core.ip",
                self.config.endpoints.validator_host,
                "--node.store",
                str(self.store),
            ),
            description="bridge init",
        )

        logger.info("📝 Updating bridge configuration with trusted hash %s", trusted_state.value)
        self.editor.set_values(self.config_file, {TRUSTED_HASH_KEY: trusted_state.value})
        logger.info("✅ Bridge configuration updated successfully")

    async def generate_auth_token(self) -> str:
        """Create an admin JWT for the bridge RPC."""
        result = await self.supervisor.run_command(
            self._bridge("auth", "admin", "--p2p.network", self.config.chain.p2p_network, "--node.store", str(self.store)),
            description="bridge auth admin",
        )
        lines = [line.strip() for line in result.stdout.splitlines() if line.strip()]
        if not lines:
            raise ConfigWriteError("bridge auth admin produced no token", path=self.store)
        logger.info("🔑 Bridge auth token generated")
        return lines[-1]

    def start_command(self) -> List[str]:
        endpoints = self.config.endpoints
        return self._bridge(
            "start",
            "--p2p.network",
            self.config.chain.p2p_network,
            "--core.ip",
            endpoints.validator_host,
            "--core.port",
            str(endpoints.grpc_port),
            "--rpc.addr",
            "0.0.0.0",
            "--rpc.port",
            str(endpoints.bridge_rpc_port),
            "--node.store",
            str(self.store),
            "--gateway",
            "--gateway.addr",
            "0.0.0.0",
            "--gateway.port",
            str(endpoints.bridge_gateway_port),
            "--log.level",
            "INFO",
        )


__all__ = ["BridgeBootstrapper", "TRUSTED_HASH_KEY"]

"""
Genesis and config preparation for the single devnet validator.

Runs the ``celestia-appd`` init/keys/genesis sequence against a freshly wiped
home directory, then applies the devnet overrides: zero minimum gas price in
genesis, externally bound RPC/API/gRPC listeners, permissive CORS and short
consensus timeouts.
"""

import logging
import shutil
from pathlib import Path
from typing import List

from .config import DevnetConfig
from .config_files import TomlConfigEditor, update_json_file
from .process_supervisor import ProcessSupervisor

logger = logging.getLogger(__name__)

ZERO_GAS_PRICE = "0.000000000000000000"
BLOCK_TIMEOUT = "2s"


def wipe_directory(path: Path) -> None:
    """Remove ``path`` recursively if it exists so every run starts clean."""
    if path.exists():
        logger.info("🧹 Cleaning up existing data at %s", path)
        shutil.rmtree(path)


class ValidatorSetup:
    """Prepares and describes the validator (primary) process."""

    def __init__(self, config: DevnetConfig, supervisor: ProcessSupervisor, editor: TomlConfigEditor | None = None):
        self.config = config
        self.supervisor = supervisor
        self.editor = editor or TomlConfigEditor()

    @property
    def home(self) -> Path:
        return self.config.paths.app_path

    @property
    def genesis_file(self) -> Path:
        return self.home / "config" / "genesis.json"

    @property
    def config_file(self) -> Path:
        return self.home / "config" / "config.toml"

    @property
    def app_config_file(self) -> Path:
        return self.home / "config" / "app.toml"

    def _app(self, *args: str) -> List[str]:
        return [self.config.paths.app_binary, *args, "--home", str(self.home)]

    async def prepare(self) -> str:
        """
        Build genesis and patch config for a fresh chain.

        Returns:
            Bech32 address of the validator account
        """
        chain = self.config.chain
        keyring = f"--keyring-backend={chain.keyring_backend}"
        wipe_directory(self.home)

        logger.info("⚙️ Initializing %s (chain id %s)", self.config.paths.app_binary, chain.chain_id)
        await self.supervisor.run_command(self._app("init", chain.moniker, "--chain-id", chain.chain_id), description="app init")

        logger.info("🔑 Creating validator key %s", chain.validator_name)
        await self.supervisor.run_command(self._app("keys", "add", chain.validator_name, keyring), description="keys add")
        shown = await self.supervisor.run_command(
            self._app("keys", "show", chain.validator_name, "-a", keyring), description="keys show"
        )
        address = shown.stdout.strip()

        logger.info("💰 Adding genesis account %s with %s", address, chain.coin_amount)
        await self.supervisor.run_command(
            self._app("genesis", "add-genesis-account", address, chain.coin_amount), description="add-genesis-account"
        )

        logger.info("📝 Creating genesis transaction staking %s", chain.stake_amount)
        await self.supervisor.run_command(
            self._app(
                "genesis",
                "gentx",
                chain.validator_name,
                chain.stake_amount,
                f"--chain-id={chain.chain_id}",
                keyring,
                "--offline",
                "--account-number=0",
                "--sequence=0",
            ),
            description="gentx",
        )

        logger.info("📋 Collecting genesis transactions")
        await self.supervisor.run_command(self._app("genesis", "collect-gentxs"), description="collect-gentxs")

        self.patch_genesis()
        self.patch_node_config()
        self.patch_app_config()
        return address

    def patch_genesis(self) -> None:
        logger.info("💸 Setting minimum gas price to 0 for devnet")
        update_json_file(
            self.genesis_file,
            {
                ("app_state", "minfee", "network_min_gas_price"): ZERO_GAS_PRICE,
                ("app_state", "minfee", "params", "network_min_gas_price"): ZERO_GAS_PRICE,
            },
        )

    def patch_node_config(self) -> None:
        logger.info("🔧 Updating %s", self.config_file)
        self.editor.set_values(
            self.config_file,
            {
                ("rpc", "laddr"): f"tcp://0.0.0.0:{self.config.endpoints.validator_port}",
                ("rpc", "cors_allowed_origins"): ["*"],
                ("consensus", "timeout_commit"): BLOCK_TIMEOUT,
                ("consensus", "timeout_propose"): BLOCK_TIMEOUT,
            },
        )

    def patch_app_config(self) -> None:
        endpoints = self.config.endpoints
        logger.info("🔧 Configuring gRPC and API services in %s", self.app_config_file)
        self.editor.set_values(
            self.app_config_file,
            {
                ("api", "enable"): True,
                ("api", "address"): f"tcp://0.0.0.0:{endpoints.api_port}",
                ("api", "enabled-unsafe-cors"): True,
                ("grpc", "enable"): True,
                ("grpc", "address"): f"0.0.0.0:{endpoints.grpc_port}",
                ("grpc-web", "enable"): True,
                ("grpc-web", "address"): f"0.0.0.0:{endpoints.grpc_web_port}",
            },
            create_tables=True,
        )

    def start_command(self) -> List[str]:
        endpoints = self.config.endpoints
        return self._app(
            "start",
            "--grpc.enable=true",
            f"--grpc.address=0.0.0.0:{endpoints.grpc_port}",
            "--api.enable=true",
            "--api.enabled-unsafe-cors=true",
            f"--api.address=tcp://0.0.0.0:{endpoints.api_port}",
            "--force-no-bbr",
            "--log_level",
            "info",
        )


__all__ = ["ValidatorSetup", "wipe_directory"]

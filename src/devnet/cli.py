"""Command-line entrypoint: ``celestia-devnet [standalone|validator|bridge]``."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Optional, Sequence

from .config import LOCAL_VALIDATOR_HOST, REMOTE_VALIDATOR_HOST, ConfigurationError, env_str, load_devnet_config
from .devnet_runner import DevnetMode, DevnetRunner
from .logging_config import setup_logging

logger = logging.getLogger(__name__)

EXIT_CONFIGURATION = 2
SERVICE_NAME = "devnet"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="celestia-devnet",
        description="Bootstrap a single-node Celestia devnet (validator and bridge).",
    )
    parser.add_argument(
        "mode",
        nargs="?",
        choices=[mode.value for mode in DevnetMode],
        help="Which processes to run (default: $DEVNET_MODE or standalone)",
    )
    parser.add_argument("--log-level", help="Console log level (default: $LOG_LEVEL or INFO)")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        mode = DevnetMode(args.mode or env_str("DEVNET_MODE", or_value=DevnetMode.STANDALONE.value))
        default_host = REMOTE_VALIDATOR_HOST if mode is DevnetMode.BRIDGE else LOCAL_VALIDATOR_HOST
        config = load_devnet_config(default_validator_host=default_host)
        setup_logging(SERVICE_NAME, level=args.log_level or config.log_level, log_dir=config.log_dir)
    except (ConfigurationError, ValueError) as exc:
        sys.stderr.write(f"Configuration error: {exc}\n")
        return EXIT_CONFIGURATION

    try:
        return asyncio.run(DevnetRunner(config).run(mode))
    except KeyboardInterrupt:
        logger.info("devnet interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())

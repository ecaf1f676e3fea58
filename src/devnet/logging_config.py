"""
Centralized logging configuration for the devnet entrypoint.

This module provides a single setup_logging function that configures:
- Console output to stdout (the container log)
- Optional file output to {log_dir}/{service_name}.log
- Fresh log file on each start unless LOG_APPEND=1
"""

import logging
import os
import sys
import threading
from pathlib import Path
from typing import Optional

_config_lock = threading.Lock()
_MODULE_LOGGER = logging.getLogger(__name__)
_LOG_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _build_console_handler(level: int) -> logging.Handler:
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    console_handler.setLevel(level)
    return console_handler


def _build_file_handler(service_name: str, log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / f"{service_name}.log"
    file_mode = "a" if os.getenv("LOG_APPEND") == "1" else "w"
    file_handler = logging.FileHandler(log_path, mode=file_mode)
    file_handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    file_handler.setLevel(logging.DEBUG)
    return file_handler


def _close_handlers(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        try:
            handler.close()
        except OSError as exc:
            _MODULE_LOGGER.debug("Handler close failed: %s", exc)
        logger.removeHandler(handler)


def _suppress_noisy_third_parties() -> None:
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("asyncio").setLevel(logging.WARNING)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)


def resolve_level(level_name: str) -> int:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {level_name}")
    return level


def setup_logging(service_name: Optional[str] = None, level: str = "INFO", log_dir: Optional[Path] = None) -> None:
    """Configure the root logger; safe to call more than once."""

    with _config_lock:
        root_logger = logging.getLogger()
        _close_handlers(root_logger)

        numeric_level = resolve_level(level)
        root_logger.addHandler(_build_console_handler(numeric_level))
        if service_name and log_dir is not None:
            root_logger.addHandler(_build_file_handler(service_name, log_dir))

        root_logger.setLevel(min(numeric_level, logging.DEBUG) if log_dir is not None else numeric_level)
        _suppress_noisy_third_parties()


__all__ = ["resolve_level", "setup_logging"]

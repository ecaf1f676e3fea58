"""
Structured editing of the TOML and JSON files the node binaries generate.

Edits are parse-modify-serialize (tomlkit keeps comments and layout intact)
and every TOML edit is verified by re-reading the file with an independent
parser, so a write that silently did nothing is reported as ConfigWriteError.
"""

from __future__ import annotations

import json
import logging
import os
import tomllib
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple

import tomlkit
from tomlkit.exceptions import TOMLKitError
from tomlkit.items import Table
from tomlkit.toml_document import TOMLDocument

from .exceptions import ConfigWriteError

logger = logging.getLogger(__name__)

KeyPath = Tuple[str, ...]


def _dotted(key_path: KeyPath) -> str:
    return ".".join(key_path)


def _atomic_write(path: Path, text: str) -> None:
    tmp_path = path.with_name(f"{path.name}.tmp")
    tmp_path.write_text(text, encoding="utf-8")
    os.replace(tmp_path, path)


class TomlConfigEditor:
    """Sets and verifies keys in TOML config files."""

    def load(self, path: Path) -> TOMLDocument:
        try:
            return tomlkit.parse(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigWriteError(f"Config file not found: {path}", path=path) from exc
        except (OSError, TOMLKitError) as exc:
            raise ConfigWriteError(f"Failed to parse {path}: {exc}", path=path) from exc

    def save(self, path: Path, document: TOMLDocument) -> None:
        try:
            _atomic_write(path, tomlkit.dumps(document))
        except OSError as exc:
            raise ConfigWriteError(f"Failed to write {path}: {exc}", path=path) from exc

    def set_values(self, path: Path, values: Mapping[KeyPath, Any], *, create_tables: bool = False) -> None:
        """
        Assign each key path, save, then verify the file on disk.

        Args:
            path: TOML file to edit
            values: Mapping of key paths, e.g. ``("rpc", "laddr")``, to values
            create_tables: Create missing parent tables instead of failing

        Raises:
            ConfigWriteError: If a parent table is missing, the write fails,
                or the re-read file does not hold the requested values
        """
        document = self.load(path)
        for key_path, value in values.items():
            container = self._resolve_parent(document, key_path, path=path, create_tables=create_tables)
            container[key_path[-1]] = value
        self.save(path, document)
        self.verify_values(path, values)
        logger.debug("Updated %s: %s", path, ", ".join(_dotted(k) for k in values))

    def verify_values(self, path: Path, values: Mapping[KeyPath, Any]) -> None:
        """Re-read ``path`` and confirm every key path holds its expected value."""
        try:
            with path.open("rb") as handle:
                on_disk = tomllib.load(handle)
        except (OSError, tomllib.TOMLDecodeError) as exc:
            raise ConfigWriteError(f"Failed to re-read {path}: {exc}", path=path) from exc

        for key_path, expected in values.items():
            actual: Any = on_disk
            for key in key_path:
                if not isinstance(actual, dict) or key not in actual:
                    actual = None
                    break
                actual = actual[key]
            if actual != expected:
                raise ConfigWriteError(
                    f"{_dotted(key_path)} in {path} is {actual!r}, expected {expected!r}",
                    path=path,
                    key=_dotted(key_path),
                )

    @staticmethod
    def _resolve_parent(document: TOMLDocument, key_path: KeyPath, *, path: Path, create_tables: bool) -> Any:
        if not key_path:
            raise ValueError("Key path must contain at least one key")
        container: Any = document
        for key in key_path[:-1]:
            if key not in container:
                if not create_tables:
                    raise ConfigWriteError(
                        f"Table [{key}] missing from {path} while setting {_dotted(key_path)}",
                        path=path,
                        key=_dotted(key_path),
                    )
                container[key] = tomlkit.table()
            container = container[key]
            if not isinstance(container, (Table, dict)):
                raise ConfigWriteError(f"{key} in {path} is not a table", path=path, key=_dotted(key_path))
        return container


def update_json_file(path: Path, values: Mapping[KeyPath, Any]) -> Dict[str, Any]:
    """
    Set nested keys in a JSON document, creating intermediate objects.

    Returns:
        The updated document
    """
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigWriteError(f"Failed to read JSON config {path}: {exc}", path=path) from exc
    if not isinstance(document, dict):
        raise ConfigWriteError(f"JSON config {path} must contain an object at the top level", path=path)

    for key_path, value in values.items():
        container = document
        for key in key_path[:-1]:
            child = container.setdefault(key, {})
            if not isinstance(child, dict):
                raise ConfigWriteError(f"{key} in {path} is not an object", path=path, key=_dotted(key_path))
            container = child
        container[key_path[-1]] = value

    try:
        _atomic_write(path, json.dumps(document, indent=2))
    except OSError as exc:
        raise ConfigWriteError(f"Failed to write {path}: {exc}", path=path) from exc
    return document


__all__ = ["KeyPath", "TomlConfigEditor", "update_json_file"]

"""Reading ``KEY=value`` defaults from dotenv files."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Tuple

from ..errors import ConfigurationError

_EXPORT_PREFIX = "export "
_QUOTES = "'\""


class DotenvLoader:
    """Parses the subset of dotenv syntax the devnet images ship."""

    @staticmethod
    def load_from_file(path: Path) -> Dict[str, str]:
        """
        Return the assignments in ``path``; a missing file yields ``{}``.

        Comments, blank lines and lines without ``=`` are ignored. A later
        assignment of the same key wins.

        Raises:
            ConfigurationError: If the file exists but cannot be read
        """
        if not path.exists():
            return {}
        try:
            text = path.read_text()
        except OSError as exc:
            raise ConfigurationError(f"Failed to read dotenv file {path}") from exc

        values: Dict[str, str] = {}
        for line in text.splitlines():
            pair = DotenvLoader.parse_line(line)
            if pair is not None:
                values[pair[0]] = pair[1]
        return values

    @staticmethod
    def parse_line(line: str) -> Optional[Tuple[str, str]]:
        stripped = line.strip()
        if not stripped or stripped.startswith("#") or "=" not in stripped:
            return None
        key, raw_value = stripped.split("=", 1)
        key = key.strip()
        if key.startswith(_EXPORT_PREFIX):
            key = key[len(_EXPORT_PREFIX) :].strip()
        if not key:
            return None
        return key, raw_value.strip().strip(_QUOTES)

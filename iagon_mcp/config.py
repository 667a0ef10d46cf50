"""
Process configuration loaded from the environment.

Settings come from environment variables, optionally seeded from a
``.env`` file. The file reader understands a small dotenv subset:

    KEY=value
    export KEY=value
    KEY="quoted value"    # or single quotes
    KEY=value  # trailing comment

One matching pair of outer quotes is removed. There is no variable
interpolation, escape processing or multi-line values.
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .constants import IAGON_API_BASE_URL, IAGON_DOWNLOAD_URL
from .errors import ConfigurationError


TOKEN_ENV = "IAGON_ACCESS_TOKEN"
TRANSPORTS = ("stdio", "http")

TOKEN_HELP = (
    f"{TOKEN_ENV} environment variable is required. "
    "Generate one at https://app.iagon.com -> Settings -> Generate Token, "
    f"then: export {TOKEN_ENV}=your-token-here"
)


@dataclass(frozen=True)
class Settings:
    """Immutable runtime settings."""
    access_token: str
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 3000
    api_base_url: str = IAGON_API_BASE_URL
    download_url: str = IAGON_DOWNLOAD_URL
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """
        Build settings from environment variables.

        Raises:
            ConfigurationError: token missing, unknown transport or bad port
        """
        env = os.environ if environ is None else environ

        token = (env.get(TOKEN_ENV) or "").strip()
        if not token:
            raise ConfigurationError(TOKEN_HELP)

        transport = (env.get("IAGON_TRANSPORT") or "stdio").strip().lower()
        if transport not in TRANSPORTS:
            raise ConfigurationError(
                f"IAGON_TRANSPORT must be one of {', '.join(TRANSPORTS)}, got {transport!r}"
            )

        raw_port = env.get("PORT") or "3000"
        try:
            port = int(raw_port)
        except ValueError as exc:
            raise ConfigurationError(f"PORT must be an integer, got {raw_port!r}") from exc
        if not 0 < port < 65536:
            raise ConfigurationError(f"PORT out of range: {port}")

        return cls(
            access_token=token,
            transport=transport,
            host=env.get("HOST") or "127.0.0.1",
            port=port,
            api_base_url=env.get("IAGON_API_BASE_URL") or IAGON_API_BASE_URL,
            download_url=env.get("IAGON_DOWNLOAD_URL") or IAGON_DOWNLOAD_URL,
            log_level=env.get("LOG_LEVEL") or None,
        )


def _parse_env_line(raw_line: str) -> Optional[Tuple[str, str]]:
    """
    Parse one line of a ``.env`` file into a ``(key, value)`` pair.

    Returns None for blank lines, ``#`` comments and lines without ``=``.
    """
    line = raw_line.strip()
    if not line or line.startswith("#"):
        return None
    if line.startswith("export "):
        line = line[len("export "):].lstrip()

    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None

    value = value.strip()
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return key, value[1:-1]
    # Unquoted values may carry a trailing " # comment"
    return key, value.split(" #", 1)[0].rstrip()


def load_env_file(path: Path, override: bool = False) -> None:
    """
    Export the variables of a ``.env`` file into ``os.environ``.

    Variables already present in the process environment win unless
    ``override`` is set.

    Raises:
        ConfigurationError: path missing, not a regular file or unreadable
    """
    if not path.is_file():
        reason = "not found" if not path.exists() else "is not a file"
        raise ConfigurationError(f"env file {reason}: {path}")

    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"could not read env file {path}: {exc}") from exc

    for raw_line in content.splitlines():
        parsed = _parse_env_line(raw_line)
        if parsed is None:
            continue
        key, value = parsed
        if override or key not in os.environ:
            os.environ[key] = value


def resolve_default_env_file() -> Optional[Path]:
    default_env = Path(".env")
    return default_env if default_env.exists() and default_env.is_file() else None

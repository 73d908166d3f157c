"""Configuration for notioncli.

:class:`CliConfig` is a frozen dataclass holding everything the client needs
for one command: the API key, the ``Notion-Version`` header value, the HTTP
timeout and the retry knobs.  It is built exactly once per process by
:func:`resolve_config`, which is the only place that reads the environment,
the ``.env`` file and the TOML config file.  Everything downstream receives
the resolved value as a parameter.

API key precedence (first hit wins, no merging):

1. ``--api-key`` on the command line
2. ``NOTION_API_KEY`` environment variable
3. ``api_key`` in ``<user config dir>/notion-cli/config.toml``
4. ``NOTION_API_KEY`` in a ``.env`` file (kept for backward compatibility)

Timeout precedence: ``--timeout`` > config file ``timeout`` > 30 seconds.
"""

from __future__ import annotations

import dataclasses
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w
import typer
from dotenv import dotenv_values, find_dotenv

from notioncli.errors import ConfigError, MissingCredentialError, ValidationError
from notioncli.observability import get_logger

log = get_logger("notioncli.config")

APP_NAME = "notion-cli"
CONFIG_FILENAME = "config.toml"

API_KEY_ENV = "NOTION_API_KEY"
API_VERSION_ENV = "NOTION_API_VERSION"

DEFAULT_API_VERSION = "2025-09-03"
DEFAULT_BASE_URL = "https://api.notion.com/v1"
DEFAULT_TIMEOUT_SECONDS = 30
MAX_RETRIES = 3
DEFAULT_RETRY_DELAY_SECONDS = 1.0


# ---------------------------------------------------------------------------
# Resolved configuration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CliConfig:
    """Immutable configuration for a :class:`NotionClient`.

    Parameters
    ----------
    api_key:
        Notion integration token.  **Required.**  Never logged.
    api_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    timeout_seconds:
        HTTP request timeout in seconds.
    max_retries:
        How many times a ``429`` response is retried before giving up.
        The initial request is not counted.
    default_retry_delay:
        Seconds to wait after a ``429`` that carries no usable
        ``Retry-After`` header.
    debug_dump_payload:
        Write every (redacted) request and response to stderr.
    """

    api_key: str

    api_version: str = DEFAULT_API_VERSION

    base_url: str = DEFAULT_BASE_URL

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    max_retries: int = MAX_RETRIES

    default_retry_delay: float = DEFAULT_RETRY_DELAY_SECONDS

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        if self.timeout_seconds <= 0:
            raise ValidationError(
                f"timeout must be > 0, got {self.timeout_seconds}",
                context={"field": "timeout_seconds", "value": self.timeout_seconds},
            )
        if self.max_retries < 0:
            raise ValidationError(
                f"max_retries must be >= 0, got {self.max_retries}",
                context={"field": "max_retries", "value": self.max_retries},
            )
        if self.default_retry_delay < 0:
            raise ValidationError(
                f"default_retry_delay must be >= 0, got {self.default_retry_delay}",
                context={"field": "default_retry_delay", "value": self.default_retry_delay},
            )

    def __repr__(self) -> str:
        """Mask the key to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "api_key":
                masked = f"...{val[-4:]}" if len(val) >= 8 else "****"
                parts.append(f"api_key='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"CliConfig({', '.join(parts)})"


# ---------------------------------------------------------------------------
# Config file
# ---------------------------------------------------------------------------

@dataclass
class FileConfig:
    """Contents of ``config.toml``.  Both fields are optional."""

    api_key: str | None = None
    timeout: int | None = None

    def to_toml(self) -> str:
        data: dict[str, Any] = {}
        if self.api_key is not None:
            data["api_key"] = self.api_key
        if self.timeout is not None:
            data["timeout"] = self.timeout
        return tomli_w.dumps(data)

    @classmethod
    def from_toml(cls, text: str) -> FileConfig:
        """Parse TOML text.  Unknown keys and wrongly typed values are ignored."""
        data = tomllib.loads(text)
        api_key = data.get("api_key")
        timeout = data.get("timeout")
        return cls(
            api_key=api_key if isinstance(api_key, str) else None,
            timeout=timeout if isinstance(timeout, int) and not isinstance(timeout, bool) else None,
        )


def config_path() -> Path:
    """Return the per-user config file path (``~/.config/notion-cli/config.toml`` on Linux)."""
    return Path(typer.get_app_dir(APP_NAME)) / CONFIG_FILENAME


def load_file_config(path: Path | None = None) -> FileConfig:
    """Load the config file, returning an empty :class:`FileConfig` when it
    is missing, unreadable or not valid TOML.
    """
    path = path or config_path()
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return FileConfig()
    except OSError as exc:
        log.warning(
            "Config file unreadable",
            extra={"extra_fields": {"path": str(path), "error": str(exc)}},
        )
        return FileConfig()

    try:
        return FileConfig.from_toml(text)
    except tomllib.TOMLDecodeError as exc:
        log.warning(
            "Config file is not valid TOML",
            extra={"extra_fields": {"path": str(path), "error": str(exc)}},
        )
        return FileConfig()


def save_file_config(file_config: FileConfig, path: Path | None = None) -> Path:
    """Write *file_config* to disk, creating the config directory if needed.

    Returns the path written.

    Raises
    ------
    ConfigError
        If the directory or the file cannot be written.
    """
    path = path or config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(file_config.to_toml(), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(
            f"Failed to write config file {path}: {exc}",
            context={"path": str(path)},
            cause=exc,
        ) from exc
    return path


# ---------------------------------------------------------------------------
# Precedence
# ---------------------------------------------------------------------------

def resolve_api_key(
    cli_api_key: str | None,
    environ: Mapping[str, str],
    file_config: FileConfig,
    dotenv: Mapping[str, str | None],
) -> str | None:
    """Pick the API key from the first source that provides one.

    Empty strings count as "not provided".  Returns ``None`` when no source
    has a key; the caller decides how to report that.
    """
    candidates = (
        cli_api_key,
        environ.get(API_KEY_ENV),
        file_config.api_key,
        dotenv.get(API_KEY_ENV),
    )
    for candidate in candidates:
        if candidate:
            return candidate
    return None


def resolve_timeout(cli_timeout: float | None, file_config: FileConfig) -> float:
    if cli_timeout is not None:
        return cli_timeout
    if file_config.timeout is not None:
        return file_config.timeout
    return DEFAULT_TIMEOUT_SECONDS


def resolve_config(
    cli_api_key: str | None = None,
    cli_timeout: float | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    file_config: FileConfig | None = None,
    dotenv_path: str | Path | None = None,
    debug_dump_payload: bool = False,
) -> CliConfig:
    """Build the :class:`CliConfig` for this process.

    Parameters left as ``None`` are read from the real environment, the
    user config file and the nearest ``.env`` file respectively.  The
    ``.env`` file is only parsed; it never modifies ``os.environ``.

    Raises
    ------
    MissingCredentialError
        If no API key is found in any source.
    """
    environ = os.environ if environ is None else environ
    file_config = load_file_config() if file_config is None else file_config

    api_key = resolve_api_key(cli_api_key, environ, file_config, {})
    if api_key is None:
        # The .env file is only consulted when every other source came up empty.
        path = dotenv_path if dotenv_path is not None else find_dotenv(usecwd=True)
        dotenv = dotenv_values(path) if path else {}
        api_key = resolve_api_key(None, {}, FileConfig(), dotenv)
    if api_key is None:
        raise MissingCredentialError(str(config_path()))

    return CliConfig(
        api_key=api_key,
        api_version=environ.get(API_VERSION_ENV) or DEFAULT_API_VERSION,
        timeout_seconds=resolve_timeout(cli_timeout, file_config),
        debug_dump_payload=debug_dump_payload,
    )

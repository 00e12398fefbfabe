"""
Service Configuration

Loads the TOML config file once at startup into an immutable
ServiceConfig that is passed to every component explicitly.
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Mapping, Optional, Tuple

from pastebox.domain.errors import ConfigError
from pastebox.domain.object_storage.value_objects import (
    InvalidDurationError,
    RetentionPolicy,
    parse_duration,
)

DEFAULT_CONFIG_PATH = "/etc/pastebox/pastebox.toml"
CONFIG_PATH_ENV = "PASTEBOX_CONFIG"


@dataclass(frozen=True)
class ServiceConfig:
    """
    Process-wide configuration, immutable after loading.

    Attributes:
        tokens: Credentials allowed to upload
        upload_path: Storage root directory
        domain: Public prefix used in generated references
        retention: Lifetime applied to every stored object
        port: Listening port
        host: Listening address
        sweep_interval: Pause between expiration sweeps
        max_upload_mb: Request body ceiling in MiB
        highlight_style: Pygments style name
        highlight_formatter: Pygments formatter name
        cli_user_agent: User-Agent that receives plain-text references
        name_length: Random letters in generated names
    """
    tokens: Tuple[str, ...]
    upload_path: str
    domain: str
    retention: RetentionPolicy
    port: int = 8000
    host: str = "0.0.0.0"
    sweep_interval: timedelta = field(default_factory=lambda: timedelta(minutes=5))
    max_upload_mb: int = 1000
    highlight_style: str = "autumn"
    highlight_formatter: str = "html"
    cli_user_agent: str = "dingo_client"
    name_length: int = 3

    @property
    def max_content_length(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "ServiceConfig":
        """
        Build a config from parsed TOML.

        Keys match case-insensitively and ignore underscores, so
        ``upload_path``, ``uploadPath`` and ``UploadPath`` are the same key.

        Raises:
            ConfigError: If a required key is missing or a value is invalid
        """
        values = {_normalize_key(key): value for key, value in data.items()}

        def required(key: str) -> Any:
            normalized = _normalize_key(key)
            if normalized not in values:
                raise ConfigError(f"Missing required config key: {key}")
            return values[normalized]

        def optional(key: str, default: Any) -> Any:
            return values.get(_normalize_key(key), default)

        tokens = required("tokens")
        if isinstance(tokens, str) or not isinstance(tokens, (list, tuple)):
            raise ConfigError("'tokens' must be a list of strings")
        if not all(isinstance(token, str) for token in tokens):
            raise ConfigError("'tokens' must be a list of strings")

        try:
            retention = RetentionPolicy.from_string(required("lifetime"))
            sweep_interval = parse_duration(optional("sweep_interval", "5m"))
        except InvalidDurationError as e:
            raise ConfigError(str(e), e) from e
        if sweep_interval <= timedelta(0):
            raise ConfigError("'sweep_interval' must be positive")

        upload_path = required("upload_path")
        domain = required("domain")
        if not isinstance(upload_path, str) or not upload_path:
            raise ConfigError("'upload_path' must be a non-empty string")
        if not isinstance(domain, str):
            raise ConfigError("'domain' must be a string")

        port = _as_int(optional("port", 8000), "port")
        if not 0 < port < 65536:
            raise ConfigError(f"'port' out of range: {port}")

        name_length = _as_int(optional("name_length", 3), "name_length")
        if name_length < 1:
            raise ConfigError("'name_length' must be positive")

        max_upload_mb = _as_int(optional("max_upload_mb", 1000), "max_upload_mb")
        if max_upload_mb < 1:
            raise ConfigError("'max_upload_mb' must be positive")

        return cls(
            tokens=tuple(tokens),
            upload_path=upload_path,
            domain=domain,
            retention=retention,
            port=port,
            host=str(optional("host", "0.0.0.0")),
            sweep_interval=sweep_interval,
            max_upload_mb=max_upload_mb,
            highlight_style=str(optional("highlight_style", "autumn")),
            highlight_formatter=str(optional("highlight_formatter", "html")),
            cli_user_agent=str(optional("cli_user_agent", "dingo_client")),
            name_length=name_length,
        )


def load_config(path: str) -> ServiceConfig:
    """
    Read and validate the TOML config at ``path``.

    Raises:
        ConfigError: If the file is unreadable, not TOML, or invalid
    """
    try:
        with open(path, "rb") as handle:
            data = tomllib.load(handle)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}", e) from e
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}", e) from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {path}: {e}", e) from e

    return ServiceConfig.from_mapping(data)


def resolve_config_path(cli_path: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> str:
    """``--config`` flag, then PASTEBOX_CONFIG, then the system default."""
    if cli_path:
        return cli_path
    env = os.environ if environ is None else environ
    return env.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH


def _normalize_key(key: str) -> str:
    return key.replace("_", "").lower()


def _as_int(value: Any, key: str) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"'{key}' must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"'{key}' must be an integer, got {value!r}", e) from e

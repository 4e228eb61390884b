# =============================================================================
# mobile_core/config.py
# Core Configuration (TOML file + environment overrides)
# =============================================================================
"""
Configuration for the mobile data-access core.

Values come from, in increasing priority:
1. The defaults on ``CoreConfig``
2. An optional TOML file::

    [api]
    base_url = "https://jsonplaceholder.typicode.com"
    request_timeout = 30

    [storage]
    dir = "/data/app"

    [connectivity]
    probe_hosts = ["8.8.8.8:53", "1.1.1.1:53"]
    probe_interval = 10
    probe_timeout = 5

    [logging]
    level = "INFO"
    to_file = false
    format = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
    file_pattern = "mobile_core_{date:%Y-%m-%d}.log"

3. ``MOBILE_CORE_*`` environment variables (see ``ENV_OVERRIDES``)
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import toml

from mobile_core.constants import ApiRoutes, LogDefaults
from mobile_core.errors import ConfigurationError
from mobile_core.utils.file_utils import get_application_documents_directory

DEFAULT_PROBE_HOSTS: List[Tuple[str, int]] = [
    ("8.8.8.8", 53),        # Google DNS
    ("1.1.1.1", 53),        # Cloudflare DNS
    ("208.67.222.222", 53), # OpenDNS
]

# env var -> (config attribute, type)
ENV_OVERRIDES = {
    "MOBILE_CORE_BASE_URL": ("base_url", str),
    "MOBILE_CORE_REQUEST_TIMEOUT": ("request_timeout", float),
    "MOBILE_CORE_STORAGE_DIR": ("storage_dir", Path),
    "MOBILE_CORE_PROBE_INTERVAL": ("probe_interval", float),
    "MOBILE_CORE_PROBE_TIMEOUT": ("probe_timeout", float),
    "MOBILE_CORE_LOG_LEVEL": ("log_level", str),
}


@dataclass(frozen=True)
class CoreConfig:
    """Configuration shared by the connectivity monitor, store and HTTP client."""
    base_url: str = ApiRoutes.BASE_URL
    request_timeout: float = 30.0
    storage_dir: Path = field(default_factory=get_application_documents_directory)
    probe_hosts: List[Tuple[str, int]] = field(
        default_factory=lambda: list(DEFAULT_PROBE_HOSTS)
    )
    probe_interval: float = 10.0
    probe_timeout: float = 5.0
    log_level: str = "INFO"
    log_to_file: bool = False
    log_format: str = LogDefaults.FORMAT
    log_file_pattern: str = LogDefaults.FILE_PATTERN

    def __post_init__(self):
        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(
                f"base_url must be an http(s) URL, got {self.base_url!r}",
                config_key="base_url",
                expected_type="url",
            )
        for key in ("request_timeout", "probe_interval", "probe_timeout"):
            if getattr(self, key) <= 0:
                raise ConfigurationError(
                    f"{key} must be positive",
                    config_key=key,
                    expected_type="positive number",
                )
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ConfigurationError(
                f"Unknown log level {self.log_level!r}",
                config_key="log_level",
                expected_type="logging level name",
            )
        try:
            self.log_file_pattern.format(date=date.today())
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigurationError(
                f"Invalid log file pattern {self.log_file_pattern!r}: {e}",
                config_key="log_file_pattern",
                expected_type="format string with a {date} field",
            ) from e
        # Route joining expects no trailing slash
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        object.__setattr__(self, "log_level", self.log_level.upper())
        object.__setattr__(self, "storage_dir", Path(self.storage_dir))

    @property
    def log_dir(self) -> Path:
        return self.storage_dir / LogDefaults.SUBDIR


def _parse_host(entry: Union[str, List, Tuple]) -> Tuple[str, int]:
    """Accept "host:port" strings or [host, port] pairs."""
    try:
        if isinstance(entry, str):
            host, port = entry.rsplit(":", 1)
            return host, int(port)
        host, port = entry
        return str(host), int(port)
    except (ValueError, TypeError) as e:
        raise ConfigurationError(
            f"Invalid probe host entry: {entry!r}",
            config_key="connectivity.probe_hosts",
            expected_type="host:port",
        ) from e


def _from_toml(data: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten the TOML tables into CoreConfig keyword arguments."""
    values: Dict[str, Any] = {}

    api = data.get("api", {})
    if "base_url" in api:
        values["base_url"] = str(api["base_url"])
    if "request_timeout" in api:
        values["request_timeout"] = float(api["request_timeout"])

    storage = data.get("storage", {})
    if "dir" in storage:
        values["storage_dir"] = Path(storage["dir"]).expanduser()

    connectivity = data.get("connectivity", {})
    if "probe_hosts" in connectivity:
        values["probe_hosts"] = [_parse_host(h) for h in connectivity["probe_hosts"]]
    if "probe_interval" in connectivity:
        values["probe_interval"] = float(connectivity["probe_interval"])
    if "probe_timeout" in connectivity:
        values["probe_timeout"] = float(connectivity["probe_timeout"])

    log_cfg = data.get("logging", {})
    if "level" in log_cfg:
        values["log_level"] = str(log_cfg["level"]).upper()
    if "to_file" in log_cfg:
        values["log_to_file"] = bool(log_cfg["to_file"])
    if "format" in log_cfg:
        values["log_format"] = str(log_cfg["format"])
    if "file_pattern" in log_cfg:
        values["log_file_pattern"] = str(log_cfg["file_pattern"])

    return values


def load_config(path: Optional[Union[str, Path]] = None) -> CoreConfig:
    """
    Build a CoreConfig from an optional TOML file and the environment.

    Args:
        path: TOML file to read. A missing file is an error only when the path
            was given explicitly.

    Returns:
        Validated CoreConfig

    Raises:
        ConfigurationError: If the file is unreadable or a value is invalid
    """
    values: Dict[str, Any] = {}

    if path is not None:
        config_path = Path(path)
        try:
            values.update(_from_toml(toml.load(config_path)))
        except (OSError, toml.TomlDecodeError, ValueError, TypeError) as e:
            raise ConfigurationError(
                f"Could not read configuration file {config_path}: {e}",
                config_key="path",
            ) from e

    for env_key, (attr, cast) in ENV_OVERRIDES.items():
        raw = os.getenv(env_key)
        if raw is None or raw == "":
            continue
        try:
            values[attr] = cast(raw)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid value for {env_key}: {raw!r}",
                config_key=env_key,
                expected_type=cast.__name__,
            ) from e

    return CoreConfig(**values)


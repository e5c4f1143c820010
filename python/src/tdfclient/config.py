"""Connection settings and configuration loading for the TDF client."""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

SETTING_KEYS = ("protocol", "hostname", "port")


@dataclass(frozen=True)
class ConnectionSettings:
    """Where the TDF server lives."""

    protocol: str = "http"
    hostname: str = "localhost"
    port: int = 80

    @property
    def base_url(self) -> str:
        return f"{self.protocol}://{self.hostname}:{self.port}"

    def merged(self, overrides: Mapping[str, Any] | None) -> ConnectionSettings:
        """Return settings with any truthy per-call override applied."""
        if not overrides:
            return self
        changes = {key: overrides[key] for key in SETTING_KEYS if overrides.get(key)}
        if "port" in changes:
            changes["port"] = int(changes["port"])
        return replace(self, **changes) if changes else self


def settings_from_env(base: ConnectionSettings | None = None) -> ConnectionSettings:
    """Apply TDF_PROTOCOL, TDF_HOSTNAME and TDF_PORT over ``base``."""
    settings = base or ConnectionSettings()
    overrides = {key: os.environ.get(f"TDF_{key.upper()}") for key in SETTING_KEYS}
    port = overrides.get("port")
    if port:
        try:
            overrides["port"] = int(port)
        except ValueError:
            raise ValueError(f"TDF_PORT must be an integer, got {port!r}") from None
    return settings.merged(overrides)


def load_config(path: str | None = None) -> dict[str, Any]:
    """Load TDF client YAML configuration.

    Args:
        path: Path to config file. Defaults to $TDF_CONFIG or config/tdf.yaml.

    Returns:
        Configuration dictionary, empty when the file does not exist.
    """
    if path is None:
        path = os.environ.get("TDF_CONFIG", "config/tdf.yaml")

    config_path = Path(path)
    if not config_path.exists():
        return {}

    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def settings_from_config(config: Mapping[str, Any], base: ConnectionSettings | None = None) -> ConnectionSettings:
    """Read the ``server`` section of a loaded config over ``base``."""
    if not isinstance(config, Mapping):
        raise ValueError("config must be a mapping")
    settings = base or ConnectionSettings()
    server = config.get("server") or {}
    if not isinstance(server, Mapping):
        raise ValueError("config 'server' section must be a mapping")
    return settings.merged(server)

"""Configuration helpers for blockstack-cli."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

NetworkType = Literal["mainnet", "regtest", "testnet"]

DEFAULT_CONFIG_PATH = "~/.blockstack-cli.conf"
DEFAULT_CONFIG_REGTEST_PATH = "~/.blockstack-cli-regtest.conf"
DEFAULT_CONFIG_TESTNET_PATH = "~/.blockstack-cli-testnet.conf"
API_URL_ENV_VAR = "BLOCKSTACK_API_URL"

PUBLIC_TESTNET_HOST = "testnet.blockstack.org"

_LOG_LEVELS = ("debug", "info", "warning", "error", "critical")

# winston level names found in existing config files
_LOG_LEVEL_ALIASES = {
    "warn": "warning",
    "verbose": "debug",
    "silly": "debug",
}


@dataclass(frozen=True)
class CLIConfig:
    blockstack_api_url: str = "https://core.blockstack.org"
    broadcast_service_url: str = "https://broadcast.blockstack.org"
    utxo_service_url: str = "https://blockchain.info"
    log_level: str = "warning"

    @property
    def logging_level(self) -> int:
        return getattr(logging, self.log_level.upper())


_NETWORK_DEFAULTS: dict[str, CLIConfig] = {
    "mainnet": CLIConfig(),
    "regtest": CLIConfig(
        blockstack_api_url="http://localhost:16268",
        broadcast_service_url="http://localhost:16269",
        utxo_service_url="http://localhost:18332",
    ),
    "testnet": CLIConfig(
        blockstack_api_url=f"http://{PUBLIC_TESTNET_HOST}:16268",
        broadcast_service_url=f"http://{PUBLIC_TESTNET_HOST}:16269",
        utxo_service_url=f"http://{PUBLIC_TESTNET_HOST}:18332",
    ),
}

_DEFAULT_PATHS: dict[str, str] = {
    "mainnet": DEFAULT_CONFIG_PATH,
    "regtest": DEFAULT_CONFIG_REGTEST_PATH,
    "testnet": DEFAULT_CONFIG_TESTNET_PATH,
}


class ConfigError(ValueError):
    """Raised when CLI config is invalid."""


def default_config_path(network_type: str) -> Path:
    if network_type not in _DEFAULT_PATHS:
        raise ConfigError(f"unrecognized network: {network_type}")
    return Path(_DEFAULT_PATHS[network_type]).expanduser()


def _load_json(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"cannot read {path}: {exc}") from exc
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
    if not isinstance(parsed, dict):
        raise ConfigError(f"{path} must contain a JSON object")
    return parsed


def _url_setting(source: dict[str, Any], key: str, default: str) -> str:
    value = str(source.get(key, default)).strip()
    if not value:
        raise ConfigError(f"{key} must not be empty")
    return value


def load_cli_config(path: str | Path | None = None, network_type: str = "mainnet") -> CLIConfig:
    """Merge the JSON config file at ``path`` over the ``network_type`` defaults."""
    if network_type not in _NETWORK_DEFAULTS:
        raise ConfigError(f"unrecognized network: {network_type}")
    defaults = _NETWORK_DEFAULTS[network_type]

    config_path = Path(path).expanduser() if path else default_config_path(network_type)
    source: dict[str, Any] = _load_json(config_path) if config_path.exists() else {}

    blockstack_api_url = _url_setting(source, "blockstackAPIUrl", defaults.blockstack_api_url)
    env_api_url = os.getenv(API_URL_ENV_VAR)
    if env_api_url and env_api_url.strip():
        blockstack_api_url = env_api_url.strip()

    log_config = source.get("logConfig", {})
    if not isinstance(log_config, dict):
        raise ConfigError("logConfig must be an object")
    log_level = str(log_config.get("level", defaults.log_level)).strip().lower()
    log_level = _LOG_LEVEL_ALIASES.get(log_level, log_level)
    if log_level not in _LOG_LEVELS:
        raise ConfigError(f"logConfig.level must be one of: {', '.join(_LOG_LEVELS)}")

    return replace(
        defaults,
        blockstack_api_url=blockstack_api_url,
        broadcast_service_url=_url_setting(
            source, "broadcastServiceUrl", defaults.broadcast_service_url
        ),
        utxo_service_url=_url_setting(source, "utxoServiceUrl", defaults.utxo_service_url),
        log_level=log_level,
    )


__all__ = [
    "API_URL_ENV_VAR",
    "CLIConfig",
    "ConfigError",
    "DEFAULT_CONFIG_PATH",
    "DEFAULT_CONFIG_REGTEST_PATH",
    "DEFAULT_CONFIG_TESTNET_PATH",
    "NetworkType",
    "default_config_path",
    "load_cli_config",
]

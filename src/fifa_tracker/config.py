from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from config import ConfigurationSet, config_from_dict, config_from_env, config_from_yaml


class AppConfig(Protocol):
    def __getitem__(self, key: str) -> object: ...


class ConfigurationError(Exception):
    """Raised when required configuration is missing or malformed."""


_DEFAULTS: dict[str, object] = {
    "database": {
        "url": "",
        "api_key": "",
        "timeout": 30.0,
    },
    "cache": {
        "ttl_seconds": 30.0,
    },
    "retry": {
        "max_attempts": 3,
        "backoff_initial": 1.0,
        "backoff_max": 5.0,
    },
}


@dataclass(frozen=True)
class DataSettings:
    """Typed view of the data-access settings.

    Attributes:
        database_url: Base URL of the hosted database (without ``/rest/v1``).
        api_key: Publishable API key sent as ``apikey`` and bearer token.
        timeout: HTTP timeout in seconds.
        cache_ttl_seconds: Default lifetime of cached query results.
        max_attempts: Attempts per operation before giving up.
        backoff_initial: Delay before the second attempt, doubled per attempt.
        backoff_max: Upper bound on the delay between attempts.
    """

    database_url: str
    api_key: str
    timeout: float = 30.0
    cache_ttl_seconds: float = 30.0
    max_attempts: int = 3
    backoff_initial: float = 1.0
    backoff_max: float = 5.0


def create_config(
    yaml_path: str = "config.yaml",
    env_prefix: str = "FIFA_TRACKER",
    defaults: dict[str, object] | None = None,
    *,
    overrides: dict[str, object] | None = None,
) -> ConfigurationSet:
    """Create a layered configuration.

    Priority (highest to lowest): explicit overrides > env vars > YAML file > defaults dict.

    Args:
        yaml_path: Path to the YAML config file.
        env_prefix: Prefix for environment variables, e.g. ``FIFA_TRACKER__DATABASE__URL``.
        defaults: Default configuration values.
        overrides: Nested dict of values that win over every other layer.
    """
    if defaults is None:
        defaults = _DEFAULTS

    layers = [
        config_from_env(env_prefix, separator="__", lowercase_keys=True),
        config_from_yaml(yaml_path, read_from_file=True, ignore_missing_paths=True),
        config_from_dict(defaults),
    ]
    if overrides:
        layers.insert(0, config_from_dict(overrides))

    return ConfigurationSet(*layers)


def _as_float(cfg: AppConfig, key: str) -> float:
    try:
        return float(str(cfg[key]))
    except ValueError as e:
        raise ConfigurationError(f"{key} must be a number: {e}") from e


def _as_int(cfg: AppConfig, key: str) -> int:
    try:
        return int(str(cfg[key]))
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer: {e}") from e


def load_data_settings(cfg: AppConfig | None = None) -> DataSettings:
    """Read data-access settings, converting env-var strings to numbers."""
    if cfg is None:
        cfg = create_config()
    settings = DataSettings(
        database_url=str(cfg["database.url"]).rstrip("/"),
        api_key=str(cfg["database.api_key"]),
        timeout=_as_float(cfg, "database.timeout"),
        cache_ttl_seconds=_as_float(cfg, "cache.ttl_seconds"),
        max_attempts=_as_int(cfg, "retry.max_attempts"),
        backoff_initial=_as_float(cfg, "retry.backoff_initial"),
        backoff_max=_as_float(cfg, "retry.backoff_max"),
    )
    if settings.max_attempts < 1:
        raise ConfigurationError("retry.max_attempts must be at least 1")
    return settings

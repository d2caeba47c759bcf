"""Bridge configuration for pycarha."""

from __future__ import annotations

import dataclasses
import os
from pathlib import Path
from typing import Any

from pycarha._constants import DEFAULT_DISCOVERY_PREFIX
from pycarha.exceptions import CarConfigError

DEFAULT_VIN = "default"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_int(env_key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise CarConfigError(f"{env_key} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class CarConfig:
    """Bridge configuration.

    Parameters
    ----------
    vin : str
        Vehicle identifier used to scope the cache files and the
        discovery topics.  Defaults to ``"default"``.
    cache_dir : str or None
        Explicit directory for the unit and state cache files.
    token_location : str or None
        Credential/token directory.  Used for the cache files when
        ``cache_dir`` is not set.
    state_cache_enabled : bool
        Merge partial state documents with the last published state
        before publishing.  Disabled by default.
    discovery_prefix : str
        Home Assistant discovery topic prefix.
    name_prefix : str or None
        Optional prefix prepended to every entity's friendly name.
    list_all_sensors_together : bool
        Attach command/polling monitor entities to the main vehicle
        device instead of a separate "Command Status Monitor" device.
    mqtt_host : str
        MQTT broker host.
    mqtt_port : int
        MQTT broker port.
    mqtt_username : str or None
        MQTT username.
    mqtt_password : str or None
        MQTT password.
    mqtt_tls : bool
        Enable TLS towards the broker.
    mqtt_keepalive : int
        MQTT keepalive in seconds.
    """

    vin: str = DEFAULT_VIN
    cache_dir: str | None = None
    token_location: str | None = None
    state_cache_enabled: bool = False
    discovery_prefix: str = DEFAULT_DISCOVERY_PREFIX
    name_prefix: str | None = None
    list_all_sensors_together: bool = False
    mqtt_host: str = "localhost"
    mqtt_port: int = 1883
    mqtt_username: str | None = None
    mqtt_password: str | None = None
    mqtt_tls: bool = False
    mqtt_keepalive: int = 60

    def resolve_cache_dir(self) -> Path:
        """Directory holding the VIN-scoped cache files.

        Resolution order: ``cache_dir``, then ``token_location``, then the
        current working directory.
        """
        if self.cache_dir:
            return Path(self.cache_dir)
        if self.token_location:
            return Path(self.token_location)
        return Path.cwd()

    @classmethod
    def from_env(cls, **overrides: Any) -> CarConfig:
        """Create configuration from environment variables.

        Reads optional ``CARHA_*`` variables.  Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        CarConfig
            Populated configuration.

        Raises
        ------
        CarConfigError
            If a numeric variable cannot be parsed.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "CARHA_VIN": "vin",
            "CARHA_UNIT_CACHE_DIR": "cache_dir",
            "CARHA_TOKEN_LOCATION": "token_location",
            "CARHA_DISCOVERY_PREFIX": "discovery_prefix",
            "CARHA_NAME_PREFIX": "name_prefix",
            "CARHA_MQTT_HOST": "mqtt_host",
            "CARHA_MQTT_USERNAME": "mqtt_username",
            "CARHA_MQTT_PASSWORD": "mqtt_password",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None and val != "":
                config_kwargs[field_name] = val

        _ENV_BOOL_MAP = {
            "CARHA_STATE_CACHE_ENABLED": ("state_cache_enabled", False),
            "CARHA_LIST_ALL_SENSORS_TOGETHER": ("list_all_sensors_together", False),
            "CARHA_MQTT_TLS": ("mqtt_tls", False),
        }
        for env_key, (field_name, default) in _ENV_BOOL_MAP.items():
            if field_name not in overrides:
                config_kwargs[field_name] = _env_bool(env.get(env_key), default)

        port_env = env.get("CARHA_MQTT_PORT")
        if port_env is not None and "mqtt_port" not in overrides:
            config_kwargs["mqtt_port"] = _env_int("CARHA_MQTT_PORT", port_env)

        keepalive_env = env.get("CARHA_MQTT_KEEPALIVE")
        if keepalive_env is not None and "mqtt_keepalive" not in overrides:
            config_kwargs["mqtt_keepalive"] = _env_int("CARHA_MQTT_KEEPALIVE", keepalive_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)

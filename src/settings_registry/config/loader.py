from __future__ import annotations

import os
from dataclasses import fields
from pathlib import Path
from typing import Any

import yaml

from settings_registry.core.types import HostConfig

ENV_PREFIX = "SETTINGS_"

_ENV_FIELDS = {
    "PROVIDER": "provider_engine",
    "CACHE": "cache_engine",
    "PREFIX": "prefix",
    "LANGUAGE": "language",
    "DATA_DIR": "data_dir",
    "DATABASE_URL": "database_url",
}


def _coerce(key: str, value: Any) -> Any:
    if key == "data_dir":
        return Path(value)
    if key == "prefix" and isinstance(value, str) and "," in value:
        # SETTINGS_PREFIX="!,?" configures several prefixes
        return [part.strip() for part in value.split(",") if part.strip()]
    return value


def load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file {str(path)!r} not found")
    data = yaml.safe_load(path.read_text()) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file {str(path)!r} must contain a mapping")
    return data


def load_host_config(path: Path | str | None = None, **overrides: Any) -> HostConfig:
    """Build the host configuration.

    Later sources win: YAML file, then ``SETTINGS_*`` environment variables,
    then keyword overrides.
    """
    known = {f.name for f in fields(HostConfig)}
    values: dict[str, Any] = {}

    if path is not None:
        data = load_yaml(Path(path))
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown config keys {sorted(unknown)}. Available: {sorted(known)}")
        values.update(data)

    for suffix, key in _ENV_FIELDS.items():
        env_value = os.environ.get(ENV_PREFIX + suffix)
        if env_value:
            values[key] = env_value

    for key, value in overrides.items():
        if key not in known:
            raise ValueError(f"Unknown config key {key!r}. Available: {sorted(known)}")
        if value is not None:
            values[key] = value

    return HostConfig(**{key: _coerce(key, value) for key, value in values.items()})

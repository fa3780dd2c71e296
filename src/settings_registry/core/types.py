from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from settings_registry.providers.base import Provider


@dataclass
class HostConfig:
    provider_engine: str = "json"
    cache_engine: str = "collection"
    prefix: str | list[str] = "!"
    language: str = "en-US"
    data_dir: Path = field(default_factory=lambda: Path("bwd/provider"))
    database_url: str = "sqlite:///bwd/settings.db"


@dataclass
class Guild:
    id: str
    name: str = ""


@dataclass
class User:
    id: str
    name: str = ""


@dataclass
class Catalog:
    """Lookup tables the resolver reads from; owned by the host."""

    guilds: dict[str, Guild] = field(default_factory=dict)
    users: dict[str, User] = field(default_factory=dict)
    commands: set[str] = field(default_factory=set)
    languages: set[str] = field(default_factory=lambda: {"en-US"})


@dataclass
class SchemaEntry:
    type: str
    default: Any = None
    array: bool = False
    min: float | None = None
    max: float | None = None
    sql: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "type": self.type,
            "default": self.default,
            "array": self.array,
        }
        for key in ("min", "max", "sql"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass
class ProviderOptions:
    provider: str | None = None  # persistent engine name
    cache: str | None = None  # cache engine name


@dataclass
class ProviderSelection:
    provider: Provider
    cache: Provider

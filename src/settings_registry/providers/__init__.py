from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from settings_registry.providers.base import Provider

if TYPE_CHECKING:
    from settings_registry.core.types import HostConfig

logger = logging.getLogger(__name__)


class ProviderRegistry:
    """Lookup from provider name to provider instance."""

    def __init__(self) -> None:
        self._providers: dict[str, Provider] = {}

    def register(self, provider: Provider) -> None:
        if provider.name in self._providers:
            raise ValueError(f"Provider {provider.name!r} is already registered")
        self._providers[provider.name] = provider

    def get(self, name: str) -> Provider | None:
        return self._providers.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._providers

    def __len__(self) -> int:
        return len(self._providers)

    def names(self) -> list[str]:
        return sorted(self._providers.keys())

    async def init_all(self) -> None:
        for name in self.names():
            logger.debug("Initializing provider %s", name)
            await self._providers[name].init()


def create_default_providers(config: HostConfig) -> ProviderRegistry:
    from settings_registry.providers.filesystem import JSONProvider
    from settings_registry.providers.memory import CollectionProvider
    from settings_registry.providers.sql import SQLProvider

    registry = ProviderRegistry()
    registry.register(JSONProvider(config.data_dir))
    registry.register(CollectionProvider())
    registry.register(SQLProvider(config.database_url))
    return registry

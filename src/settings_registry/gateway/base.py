from __future__ import annotations

import logging
from copy import deepcopy
from typing import TYPE_CHECKING, Any

from settings_registry.gateway.schema import parse_schema

if TYPE_CHECKING:
    from settings_registry.core.protocols import BoundValidator
    from settings_registry.core.registry import SettingsRegistry
    from settings_registry.core.types import ProviderSelection
    from settings_registry.providers.base import Provider

logger = logging.getLogger(__name__)


class Gateway:
    """Manages the records of one settings domain on a document-style provider.

    Records live in the persistent provider under a table named after the
    domain; ``init()`` mirrors all of them into the cache provider.
    """

    def __init__(
        self,
        store: SettingsRegistry,
        name: str,
        validate: BoundValidator,
        schema: dict[str, Any],
        options: ProviderSelection,
    ) -> None:
        self.store = store
        self.name = name
        self.validate = validate
        self.schema = parse_schema(schema, store.types)
        self.options = options
        self.ready = False
        self.error: Exception | None = None

    @property
    def provider(self) -> Provider:
        return self.options.provider

    @property
    def cache(self) -> Provider:
        return self.options.cache

    @property
    def default_entry(self) -> dict[str, Any]:
        return {key: deepcopy(entry.default) for key, entry in self.schema.items()}

    async def init(self) -> None:
        if self.ready:
            return
        try:
            await self._init_table()
            count = await self._sync_cache()
        except Exception as e:
            self.error = e
            logger.debug("Gateway %s failed to initialize: %s", self.name, e)
            raise
        self.error = None
        self.ready = True
        logger.info(
            "Gateway %s ready (provider=%s, cache=%s, %d entries)",
            self.name, self.provider.name, self.cache.name, count,
        )

    async def _init_table(self) -> None:
        if not await self.provider.has_table(self.name):
            await self.provider.create_table(self.name)

    async def _sync_cache(self) -> int:
        if not await self.cache.has_table(self.name):
            await self.cache.create_table(self.name)
        entries = await self.provider.get_all(self.name)
        for entry in entries:
            await self.cache.create(self.name, str(entry["id"]), self._parse_entry(entry))
        return len(entries)

    def _parse_entry(self, entry: dict[str, Any]) -> dict[str, Any]:
        return entry

    async def key_for(self, value: Any) -> str:
        """Run the domain's validation routine and return the record id for ``value``."""
        target = await self.validate(value)
        return str(getattr(target, "id", target))

    async def fetch(self, value: Any) -> dict[str, Any]:
        """Cached record for ``value`` laid over the schema defaults."""
        entry_id = await self.key_for(value)
        stored = await self.cache.get(self.name, entry_id) or {}
        return {**self.default_entry, **stored, "id": entry_id}

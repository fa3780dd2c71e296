from __future__ import annotations

from copy import deepcopy
from typing import Any

from settings_registry.providers.base import Provider


class CollectionProvider(Provider):
    name = "collection"
    description = "In-memory collection, cache only"
    is_cache_only = True

    def __init__(self) -> None:
        self._tables: dict[str, dict[str, dict[str, Any]]] = {}

    async def has_table(self, table: str) -> bool:
        return table in self._tables

    async def create_table(self, table: str, columns: dict[str, str] | None = None) -> None:
        self._tables.setdefault(table, {})

    async def get_all(self, table: str) -> list[dict[str, Any]]:
        return [deepcopy(entry) for entry in self._tables.get(table, {}).values()]

    async def get(self, table: str, entry_id: str) -> dict[str, Any] | None:
        entry = self._tables.get(table, {}).get(entry_id)
        return deepcopy(entry) if entry is not None else None

    async def create(self, table: str, entry_id: str, data: dict[str, Any]) -> None:
        self._tables.setdefault(table, {})[entry_id] = {**deepcopy(data), "id": entry_id}

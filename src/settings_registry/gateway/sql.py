from __future__ import annotations

import json
from typing import Any

from settings_registry.gateway.base import Gateway
from settings_registry.gateway.schema import build_sql_columns


class SQLGateway(Gateway):
    """Gateway for relational providers: the schema becomes table columns."""

    @property
    def sql_schema(self) -> dict[str, str]:
        return build_sql_columns(self.schema)

    async def _init_table(self) -> None:
        if not await self.provider.has_table(self.name):
            await self.provider.create_table(self.name, self.sql_schema)

    def _parse_entry(self, entry: dict[str, Any]) -> dict[str, Any]:
        parsed = dict(entry)
        for key, schema_entry in self.schema.items():
            value = parsed.get(key)
            if schema_entry.array and isinstance(value, str):
                parsed[key] = json.loads(value)
        return parsed

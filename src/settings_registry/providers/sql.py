from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine, make_url

from settings_registry.providers.base import Provider

logger = logging.getLogger(__name__)


class SQLProvider(Provider):
    """Relational store backed by a SQLAlchemy engine.

    Each table carries an ``id`` primary key plus one column per schema key.
    Lists and dicts are written as JSON text; decoding them back is the
    gateway's job since only it knows which columns hold arrays.
    """

    name = "sqlite"
    description = "Relational tables through SQLAlchemy (SQLite by default)"
    supports_relational_schema = True
    is_persistent_only = True

    def __init__(self, url: str, engine: Engine | None = None) -> None:
        self.url = url
        self.engine = engine if engine is not None else create_engine(url)

    def _quote(self, identifier: str) -> str:
        return self.engine.dialect.identifier_preparer.quote(identifier)

    async def init(self) -> None:
        database = make_url(self.url).database
        if self.engine.dialect.name == "sqlite" and database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)

    async def has_table(self, table: str) -> bool:
        return inspect(self.engine).has_table(table)

    async def create_table(self, table: str, columns: dict[str, str] | None = None) -> None:
        definitions = ["id VARCHAR(19) PRIMARY KEY NOT NULL"]
        for column, definition in (columns or {}).items():
            definitions.append(f"{self._quote(column)} {definition}")
        statement = f"CREATE TABLE IF NOT EXISTS {self._quote(table)} ({', '.join(definitions)})"
        logger.debug("SQL: %s", statement)
        with self.engine.begin() as conn:
            conn.execute(text(statement))

    async def get_all(self, table: str) -> list[dict[str, Any]]:
        with self.engine.connect() as conn:
            result = conn.execute(text(f"SELECT * FROM {self._quote(table)}"))
            return [dict(row) for row in result.mappings()]

    async def get(self, table: str, entry_id: str) -> dict[str, Any] | None:
        with self.engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT * FROM {self._quote(table)} WHERE id = :id"),
                {"id": entry_id},
            ).mappings().first()
        return dict(row) if row is not None else None

    async def create(self, table: str, entry_id: str, data: dict[str, Any]) -> None:
        values = {"id": entry_id}
        for key, value in data.items():
            if key == "id":
                continue
            values[key] = json.dumps(value) if isinstance(value, (list, dict)) else value

        params = {f"p{i}": value for i, value in enumerate(values.values())}
        columns = ", ".join(self._quote(column) for column in values)
        placeholders = ", ".join(f":{param}" for param in params)
        with self.engine.begin() as conn:
            conn.execute(
                text(f"INSERT INTO {self._quote(table)} ({columns}) VALUES ({placeholders})"),
                params,
            )

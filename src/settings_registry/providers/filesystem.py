from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from settings_registry.providers.base import Provider

logger = logging.getLogger(__name__)


def _check_name(kind: str, name: str) -> str:
    """Table and record names map to single path components under the base dir."""
    if not name or name in (".", "..") or Path(name).name != name:
        raise ValueError(f"Invalid {kind} name {name!r}: must be a single path component")
    return name


class JSONProvider(Provider):
    """Document store: one directory per table, one ``<id>.json`` per record."""

    name = "json"
    description = "JSON documents on the local filesystem"

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    async def init(self) -> None:
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _table_dir(self, table: str) -> Path:
        return self.base_dir / _check_name("table", table)

    def _entry_path(self, table: str, entry_id: str) -> Path:
        return self._table_dir(table) / f"{_check_name('record', entry_id)}.json"

    async def has_table(self, table: str) -> bool:
        return self._table_dir(table).is_dir()

    async def create_table(self, table: str, columns: dict[str, str] | None = None) -> None:
        self._table_dir(table).mkdir(parents=True, exist_ok=True)
        logger.debug("Created table directory %s", self._table_dir(table))

    async def get_all(self, table: str) -> list[dict[str, Any]]:
        table_dir = self._table_dir(table)
        if not table_dir.is_dir():
            return []
        entries = []
        for path in sorted(table_dir.glob("*.json")):
            data = json.loads(path.read_text())
            data.setdefault("id", path.stem)
            entries.append(data)
        return entries

    async def get(self, table: str, entry_id: str) -> dict[str, Any] | None:
        path = self._entry_path(table, entry_id)
        if not path.exists():
            return None
        data = json.loads(path.read_text())
        data.setdefault("id", entry_id)
        return data

    async def create(self, table: str, entry_id: str, data: dict[str, Any]) -> None:
        path = self._entry_path(table, entry_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = {**data, "id": entry_id}
        path.write_text(json.dumps(payload, indent=2))

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Provider(ABC):
    """A storage backend for settings records.

    Role flags: a cache-only provider may never hold persistent data, and a
    persistent-only provider may never serve as a cache. A provider with
    neither flag set can be used in either role.
    """

    name: str
    description: str = ""
    supports_relational_schema: bool = False
    is_cache_only: bool = False
    is_persistent_only: bool = False

    async def init(self) -> None:
        """Prepare the backend (create directories, open connections)."""

    @abstractmethod
    async def has_table(self, table: str) -> bool: ...

    @abstractmethod
    async def create_table(self, table: str, columns: dict[str, str] | None = None) -> None:
        """Create ``table``. ``columns`` maps column name to SQL definition, relational only."""
        ...

    @abstractmethod
    async def get_all(self, table: str) -> list[dict[str, Any]]:
        """Return every record in ``table``; each record carries its ``id``."""
        ...

    @abstractmethod
    async def get(self, table: str, entry_id: str) -> dict[str, Any] | None: ...

    @abstractmethod
    async def create(self, table: str, entry_id: str, data: dict[str, Any]) -> None: ...

    @property
    def role(self) -> str:
        if self.is_cache_only:
            return "cache"
        if self.is_persistent_only:
            return "persistent"
        return "any"

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from settings_registry.core.resolver import SettingResolver
    from settings_registry.core.types import ProviderSelection, SchemaEntry


@runtime_checkable
class ValidateFunction(Protocol):
    async def __call__(self, resolver: SettingResolver, value: Any) -> Any: ...


@runtime_checkable
class BoundValidator(Protocol):
    async def __call__(self, value: Any) -> Any: ...


@runtime_checkable
class StorageGateway(Protocol):
    name: str
    schema: dict[str, SchemaEntry]
    options: ProviderSelection
    ready: bool

    async def init(self) -> None: ...

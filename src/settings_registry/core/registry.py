from __future__ import annotations

import inspect
import logging
from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from settings_registry.core.errors import (
    DuplicateDomain,
    InvalidArgument,
    InvalidSchema,
    ProviderRoleMismatch,
    UnknownProvider,
    ValidationError,
)
from settings_registry.core.resolver import SettingResolver
from settings_registry.core.types import (
    Catalog,
    Guild,
    HostConfig,
    ProviderOptions,
    ProviderSelection,
)
from settings_registry.gateway.base import Gateway
from settings_registry.gateway.schema import sql_literal
from settings_registry.gateway.sql import SQLGateway

if TYPE_CHECKING:
    from settings_registry.core.protocols import BoundValidator, ValidateFunction
    from settings_registry.providers import ProviderRegistry
    from settings_registry.providers.base import Provider

logger = logging.getLogger(__name__)


async def validate_guild(resolver: SettingResolver, guild: Any) -> Guild:
    """The validation routine used for guild settings."""
    result = await resolver.guild(guild)
    if result is None:
        raise ValidationError("The parameter <Guild> expects either a Guild ID or a Guild Object.")
    return result


def bind_validator(validate_function: ValidateFunction, resolver: SettingResolver) -> BoundValidator:
    async def bound(value: Any) -> Any:
        result = validate_function(resolver, value)
        return await result if inspect.isawaitable(result) else result

    bound.__name__ = getattr(validate_function, "__name__", "bound")
    return bound


class SettingsRegistry:
    """Creates settings domains and keeps one gateway per domain name.

    Each domain gets its own validation routine and schema, and is stored
    through a persistent provider with a cache provider in front of it.

    Example::

        async def validate(resolver, user):
            result = await resolver.user(user)
            if result is None:
                raise ValidationError("The parameter <User> expects either a User ID or a User Object.")
            return result

        schema = {"quote": {"type": "String", "default": None, "array": False, "min": 2, "max": 140}}
        users = await registry.add("users", validate, schema)
    """

    validate = staticmethod(validate_guild)

    def __init__(
        self,
        config: HostConfig,
        providers: ProviderRegistry,
        catalog: Catalog | None = None,
    ) -> None:
        self.config = config
        self.providers = providers
        self.resolver = SettingResolver(catalog)
        self.types: frozenset[str] = self.resolver.types()
        self._domains: dict[str, Gateway] = {}

    async def add(
        self,
        name: str,
        validate_function: ValidateFunction,
        schema: dict[str, Any] | None = None,
        options: ProviderOptions | Mapping[str, Any] | None = None,
    ) -> Gateway:
        if not isinstance(name, str):
            raise InvalidArgument("You must pass a name for your new gateway and it must be a string.")
        if name in self._domains:
            raise DuplicateDomain(name)
        if not callable(validate_function):
            raise InvalidArgument("You must pass a validate function.")
        if schema is None:
            schema = {}
        if not isinstance(schema, dict):
            raise InvalidSchema("Schema must be a valid mapping or left undefined for an empty mapping.")

        validate = bind_validator(validate_function, self.resolver)
        selection = self._select_providers(self._normalize_options(options))

        gateway_class = SQLGateway if selection.provider.supports_relational_schema else Gateway
        gateway = gateway_class(self, name, validate, schema, selection)
        self._domains[name] = gateway
        logger.debug(
            "Registered domain %s (%s, provider=%s, cache=%s)",
            name, gateway_class.__name__, selection.provider.name, selection.cache.name,
        )

        await gateway.init()
        return gateway

    def _normalize_options(self, options: ProviderOptions | Mapping[str, Any] | None) -> ProviderOptions:
        if options is None:
            return ProviderOptions()
        if isinstance(options, Mapping):
            unknown = set(options) - {"provider", "cache"}
            if unknown:
                raise InvalidArgument(f"Unknown provider options: {sorted(unknown)}")
            options = ProviderOptions(provider=options.get("provider"), cache=options.get("cache"))
        if not isinstance(options, ProviderOptions):
            raise InvalidArgument("Options must be a ProviderOptions or a mapping.")
        for role in ("provider", "cache"):
            engine = getattr(options, role)
            if engine is not None and not isinstance(engine, str):
                raise InvalidArgument(f"The {role} option must be a provider name, got {engine!r}.")
        return options

    def _select_providers(self, options: ProviderOptions) -> ProviderSelection:
        provider = self._check_provider(options.provider or self.config.provider_engine or "json")
        if provider.is_cache_only:
            raise ProviderRoleMismatch(
                provider.name,
                f"The provider {provider.name} is designed for caching, not persistent data. "
                "Please try again with another.",
            )
        cache = self._check_provider(options.cache or self.config.cache_engine or "collection")
        if cache.is_persistent_only:
            raise ProviderRoleMismatch(
                cache.name,
                f"The provider {cache.name} is designed for persistent data, not cache. "
                "Please try again with another.",
            )
        return ProviderSelection(provider=provider, cache=cache)

    def _check_provider(self, engine: str) -> Provider:
        provider = self.providers.get(engine)
        if provider is None:
            raise UnknownProvider(engine, self.providers.names())
        return provider

    def get(self, name: str) -> Gateway | None:
        return self._domains.get(name)

    def __getitem__(self, name: str) -> Gateway:
        return self._domains[name]

    def __contains__(self, name: object) -> bool:
        return name in self._domains

    def __iter__(self) -> Iterator[str]:
        return iter(self._domains)

    def __len__(self) -> int:
        return len(self._domains)

    def names(self) -> list[str]:
        return list(self._domains)

    @property
    def default_data_schema(self) -> dict[str, dict[str, Any]]:
        """The schema of the built-in guild settings domain.

        Read from the host configuration on every access, so a reconfigured
        prefix or language shows up the next time the schema is requested.
        """
        prefix = self.config.prefix
        is_array = isinstance(prefix, (list, tuple))
        prefix_default = list(prefix) if is_array else prefix
        language = self.config.language
        return {
            "prefix": {
                "type": "String",
                "default": prefix_default,
                "array": is_array,
                "sql": f"TEXT NOT NULL DEFAULT {sql_literal(prefix_default)}",
            },
            "language": {
                "type": "String",
                "default": language,
                "array": False,
                "sql": f"TEXT NOT NULL DEFAULT {sql_literal(language)}",
            },
            "disabledCommands": {
                "type": "Command",
                "default": [],
                "array": True,
                "sql": "TEXT DEFAULT '[]'",
            },
        }

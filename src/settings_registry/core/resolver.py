from __future__ import annotations

import logging
import re
from typing import Any, ClassVar
from urllib.parse import urlparse

from settings_registry.core.errors import InvalidArgument
from settings_registry.core.types import Catalog, Guild, User

logger = logging.getLogger(__name__)

_SNOWFLAKE = re.compile(r"^\d{17,19}$")
_MENTION = re.compile(r"^<@!?(\d{17,19})>$")


class SettingResolver:
    """Coerces raw setting values into typed values, one coroutine per type.

    Every resolver method returns ``None`` when the value cannot be resolved;
    raising is left to the caller, which knows what the value was meant for.
    """

    TYPES: ClassVar[tuple[str, ...]] = (
        "any",
        "boolean",
        "command",
        "float",
        "guild",
        "integer",
        "language",
        "string",
        "url",
        "user",
    )

    def __init__(self, catalog: Catalog | None = None) -> None:
        self.catalog = catalog if catalog is not None else Catalog()

    @classmethod
    def types(cls) -> frozenset[str]:
        return frozenset(cls.TYPES)

    async def resolve(self, type_name: str, value: Any) -> Any:
        key = type_name.lower()
        if key not in self.TYPES:
            raise InvalidArgument(
                f"Unknown setting type {type_name!r}. Available: {list(self.TYPES)}"
            )
        result = await getattr(self, key)(value)
        if result is None:
            logger.debug("Could not resolve %r as %s", value, key)
        return result

    async def any(self, value: Any) -> Any:
        return value

    async def boolean(self, value: Any) -> bool | None:
        if isinstance(value, bool):
            return value
        text = str(value).strip().lower()
        if text in ("true", "t", "yes", "y", "on", "enable", "enabled", "1", "+"):
            return True
        if text in ("false", "f", "no", "n", "off", "disable", "disabled", "0", "-"):
            return False
        return None

    async def command(self, value: Any) -> str | None:
        name = str(value).strip().lower()
        return name if name in self.catalog.commands else None

    async def float(self, value: Any) -> float | None:
        if isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    async def guild(self, value: Any) -> Guild | None:
        if isinstance(value, Guild):
            return value
        if isinstance(value, str) and _SNOWFLAKE.match(value):
            return self.catalog.guilds.get(value)
        return None

    async def integer(self, value: Any) -> int | None:
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return value
        try:
            return int(str(value).strip())
        except ValueError:
            return None

    async def language(self, value: Any) -> str | None:
        return value if value in self.catalog.languages else None

    async def string(self, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    async def url(self, value: Any) -> str | None:
        if not isinstance(value, str):
            return None
        parsed = urlparse(value)
        if parsed.scheme in ("http", "https") and parsed.netloc:
            return value
        return None

    async def user(self, value: Any) -> User | None:
        if isinstance(value, User):
            return value
        if not isinstance(value, str):
            return None
        mention = _MENTION.match(value)
        if mention:
            value = mention.group(1)
        if _SNOWFLAKE.match(value):
            return self.catalog.users.get(value)
        return None

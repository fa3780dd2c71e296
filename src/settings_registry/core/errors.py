from __future__ import annotations


class SettingsError(Exception):
    """Base class for every failure reported by the settings registry."""


class InvalidArgument(SettingsError, TypeError):
    pass


class DuplicateDomain(SettingsError, ValueError):
    def __init__(self, name: str) -> None:
        super().__init__(f"There is already a Gateway with the name {name!r}.")
        self.name = name


class InvalidSchema(SettingsError, ValueError):
    pass


class UnknownProvider(SettingsError, LookupError):
    def __init__(self, engine: str, available: list[str] | None = None) -> None:
        message = f"This provider ({engine}) does not exist in your system."
        if available is not None:
            message += f" Available: {available}"
        super().__init__(message)
        self.engine = engine


class ProviderRoleMismatch(SettingsError, ValueError):
    def __init__(self, provider: str, message: str) -> None:
        super().__init__(message)
        self.provider = provider


class ValidationError(SettingsError, ValueError):
    pass

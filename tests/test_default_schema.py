from __future__ import annotations

import json

import pytest

from settings_registry.core.registry import SettingsRegistry
from settings_registry.core.types import HostConfig
from settings_registry.gateway.schema import parse_schema
from settings_registry.providers import ProviderRegistry


def make_registry(**config_kwargs) -> SettingsRegistry:
    return SettingsRegistry(HostConfig(**config_kwargs), ProviderRegistry())


class TestDefaultDataSchema:
    def test_keys(self):
        schema = make_registry().default_data_schema
        assert set(schema) == {"prefix", "language", "disabledCommands"}

    def test_array_flags(self):
        schema = make_registry().default_data_schema
        assert schema["disabledCommands"]["array"] is True
        assert schema["language"]["array"] is False
        assert schema["prefix"]["array"] is False

    def test_string_prefix(self):
        schema = make_registry(prefix="?", language="de-DE").default_data_schema
        assert schema["prefix"] == {
            "type": "String",
            "default": "?",
            "array": False,
            "sql": "TEXT NOT NULL DEFAULT '?'",
        }
        assert schema["language"]["default"] == "de-DE"
        assert schema["language"]["sql"] == "TEXT NOT NULL DEFAULT 'de-DE'"

    @pytest.mark.parametrize("prefix", [["!", "?"], ("!", "?")])
    def test_sequence_prefix(self, prefix):
        schema = make_registry(prefix=prefix).default_data_schema
        assert schema["prefix"]["array"] is True
        assert schema["prefix"]["default"] == ["!", "?"]
        assert schema["prefix"]["sql"] == f"TEXT NOT NULL DEFAULT '{json.dumps(['!', '?'])}'"

    def test_disabled_commands(self):
        schema = make_registry().default_data_schema
        assert schema["disabledCommands"] == {
            "type": "Command",
            "default": [],
            "array": True,
            "sql": "TEXT DEFAULT '[]'",
        }

    def test_recomputed_after_reconfiguration(self):
        registry = make_registry(prefix="!")
        before = registry.default_data_schema

        registry.config.prefix = ["!", "$"]
        registry.config.language = "fr-FR"
        after = registry.default_data_schema

        assert before["prefix"]["array"] is False
        assert after["prefix"]["array"] is True
        assert after["language"]["default"] == "fr-FR"

    def test_fresh_object_each_access(self):
        registry = make_registry()
        first = registry.default_data_schema
        first["disabledCommands"]["default"].append("ping")
        assert registry.default_data_schema["disabledCommands"]["default"] == []

    def test_is_a_valid_schema(self):
        registry = make_registry(prefix=["!", "?"])
        entries = parse_schema(registry.default_data_schema, registry.types)
        assert entries["prefix"].array is True
        assert entries["disabledCommands"].type == "Command"


class TestDefaultDataSchemaQuoting:
    def test_quotes_are_escaped(self):
        schema = make_registry(prefix="it's", language="x'y").default_data_schema
        assert schema["prefix"]["sql"] == "TEXT NOT NULL DEFAULT 'it''s'"
        assert schema["prefix"]["default"] == "it's"
        assert schema["language"]["sql"] == "TEXT NOT NULL DEFAULT 'x''y'"

    def test_quotes_inside_sequence_prefix(self):
        schema = make_registry(prefix=["'", "!"]).default_data_schema
        assert schema["prefix"]["sql"] == "TEXT NOT NULL DEFAULT '[\"''\", \"!\"]'"

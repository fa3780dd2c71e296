from __future__ import annotations

import json
from typing import Any

from settings_registry.core.errors import InvalidSchema
from settings_registry.core.types import SchemaEntry

_DESCRIPTOR_KEYS = {"type", "default", "array", "min", "max", "sql"}

_SQL_TYPES = {
    "boolean": "BOOLEAN",
    "float": "REAL",
    "integer": "INTEGER",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def parse_entry(key: str, descriptor: Any, types: frozenset[str]) -> SchemaEntry:
    """Validate one raw schema descriptor and turn it into a SchemaEntry."""
    if isinstance(descriptor, SchemaEntry):
        descriptor = descriptor.to_dict()
    if not isinstance(descriptor, dict):
        raise InvalidSchema(f"The schema entry {key!r} must be a mapping.")

    unknown = set(descriptor) - _DESCRIPTOR_KEYS
    if unknown:
        raise InvalidSchema(f"The schema entry {key!r} has unknown fields: {sorted(unknown)}")

    type_name = descriptor.get("type")
    if not isinstance(type_name, str) or type_name.lower() not in types:
        raise InvalidSchema(
            f"The schema entry {key!r} has an unrecognized type {type_name!r}. "
            f"Available: {sorted(types)}"
        )

    array = descriptor.get("array", False)
    if not isinstance(array, bool):
        raise InvalidSchema(f"The schema entry {key!r} must declare 'array' as a boolean.")

    default = descriptor.get("default", [] if array else None)
    if array and not isinstance(default, list):
        raise InvalidSchema(f"The schema entry {key!r} is an array, its default must be a list.")
    if not array and isinstance(default, list):
        raise InvalidSchema(f"The schema entry {key!r} is not an array, its default cannot be a list.")

    minimum = descriptor.get("min")
    maximum = descriptor.get("max")
    for bound_name, bound in (("min", minimum), ("max", maximum)):
        if bound is not None and not _is_number(bound):
            raise InvalidSchema(f"The schema entry {key!r} must declare {bound_name!r} as a number.")
    if minimum is not None and maximum is not None and minimum > maximum:
        raise InvalidSchema(f"The schema entry {key!r} has 'min' greater than 'max'.")

    sql = descriptor.get("sql")
    if sql is not None and not isinstance(sql, str):
        raise InvalidSchema(f"The schema entry {key!r} must declare 'sql' as a string.")

    return SchemaEntry(
        type=type_name,
        default=default,
        array=array,
        min=minimum,
        max=maximum,
        sql=sql,
    )


def parse_schema(schema: dict[str, Any], types: frozenset[str]) -> dict[str, SchemaEntry]:
    entries: dict[str, SchemaEntry] = {}
    for key, descriptor in schema.items():
        if not isinstance(key, str) or not key:
            raise InvalidSchema(f"Schema keys must be non-empty strings, got {key!r}.")
        if key == "id":
            raise InvalidSchema("The key 'id' is reserved for the record identifier.")
        entries[key] = parse_entry(key, descriptor, types)
    return entries


def sql_literal(value: Any) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    if _is_number(value):
        return str(value)
    if isinstance(value, list):
        value = json.dumps(value)
    escaped = str(value).replace("'", "''")
    return f"'{escaped}'"


def sql_column(entry: SchemaEntry) -> str:
    """Column definition for one entry; an explicit ``sql`` hint always wins."""
    if entry.sql is not None:
        return entry.sql
    column_type = "TEXT" if entry.array else _SQL_TYPES.get(entry.type.lower(), "TEXT")
    if entry.default is None:
        return column_type
    return f"{column_type} DEFAULT {sql_literal(entry.default)}"


def build_sql_columns(schema: dict[str, SchemaEntry]) -> dict[str, str]:
    return {key: sql_column(entry) for key, entry in schema.items()}

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from settings_registry.config.loader import load_host_config, load_yaml
from settings_registry.core.errors import SettingsError, ValidationError
from settings_registry.core.registry import SettingsRegistry
from settings_registry.core.resolver import SettingResolver
from settings_registry.core.types import ProviderOptions
from settings_registry.providers import create_default_providers

console = Console()


async def validate_id(resolver: SettingResolver, value: Any) -> str:
    result = await resolver.string(value)
    if not result:
        raise ValidationError("The parameter <ID> expects a non-empty string.")
    return result


def _build_registry(config_path: Path | None) -> SettingsRegistry:
    config = load_host_config(config_path)
    return SettingsRegistry(config, create_default_providers(config))


@click.group()
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Host config YAML file",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """Settings registry: named, schema-validated settings stores."""
    load_dotenv()
    ctx.obj = config_path


@cli.command("list-providers")
@click.pass_obj
def list_providers_cmd(config_path: Path | None) -> None:
    """List registered storage providers."""
    registry = _build_registry(config_path)

    table = Table(title="Available Providers")
    table.add_column("Name", style="cyan")
    table.add_column("Role")
    table.add_column("Relational")
    table.add_column("Description")

    for name in registry.providers.names():
        provider = registry.providers.get(name)
        table.add_row(
            name,
            provider.role,
            "yes" if provider.supports_relational_schema else "no",
            provider.description,
        )

    console.print(table)


@cli.command("list-types")
def list_types_cmd() -> None:
    """List the setting types schemas may use."""
    for name in SettingResolver.TYPES:
        console.print(f"[cyan]{name}[/cyan]")


@cli.command("default-schema")
@click.pass_obj
def default_schema_cmd(config_path: Path | None) -> None:
    """Show the computed schema of the guild settings domain."""
    registry = _build_registry(config_path)

    table = Table(title="Default Guild Schema")
    table.add_column("Key", style="cyan")
    table.add_column("Type")
    table.add_column("Array")
    table.add_column("Default")
    table.add_column("SQL")

    for key, entry in registry.default_data_schema.items():
        table.add_row(key, entry["type"], str(entry["array"]), repr(entry["default"]), entry["sql"])

    console.print(table)


@cli.command("add")
@click.argument("name")
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="YAML file mapping setting keys to descriptors",
)
@click.option("--guilds", is_flag=True, help="Use the default guild schema and guild validation")
@click.option("--provider", default=None, help="Persistent provider name")
@click.option("--cache", default=None, help="Cache provider name")
@click.option("--verbose", "-v", is_flag=True, help="Log registry activity to stderr")
@click.pass_obj
def add_cmd(
    config_path: Path | None,
    name: str,
    schema_path: Path | None,
    guilds: bool,
    provider: str | None,
    cache: str | None,
    verbose: bool,
) -> None:
    """Register a settings domain and initialize its storage."""
    if verbose:
        sr_logger = logging.getLogger("settings_registry")
        sr_logger.setLevel(logging.DEBUG)
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s [%(name)s] %(message)s"))
        sr_logger.addHandler(handler)

    async def run() -> Any:
        registry = _build_registry(config_path)
        if guilds:
            schema = registry.default_data_schema
            validate = registry.validate
        else:
            schema = load_yaml(schema_path) if schema_path is not None else {}
            validate = validate_id
        await registry.providers.init_all()
        return await registry.add(
            name, validate, schema, ProviderOptions(provider=provider, cache=cache)
        )

    try:
        gateway = asyncio.run(run())
    except (SettingsError, ValueError, OSError) as e:
        console.print(f"[red]{type(e).__name__}: {escape(str(e))}[/red]")
        raise SystemExit(1) from e

    console.print(f"[bold]Domain:[/bold] {gateway.name}")
    console.print(f"[bold]Gateway:[/bold] {type(gateway).__name__}")
    console.print(f"[bold]Provider:[/bold] {gateway.provider.name}")
    console.print(f"[bold]Cache:[/bold] {gateway.cache.name}")
    console.print(f"[bold]Keys:[/bold] {', '.join(gateway.schema) or '(none)'}")
    console.print("[green]Domain ready.[/green]")


if __name__ == "__main__":
    cli()

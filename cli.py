# Copyright 2025 Ilya Makarov
#
# Licensed under the Business Source License 1.1
# Change Date: 2028-11-05
# Change License: Apache License 2.0

"""Regbox CLI - Command Line Interface for the Windows Registry"""

import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click

# Force UTF-8 encoding for Windows
if sys.platform == "win32":
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from regbox import __version__
from regbox.core.adapters import RegistryAdapter
from regbox.core.config import VALID_LOG_LEVELS, load_config
from regbox.core.exceptions import ConfigError
from regbox.core.logger import configure_from_config
from regbox.core.models import Hive, ValueType
from regbox.core.registry import RegistryClient

HIVE_CHOICE = click.Choice([hive.value for hive in Hive], case_sensitive=False)
TYPE_CHOICE = click.Choice([value_type.value for value_type in ValueType])


def _normalize_key(key: str) -> str:
    """Accept ``Software\\Example`` as well as ``\\Software\\Example``"""
    key = key.rstrip("\\")
    if key and not key.startswith("\\"):
        key = "\\" + key
    return key


def _inputs(ctx: click.Context, hive: str, key: str, **extra) -> Dict[str, Any]:
    inputs = {"host": ctx.obj["host"], "hive": hive.upper(), "key": _normalize_key(key)}
    inputs.update(extra)
    return inputs


def _execute(ctx: click.Context, method: str, inputs: Dict[str, Any]) -> None:
    """Run one adapter method, print its response, exit 1 on failure"""
    adapter: RegistryAdapter = ctx.obj["adapter"]
    response = asyncio.run(adapter.execute(method, inputs))
    click.echo(json.dumps(response, indent=2))
    if not response["success"]:
        ctx.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option("--host", default="", help="Remote host (default: local machine)")
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    help="YAML configuration file",
)
@click.option(
    "--log-level",
    type=click.Choice(VALID_LOG_LEVELS, case_sensitive=False),
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, host: str, config_file: Optional[str], log_level: Optional[str]):
    """Regbox - read and write the Windows Registry through REG.

    Keys are given as HIVE KEY, e.g.:

        regbox values HKCU "\\Software\\Microsoft\\Windows\\CurrentVersion\\Run"
        regbox set HKCU "\\Software\\Example" Sample hello --type REG_SZ
    """
    ctx.ensure_object(dict)

    try:
        config = load_config(Path(config_file) if config_file else None)
    except ConfigError as e:
        raise click.ClickException(str(e))

    if log_level:
        config.logging.level = log_level.upper()
    configure_from_config(config)

    ctx.obj["host"] = host
    if "adapter" not in ctx.obj:
        client = RegistryClient(runner=ctx.obj.get("runner"), config=config)
        ctx.obj["adapter"] = RegistryAdapter(client)


# =============================================================================
# Queries
# =============================================================================


@cli.command()
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key", default="")
@click.pass_context
def values(ctx, hive, key):
    """List the values of a key."""
    _execute(ctx, "list_values", _inputs(ctx, hive, key))


@cli.command()
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key", default="")
@click.pass_context
def keys(ctx, hive, key):
    """List the direct subkeys of a key."""
    _execute(ctx, "list_subkeys", _inputs(ctx, hive, key))


@cli.command()
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key")
@click.argument("name")
@click.pass_context
def get(ctx, hive, key, name):
    """Read one value. Use "" as NAME for the default value."""
    _execute(ctx, "get_value", _inputs(ctx, hive, key, name=name))


@cli.command()
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key")
@click.option("--value", "name", help="Check for this value instead of the key")
@click.pass_context
def exists(ctx, hive, key, name):
    """Check whether a key (or one of its values) exists."""
    if name is None:
        _execute(ctx, "key_exists", _inputs(ctx, hive, key))
    else:
        _execute(ctx, "value_exists", _inputs(ctx, hive, key, name=name))


# =============================================================================
# Mutations
# =============================================================================


@cli.command("set")
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key")
@click.argument("name")
@click.argument("value")
@click.option("--type", "-t", "value_type", type=TYPE_CHOICE, default="REG_SZ", show_default=True)
@click.pass_context
def set_(ctx, hive, key, name, value, value_type):
    """Write a value, overwriting an existing one."""
    _execute(
        ctx,
        "set_value",
        _inputs(ctx, hive, key, name=name, type=value_type, value=value),
    )


@cli.command()
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key")
@click.argument("name")
@click.pass_context
def remove(ctx, hive, key, name):
    """Remove one value from a key."""
    _execute(ctx, "remove_value", _inputs(ctx, hive, key, name=name))


@cli.command()
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key")
@click.pass_context
def erase(ctx, hive, key):
    """Remove every value of a key, keeping the key."""
    _execute(ctx, "erase_key", _inputs(ctx, hive, key))


@cli.command()
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key")
@click.pass_context
def create(ctx, hive, key):
    """Create a key (succeeds if it already exists)."""
    _execute(ctx, "create_key", _inputs(ctx, hive, key))


@cli.command()
@click.argument("hive", type=HIVE_CHOICE)
@click.argument("key")
@click.confirmation_option(prompt="Delete this key and all of its subkeys?")
@click.pass_context
def delete(ctx, hive, key):
    """Delete a key and everything below it."""
    _execute(ctx, "delete_key", _inputs(ctx, hive, key))


if __name__ == "__main__":
    cli()

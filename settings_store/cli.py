"""settingsctl: CLI for inspecting and editing settings namespaces."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn

import click

from settings_store.factory import create_store
from settings_store.shared.codec import pack_native
from settings_store.shared.config import BACKENDS, StoreConfig
from settings_store.shared.exceptions import SettingsStoreError
from settings_store.shared.logging import bind_context, configure_logging
from settings_store.store import SettingsStore


def _handle_store_error(e: SettingsStoreError) -> NoReturn:
    """Print a user-friendly error for store failures."""
    click.echo(f"Error [{type(e).__name__}]: {e}", err=True)
    raise SystemExit(1)


def _dumps(value: Any) -> str:
    return json.dumps(pack_native(value), indent=2, sort_keys=True)


def _parse_value(raw: str, as_string: bool) -> Any:
    if as_string:
        return raw
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


@click.group()
@click.option("--backend", type=click.Choice(BACKENDS), default=None, help="Backend (default: $SETTINGS_STORE_BACKEND or file)")
@click.option("--data-dir", type=click.Path(file_okay=False, path_type=Path), default=None, help="Directory for the file backend")
@click.option("--database-url", default=None, help="PostgreSQL DSN for the postgres backend")
@click.option("--log-level", default="WARNING", help="Log level for diagnostics on stderr")
@click.pass_context
def cli(
    ctx: click.Context,
    backend: str | None,
    data_dir: Path | None,
    database_url: str | None,
    log_level: str,
) -> None:
    """Settings store CLI: read, write and clean settings namespaces."""
    configure_logging(log_level, stream=sys.stderr)
    ctx.ensure_object(dict)
    ctx.obj["overrides"] = {
        "backend": backend,
        "data_dir": data_dir,
        "database_url": database_url,
    }


def _store(ctx: click.Context, namespace: str) -> SettingsStore:
    try:
        base = StoreConfig.from_env()
        overrides = {k: v for k, v in ctx.obj["overrides"].items() if v is not None}
        config = StoreConfig(
            backend=overrides.get("backend", base.backend),
            data_dir=overrides.get("data_dir", base.data_dir),
            database_url=overrides.get("database_url", base.database_url),
            log_level=base.log_level,
        )
        bind_context(namespace=namespace, command=ctx.info_name)
        return create_store(namespace, config)
    except SettingsStoreError as e:
        _handle_store_error(e)


@cli.command("keys")
@click.argument("namespace")
@click.pass_context
def keys_cmd(ctx: click.Context, namespace: str) -> None:
    """List keys in a namespace."""
    store = _store(ctx, namespace)
    try:
        for key in sorted(store.keys()):
            click.echo(key)
    finally:
        store.close()


@cli.command("get")
@click.argument("namespace")
@click.argument("key")
@click.option("--object", "as_object", is_flag=True, help="Decode a value written with save_object")
@click.pass_context
def get_cmd(ctx: click.Context, namespace: str, key: str, as_object: bool) -> None:
    """Print the value stored under KEY as JSON."""
    store = _store(ctx, namespace)
    try:
        value = store.get_object(key, object) if as_object else store.get(key)
    finally:
        store.close()
    if value is None:
        click.echo("not found", err=True)
        raise SystemExit(1)
    click.echo(_dumps(value))


@cli.command("set")
@click.argument("namespace")
@click.argument("key")
@click.argument("value")
@click.option("--string", "as_string", is_flag=True, help="Store VALUE verbatim instead of parsing JSON")
@click.option("--object", "as_object", is_flag=True, help="Store VALUE as an encoded object")
@click.pass_context
def set_cmd(ctx: click.Context, namespace: str, key: str, value: str, as_string: bool, as_object: bool) -> None:
    """Store VALUE under KEY. VALUE is parsed as JSON when possible."""
    parsed = _parse_value(value, as_string)
    store = _store(ctx, namespace)
    try:
        if as_object:
            store.save_object(key, parsed)
        elif parsed is None:
            store.remove(key)
        else:
            store.set(key, parsed)
    except SettingsStoreError as e:
        _handle_store_error(e)
    finally:
        store.close()
    click.echo("stored")


@cli.command("remove")
@click.argument("namespace")
@click.argument("key")
@click.pass_context
def remove_cmd(ctx: click.Context, namespace: str, key: str) -> None:
    """Remove KEY from a namespace."""
    store = _store(ctx, namespace)
    try:
        store.remove(key)
    finally:
        store.close()
    click.echo("removed")


@cli.command("reset")
@click.argument("namespace")
@click.confirmation_option(prompt="Delete every value in this namespace?")
@click.pass_context
def reset_cmd(ctx: click.Context, namespace: str) -> None:
    """Delete a namespace and all of its values."""
    store = _store(ctx, namespace)
    try:
        store.reset()
    finally:
        store.close()
    click.echo("reset")


@cli.command("clean")
@click.argument("namespace")
@click.option("--keep", multiple=True, help="Key to preserve (repeatable)")
@click.pass_context
def clean_cmd(ctx: click.Context, namespace: str, keep: tuple[str, ...]) -> None:
    """Remove every key except the ones given with --keep."""
    store = _store(ctx, namespace)
    try:
        before = len(store)
        store.clean(except_keys=keep)
        after = len(store)
    finally:
        store.close()
    click.echo(json.dumps({"removed": before - after, "kept": after}, indent=2))


@cli.command("dump")
@click.argument("namespace")
@click.pass_context
def dump_cmd(ctx: click.Context, namespace: str) -> None:
    """Print every entry in a namespace as a JSON object."""
    store = _store(ctx, namespace)
    try:
        entries = store.entries()
    finally:
        store.close()
    click.echo(_dumps(entries))


if __name__ == "__main__":
    cli()

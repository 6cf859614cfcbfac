"""The `connect` command group: manage named MySQL connections."""

from __future__ import annotations

import click

from sqlstencil.connections import list_connections, remove_connection, save_connection
from sqlstencil.errors import ArgumentError

_SECRET_KEYS = frozenset({"password"})


@click.group()
def connect() -> None:
    """Manage named MySQL connections (~/.sqlstencil/connections.toml)."""


@connect.command("add")
@click.argument("name")
@click.argument("params", nargs=-1, required=True)
def connect_add(name: str, params: tuple[str, ...]) -> None:
    """Add a named connection.

    \b
    Examples:
      sqlstencil connect add shop hostname=localhost username=app password=secret database=shop
      sqlstencil connect add legacy hostname=db1 username=ro password=x database=old port=3307
    """
    parsed: dict[str, str] = {}
    for p in params:
        if "=" not in p:
            raise click.BadParameter(f"Expected key=value, got '{p}'")
        k, v = p.split("=", 1)
        parsed[k] = v

    try:
        path = save_connection(name, parsed)
    except ArgumentError as e:
        raise click.BadParameter(str(e)) from e
    click.echo(f"Saved connection '{name}' to {path}")


@connect.command("list")
def connect_list() -> None:
    """List all named connections."""
    connections = list_connections()
    if not connections:
        click.echo("No connections configured.")
        click.echo("Add one: sqlstencil connect add <name> hostname=... username=... "
                   "password=... database=...")
        return

    for name, entry in connections.items():
        param_str = ", ".join(
            f"{k}={'****' if k in _SECRET_KEYS else v}" for k, v in entry.items()
        )
        click.echo(f"  {name}: {param_str}")


@connect.command("remove")
@click.argument("name")
def connect_remove(name: str) -> None:
    """Remove a named connection."""
    if not remove_connection(name):
        click.echo(f"Connection '{name}' not found.", err=True)
        raise SystemExit(1)
    click.echo(f"Removed connection '{name}'.")

"""CLI entry point. Both `sqlstencil` and `sqlst` resolve here."""

from __future__ import annotations

import click

from sqlstencil.cli.connect import connect
from sqlstencil.cli.password import password
from sqlstencil.cli.query import call, query
from sqlstencil.cli.render import render


@click.group()
@click.version_option(package_name="sqlstencil")
def main() -> None:
    """sqlstencil: MySQL query templates with typed `?` parameters."""


main.add_command(connect)
main.add_command(query)
main.add_command(call)
main.add_command(render)
main.add_command(password)

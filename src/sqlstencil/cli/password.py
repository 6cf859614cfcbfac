"""The `password` command: pronounceable random passwords."""

from __future__ import annotations

import click

from sqlstencil.passwords import PasswordGenerator


@click.command()
@click.option("--length", type=click.IntRange(min=0), default=0,
              help="Minimum length; 0 gives a single word.")
@click.option("--caps", is_flag=True, help="Capitalise the first letter.")
@click.option("--number", is_flag=True, help="Append a two-digit number.")
@click.option("--count", type=click.IntRange(min=1), default=1, help="How many to generate.")
def password(length: int, caps: bool, number: bool, count: int) -> None:
    """Generate easy-to-read passwords."""
    generator = PasswordGenerator()
    for _ in range(count):
        click.echo(generator.generate(length=length, caps=caps, number=number))

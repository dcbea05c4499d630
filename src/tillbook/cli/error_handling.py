"""CLI error handling helpers."""

from contextlib import contextmanager
from typing import Iterator

import click

from tillbook.domain.errors import DomainError, StorageError


def handle_domain_error(ctx: click.Context, error: DomainError | StorageError | ValueError) -> None:
    """Render a domain or storage error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


@contextmanager
def exit_on_error(ctx: click.Context) -> Iterator[None]:
    """Turn domain and storage errors raised in the block into a CLI failure."""
    try:
        yield
    except (DomainError, StorageError) as e:
        handle_domain_error(ctx, e)

"""Main CLI entry point."""

import logging
import os

import click
from tillbook.database.factories import create_database

# Import and register all commands at module level
from tillbook.cli.commands import (
    customer,
    payment,
    product,
    report,
    sale,
)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Configure root logging; --verbose wins over TILLBOOK_LOG_LEVEL."""
    level_name = "DEBUG" if verbose else os.environ.get("TILLBOOK_LOG_LEVEL", "WARNING")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("tillbook").setLevel(level)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides TILLBOOK_DB_PATH environment variable)",
    envvar="TILLBOOK_DB_PATH",
)
@click.option(
    "--retry-attempts",
    type=click.IntRange(min=1),
    default=3,
    show_default=True,
    envvar="TILLBOOK_RETRY_ATTEMPTS",
    help="Attempts for a sale commit when the database is busy",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx, db_path: str | None, retry_attempts: int, verbose: bool):
    """Tillbook - Point-of-sale back office.

    Keep a product catalog and customer registry, commit sales against stock,
    and track payments on credit sales.
    """
    configure_logging(verbose)
    ctx.ensure_object(dict)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["retry_attempts"] = retry_attempts
        ctx.call_on_close(db.disconnect)


# Register all commands
product.register_commands(cli)
customer.register_commands(cli)
sale.register_commands(cli)
payment.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()

"""CLI helpers for date range resolution."""

from datetime import date

import click

from tillbook.domain.errors import ValidationError
from tillbook.utils.date_parser import get_date_range, parse_date

PERIOD_CHOICES = ["today", "this-week", "this-month", "this-year", "last-week", "last-month", "last-year"]


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a --period option or explicit dates."""
    if period is not None and (start_date or end_date):
        click.echo("Error: --period cannot be combined with --start-date or --end-date.", err=True)
        ctx.exit(1)

    if period is not None:
        return get_date_range(period)

    start = None
    end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValidationError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    if start is None and end is None and default_range is not None:
        start, end = default_range
    return start, end

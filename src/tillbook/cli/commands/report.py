"""Sales report command."""

from datetime import date

import click
from tillbook.cli.date_filters import PERIOD_CHOICES, resolve_cli_date_range
from tillbook.cli.error_handling import exit_on_error
from tillbook.domain.entities import ReportGroupBy
from tillbook.domain.report import ReportService
from tillbook.utils.date_parser import get_date_range
from tillbook.utils.money import format_money


@click.command("report")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="Named period instead of explicit dates")
@click.option(
    "--group-by",
    type=click.Choice([g.value for g in ReportGroupBy]),
    default=ReportGroupBy.DAY.value,
    show_default=True,
    help="Reporting period",
)
@click.pass_context
def report(ctx, start_date: str | None, end_date: str | None, period: str | None, group_by: str):
    """Show sales totals grouped by day, week or month.

    Defaults to the current month when no dates are given.

    Examples:
        tillbook report --period last-month --group-by week
        tillbook report --start-date 2024-01-01 --end-date 2024-03-31 --group-by month
    """
    service = ReportService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period=period,
        default_range=get_date_range("this-month"),
    )
    if start is None:
        start = date.min
    if end is None:
        end = date.today()

    with exit_on_error(ctx):
        sales = service.sales_report(start, end, group_by=group_by)

    if not sales.rows:
        click.echo("No sales in this period.")
        return

    click.echo(f"\nSales by {sales.group_by.value}:")
    click.echo("-" * 78)
    click.echo(f"{'Period':12s} | {'Sales':>14s} | {'Count':>5s} | {'Average':>12s} | {'Items':>6s}")
    for row in sales.rows:
        click.echo(
            f"{row.period:12s} | {format_money(row.total_sales):>14s} | {row.total_transactions:5d} | "
            f"{format_money(row.average_transaction):>12s} | {row.total_items_sold:6d}"
        )
    click.echo("-" * 78)
    click.echo(f"{'Total':12s} | {format_money(sales.total_sales):>14s} | {sales.total_transactions:5d}")


def register_commands(cli):
    """Register report command with main CLI."""
    cli.add_command(report)

"""Sale commands: commit carts and browse committed transactions."""

import click
from tillbook.cli.date_filters import PERIOD_CHOICES, resolve_cli_date_range
from tillbook.cli.error_handling import exit_on_error
from tillbook.domain.catalog import CatalogService
from tillbook.domain.entities import CartItem, PaymentMethod, PaymentStatus
from tillbook.domain.errors import ValidationError
from tillbook.domain.ledger import LedgerEngine
from tillbook.utils.money import format_money, to_money

METHOD_CHOICES = [m.value for m in PaymentMethod]
STATUS_CHOICES = [s.value for s in PaymentStatus]


def parse_cart_item(catalog: CatalogService, spec: str) -> CartItem:
    """Parse PRODUCT_ID:QTY[:PRICE] into a cart line.

    Without PRICE the product's current catalog price is frozen into the line.
    """
    parts = spec.split(":")
    if len(parts) not in (2, 3):
        raise ValidationError(f"Invalid item '{spec}'. Expected PRODUCT_ID:QTY or PRODUCT_ID:QTY:PRICE")
    try:
        product_id = int(parts[0])
        quantity = int(parts[1])
    except ValueError:
        raise ValidationError(f"Invalid item '{spec}'. Product ID and quantity must be integers")

    if len(parts) == 3:
        unit_price = to_money(parts[2], "unit_price")
    else:
        unit_price = catalog.require_product(product_id).price
    return CartItem(product_id=product_id, quantity=quantity, unit_price=unit_price)


@click.group()
def sale_group():
    """Commit and view sales."""
    pass


@sale_group.command("commit")
@click.option(
    "--item",
    "items",
    multiple=True,
    required=True,
    help="Cart line as PRODUCT_ID:QTY[:PRICE]; repeat for more lines",
)
@click.option("--customer", "customer_id", type=int, help="Customer ID (required for debt sales in practice)")
@click.option("--discount", default="0", show_default=True, help="Discount amount")
@click.option("--tax", default="0", show_default=True, help="Tax amount")
@click.option(
    "--method",
    "payment_method",
    type=click.Choice(METHOD_CHOICES),
    default=PaymentMethod.CASH.value,
    show_default=True,
    help="Payment method",
)
@click.option("--notes", help="Notes")
@click.pass_context
def commit_sale(
    ctx,
    items: tuple[str, ...],
    customer_id: int | None,
    discount: str,
    tax: str,
    payment_method: str,
    notes: str | None,
):
    """Commit a sale.

    Examples:
        tillbook sale commit --item 1:2 --item 3:1
        tillbook sale commit --item 1:3:10.00 --customer 2 --method debt
    """
    db = ctx.obj["db"]
    engine = LedgerEngine(db, retry_attempts=ctx.obj.get("retry_attempts", 3))
    catalog = CatalogService(db)

    with exit_on_error(ctx):
        cart = [parse_cart_item(catalog, spec) for spec in items]
        transaction = engine.commit_sale(
            items=cart,
            customer_id=customer_id,
            discount_amount=discount,
            tax_amount=tax,
            payment_method=payment_method,
            notes=notes,
        )
        click.echo(f"Committed transaction {transaction.id}")
        click.echo(f"  Total: {format_money(transaction.total_amount)}")
        if transaction.discount_amount:
            click.echo(f"  Discount: {format_money(transaction.discount_amount)}")
        if transaction.tax_amount:
            click.echo(f"  Tax: {format_money(transaction.tax_amount)}")
        click.echo(f"  Final: {format_money(transaction.final_amount)}")
        click.echo(f"  Method: {transaction.payment_method.value}")
        click.echo(f"  Status: {transaction.payment_status.value}")


@sale_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="Named period instead of explicit dates")
@click.option("--customer", "customer_id", type=int, help="Customer ID")
@click.option("--status", type=click.Choice(STATUS_CHOICES), help="Payment status")
@click.option("--limit", type=click.IntRange(min=1), default=50, show_default=True)
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True)
@click.pass_context
def list_sales(
    ctx,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    customer_id: int | None,
    status: str | None,
    limit: int,
    offset: int,
):
    """List committed transactions, newest first."""
    engine = LedgerEngine(ctx.obj["db"])
    start, end = resolve_cli_date_range(ctx, start_date=start_date, end_date=end_date, period=period)

    with exit_on_error(ctx):
        transactions = engine.list_transactions(
            start_date=start,
            end_date=end,
            customer_id=customer_id,
            payment_status=status,
            limit=limit,
            offset=offset,
        )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\nTransactions ({len(transactions)}):")
    click.echo("-" * 80)
    for t in transactions:
        customer = f"{t.customer_id:5d}" if t.customer_id is not None else "    -"
        click.echo(
            f"ID: {t.id:5d} | {t.created_at:%Y-%m-%d %H:%M} | Customer: {customer} | "
            f"{format_money(t.final_amount):>12s} | {t.payment_method.value:13s} | {t.payment_status.value}"
        )


@sale_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_sale(ctx, transaction_id: int):
    """Show a transaction with its items and payments."""
    engine = LedgerEngine(ctx.obj["db"])
    with exit_on_error(ctx):
        detail = engine.get_transaction_detail(transaction_id)

    t = detail.transaction
    click.echo(f"Transaction {t.id} ({t.created_at:%Y-%m-%d %H:%M})")
    if t.customer_id is not None:
        click.echo(f"  Customer: {t.customer_id}")
    click.echo(f"  Method: {t.payment_method.value}  Status: {t.payment_status.value}")
    if t.notes:
        click.echo(f"  Notes: {t.notes}")
    click.echo("  Items:")
    for item in detail.items:
        click.echo(
            f"    Product {item.product_id:4d} x {item.quantity:3d} @ {format_money(item.unit_price):>10s}"
            f" = {format_money(item.subtotal):>12s}"
        )
    click.echo(f"  Total: {format_money(t.total_amount)}")
    click.echo(f"  Discount: {format_money(t.discount_amount)}")
    click.echo(f"  Tax: {format_money(t.tax_amount)}")
    click.echo(f"  Final: {format_money(t.final_amount)}")
    if t.is_credit_sale:
        click.echo(f"  Paid: {format_money(detail.amount_paid)}")
        click.echo(f"  Balance due: {format_money(detail.balance_due)}")
        for p in detail.payments:
            click.echo(f"    Payment {p.id}: {format_money(p.amount)} by {p.payment_method.value}")


def register_commands(cli):
    """Register sale commands with main CLI."""
    cli.add_command(sale_group, name="sale")

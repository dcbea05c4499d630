"""Payment commands for credit sales."""

import click
from tillbook.cli.error_handling import exit_on_error
from tillbook.domain.entities import PaymentMethod
from tillbook.domain.errors import ValidationError
from tillbook.domain.ledger import LedgerEngine
from tillbook.domain.settlement import SettlementTracker
from tillbook.utils.money import format_money, parse_amount

SETTLEMENT_METHODS = [m.value for m in PaymentMethod if m != PaymentMethod.DEBT]


@click.group()
def payment_group():
    """Record and list payments on credit sales."""
    pass


@payment_group.command("record")
@click.argument("transaction_id", type=int)
@click.option("--amount", required=True, help="Amount paid (e.g., 25000 or 'Rp 25,000.00')")
@click.option(
    "--method",
    "payment_method",
    type=click.Choice(SETTLEMENT_METHODS),
    default=PaymentMethod.CASH.value,
    show_default=True,
    help="How the customer paid",
)
@click.option("--customer", "customer_id", type=int, help="Paying customer (defaults to the sale's customer)")
@click.option("--notes", help="Notes")
@click.pass_context
def record_payment(
    ctx,
    transaction_id: int,
    amount: str,
    payment_method: str,
    customer_id: int | None,
    notes: str | None,
):
    """Record a payment against a debt sale.

    Examples:
        tillbook payment record 12 --amount 50000
        tillbook payment record 12 --amount 25000 --method qris
    """
    db = ctx.obj["db"]
    tracker = SettlementTracker(db)

    with exit_on_error(ctx):
        if customer_id is None:
            customer_id = LedgerEngine(db).get_transaction(transaction_id).customer_id
            if customer_id is None:
                raise ValidationError(f"Transaction {transaction_id} has no customer; pass --customer")
        payment = tracker.record_payment(
            transaction_id=transaction_id,
            customer_id=customer_id,
            amount=parse_amount(amount),
            payment_method=payment_method,
            notes=notes,
        )
        status = LedgerEngine(db).get_transaction(transaction_id).payment_status
        click.echo(
            f"Recorded payment {payment.id} of {format_money(payment.amount)} "
            f"on transaction {transaction_id} (status: {status.value})"
        )


@payment_group.command("list")
@click.option("--transaction", "transaction_id", type=int, help="Only payments on this transaction")
@click.option("--customer", "customer_id", type=int, help="Only payments by this customer")
@click.pass_context
def list_payments(ctx, transaction_id: int | None, customer_id: int | None):
    """List recorded payments."""
    tracker = SettlementTracker(ctx.obj["db"])
    payments = tracker.list_payments(transaction_id=transaction_id, customer_id=customer_id)
    if not payments:
        click.echo("No payments found.")
        return

    click.echo("\nPayments:")
    click.echo("-" * 78)
    for p in payments:
        click.echo(
            f"ID: {p.id:5d} | {p.created_at:%Y-%m-%d %H:%M} | Transaction: {p.transaction_id:5d} | "
            f"Customer: {p.customer_id:4d} | {format_money(p.amount):>12s} | {p.payment_method.value}"
        )


def register_commands(cli):
    """Register payment commands with main CLI."""
    cli.add_command(payment_group, name="payment")

"""Customer management commands."""

import click
from tillbook.cli.error_handling import exit_on_error
from tillbook.domain.customer import CustomerService
from tillbook.domain.settlement import SettlementTracker
from tillbook.utils.money import format_money


@click.group()
def customer_group():
    """Manage customers."""
    pass


@customer_group.command("create")
@click.argument("name")
@click.option("--phone", help="Phone number")
@click.option("--email", help="Email address")
@click.option("--address", help="Address")
@click.option("--debt-limit", help="Advisory credit ceiling")
@click.pass_context
def create_customer(
    ctx,
    name: str,
    phone: str | None,
    email: str | None,
    address: str | None,
    debt_limit: str | None,
):
    """Create a new customer.

    Examples:
        tillbook customer create "Budi" --phone 08123456789
        tillbook customer create "Siti" --debt-limit 500000
    """
    service = CustomerService(ctx.obj["db"])
    with exit_on_error(ctx):
        customer_id = service.create_customer(
            name=name, phone=phone, email=email, address=address, debt_limit=debt_limit
        )
        click.echo(f"Created customer '{name}' (ID: {customer_id})")


@customer_group.command("list")
@click.pass_context
def list_customers(ctx):
    """List all customers."""
    service = CustomerService(ctx.obj["db"])
    customers = service.list_customers()
    if not customers:
        click.echo("No customers found.")
        return

    click.echo("\nCustomers:")
    click.echo("-" * 60)
    for c in customers:
        limit = f" | Limit: {format_money(c.debt_limit)}" if c.debt_limit is not None else ""
        click.echo(f"ID: {c.id:4d} | {c.name:20s} | Phone: {c.phone or '-'}{limit}")


@customer_group.command("update")
@click.argument("customer_id", type=int)
@click.option("--name", help="New name")
@click.option("--phone", help="New phone number")
@click.option("--email", help="New email address")
@click.option("--address", help="New address")
@click.option("--debt-limit", help="New advisory credit ceiling")
@click.pass_context
def update_customer(ctx, customer_id: int, **options):
    """Update a customer.

    Updates only the fields that are provided.
    """
    service = CustomerService(ctx.obj["db"])
    fields = {name: value for name, value in options.items() if value is not None}
    with exit_on_error(ctx):
        customer = service.update_customer(customer_id, **fields)
        click.echo(f"Updated customer {customer.id} ('{customer.name}')")


@customer_group.command("debt")
@click.argument("customer_id", type=int)
@click.pass_context
def customer_debt(ctx, customer_id: int):
    """Show a customer's outstanding debt."""
    db = ctx.obj["db"]
    service = CustomerService(db)
    with exit_on_error(ctx):
        customer = service.require_customer(customer_id)
        debt = SettlementTracker(db).get_customer_debt(customer_id)
        click.echo(f"Customer: {customer.name} (ID: {customer.id})")
        click.echo(f"Outstanding debt: {format_money(debt)}")
        if customer.debt_limit is not None:
            click.echo(f"Debt limit: {format_money(customer.debt_limit)}")
            if service.is_over_debt_limit(customer_id):
                click.echo("Warning: debt exceeds the customer's limit")


def register_commands(cli):
    """Register customer commands with main CLI."""
    cli.add_command(customer_group, name="customer")

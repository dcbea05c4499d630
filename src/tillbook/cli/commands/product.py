"""Product catalog commands."""

import click
from tillbook.cli.error_handling import exit_on_error
from tillbook.domain.catalog import CatalogService
from tillbook.domain.entities import Product
from tillbook.utils.money import format_money


def _echo_products(products: list[Product]) -> None:
    click.echo("-" * 78)
    for p in products:
        flags = []
        if not p.is_active:
            flags.append("inactive")
        if p.is_low_stock:
            flags.append("low stock")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        click.echo(
            f"ID: {p.id:4d} | {p.name:24s} | Price: {format_money(p.price):>12s} | "
            f"Stock: {p.stock_quantity:5d}{suffix}"
        )


@click.group()
def product_group():
    """Manage the product catalog."""
    pass


@product_group.command("create")
@click.argument("name")
@click.option("--price", required=True, help="Unit sale price (e.g., 12500.00)")
@click.option("--stock", "stock_quantity", type=int, default=0, show_default=True, help="Units on hand")
@click.option("--barcode", help="Barcode")
@click.option("--cost", help="Unit cost")
@click.option("--min-stock", type=int, help="Low-stock threshold")
@click.option("--category", help="Display category")
@click.option("--image-url", help="Image URL")
@click.pass_context
def create_product(
    ctx,
    name: str,
    price: str,
    stock_quantity: int,
    barcode: str | None,
    cost: str | None,
    min_stock: int | None,
    category: str | None,
    image_url: str | None,
):
    """Create a new product.

    Examples:
        tillbook product create "Kopi Susu" --price 15000 --stock 40
        tillbook product create "Teh Botol" --price 5000 --stock 100 --min-stock 10
    """
    service = CatalogService(ctx.obj["db"])
    with exit_on_error(ctx):
        product_id = service.create_product(
            name=name,
            price=price,
            stock_quantity=stock_quantity,
            barcode=barcode,
            cost=cost,
            min_stock=min_stock,
            category=category,
            image_url=image_url,
        )
        click.echo(f"Created product '{name}' (ID: {product_id})")


@product_group.command("list")
@click.option("--category", help="Only products in this category")
@click.option("--active/--inactive", "is_active", default=None, help="Filter on active flag")
@click.option("--low-stock", is_flag=True, help="Only products at or below their minimum stock")
@click.option("--search", help="Name or barcode to search for")
@click.option("--limit", type=click.IntRange(min=1), default=50, show_default=True)
@click.option("--offset", type=click.IntRange(min=0), default=0, show_default=True)
@click.pass_context
def list_products(
    ctx,
    category: str | None,
    is_active: bool | None,
    low_stock: bool,
    search: str | None,
    limit: int,
    offset: int,
):
    """List products."""
    service = CatalogService(ctx.obj["db"])
    products = service.list_products(
        category=category,
        is_active=is_active,
        low_stock=low_stock,
        search=search,
        limit=limit,
        offset=offset,
    )
    if not products:
        click.echo("No products found.")
        return

    click.echo("\nProducts:")
    _echo_products(products)


@product_group.command("low-stock")
@click.pass_context
def low_stock(ctx):
    """List products at or below their minimum stock."""
    service = CatalogService(ctx.obj["db"])
    products = service.get_low_stock_products()
    if not products:
        click.echo("No products are low on stock.")
        return

    click.echo("\nLow stock products:")
    _echo_products(products)


@product_group.command("update")
@click.argument("product_id", type=int)
@click.option("--name", help="New name")
@click.option("--price", help="New unit sale price")
@click.option("--stock", "stock_quantity", type=int, help="New stock quantity")
@click.option("--barcode", help="New barcode")
@click.option("--cost", help="New unit cost")
@click.option("--min-stock", type=int, help="New low-stock threshold")
@click.option("--category", help="New category")
@click.option("--image-url", help="New image URL")
@click.option("--active/--inactive", "is_active", default=None, help="Enable or disable sales of the product")
@click.pass_context
def update_product(ctx, product_id: int, **options):
    """Update a product.

    Updates only the fields that are provided.

    Examples:
        tillbook product update 3 --price 16000
        tillbook product update 3 --inactive
    """
    service = CatalogService(ctx.obj["db"])
    fields = {name: value for name, value in options.items() if value is not None}
    with exit_on_error(ctx):
        product = service.update_product(product_id, **fields)
        click.echo(f"Updated product {product.id} ('{product.name}')")


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group, name="product")

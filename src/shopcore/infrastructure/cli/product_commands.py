"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from shopcore.infrastructure.cli.runtime import run


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--stock", required=True, type=int, help="Units available.")
@click.option("--image", "image_url", default=None, help="Image URL.")
@click.option("--id", "product_id", default=None, help="Explicit product id.")
def product_add(
    name: str, price: str, stock: int, image_url: str | None, product_id: str | None
) -> None:
    """Add a new product to the catalog."""
    product = run(
        lambda c: c.add_product().handle(
            name=name,
            price=price,
            stock=stock,
            image_url=image_url,
            product_id=product_id,
        )
    )
    click.echo(f"Product {product.id} '{product.name}' added at ${product.price:.2f} ({product.stock} in stock)")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    products = run(lambda c: c.list_products().handle())

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<38} {'Name':<20} {'Price':>10} {'Stock':>7}")
    click.echo("-" * 78)
    for p in products:
        click.echo(f"{p.id:<38} {p.name:<20} {'$' + format(p.price, '.2f'):>10} {p.stock:>7}")

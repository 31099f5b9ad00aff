"""CLI commands for the persisted cart."""

from __future__ import annotations

import click

from shopcore.application.dto import CartDTO
from shopcore.infrastructure.cli.runtime import (
    identity_options,
    parse_items,
    principal_from,
    run,
)


def _display_cart(cart: CartDTO) -> None:
    if cart.is_empty:
        click.echo("Cart is empty.")
        return

    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for line in cart.items:
        click.echo(
            f"  {line.product.name:<20} {line.quantity:>5} "
            f"{'$' + format(line.product.price, '.2f'):>10} "
            f"{'$' + format(line.line_total, '.2f'):>10}"
        )
    click.echo(f"  {'-'*47}")
    for label, amount in (
        ("Subtotal", cart.subtotal),
        ("Shipping", cart.shipping),
        ("Tax", cart.tax),
        ("Total", cart.total),
    ):
        click.echo(f"  {label:<27} {'$' + format(amount, '.2f'):>20}")
    if cart.to_free_shipping is not None:
        click.echo(f"  Add ${cart.to_free_shipping:.2f} more for free shipping!")


@click.command("sync")
@identity_options
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
def cart_sync(user_id: str, email: str, name: str, admin: bool, items: str) -> None:
    """Replace the stored cart with the given items."""
    principal = principal_from(user_id, email, name, admin)
    specs = parse_items(items)
    cart = run(lambda c: c.sync_cart().handle(principal, specs))
    _display_cart(cart)


@click.command("show")
@identity_options
def cart_show(user_id: str, email: str, name: str, admin: bool) -> None:
    """Show the stored cart with a price preview."""
    principal = principal_from(user_id, email, name, admin)
    cart = run(lambda c: c.show_cart().handle(principal))
    _display_cart(cart)

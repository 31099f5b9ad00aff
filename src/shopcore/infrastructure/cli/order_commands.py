"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from shopcore.application.dto import LineItemRequest, OrderView
from shopcore.infrastructure.bootstrap import Container
from shopcore.infrastructure.cli.runtime import (
    identity_options,
    parse_items,
    principal_from,
    run,
)


def _display_order(dto: OrderView) -> None:
    click.echo(f"Order {dto.order_id}  (status={dto.status})")
    click.echo(f"Created:  {dto.created_at.strftime('%Y-%m-%d %H:%M UTC')}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10}")
    click.echo(f"  {'-'*37}")
    for item in dto.items:
        click.echo(f"  {item.name:<20} {item.quantity:>5} {'$' + format(item.price, '.2f'):>10}")
    click.echo(f"  {'-'*37}")
    click.echo(f"  {'Order Total':<20} {'$' + format(dto.total, '.2f'):>16}")


@click.command("checkout")
@identity_options
@click.option("--items", default=None, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--from-cart", is_flag=True, default=False, help="Check out the stored cart.")
@click.option("--full-name", required=True, help="Recipient name.")
@click.option("--address", required=True, help="Street address.")
@click.option("--city", required=True)
@click.option("--state", required=True)
@click.option("--zip", "zip_code", required=True)
@click.option("--country", default="US", show_default=True)
@click.option("--payment", "payment_method", default="card", show_default=True)
def order_checkout(
    user_id: str,
    email: str,
    name: str,
    admin: bool,
    items: str | None,
    from_cart: bool,
    full_name: str,
    address: str,
    city: str,
    state: str,
    zip_code: str,
    country: str,
    payment_method: str,
) -> None:
    """Place an order: reserve stock, price, persist and clear the cart."""
    if bool(items) == from_cart:
        raise click.UsageError("Pass exactly one of --items or --from-cart.")

    principal = principal_from(user_id, email, name, admin)
    shipping = {
        "fullName": full_name,
        "address": address,
        "city": city,
        "state": state,
        "zipCode": zip_code,
        "country": country,
    }
    specs = parse_items(items) if items else None

    async def _checkout(c: Container) -> OrderView:
        line_items = specs
        if line_items is None:
            cart = await c.show_cart().handle(principal)
            line_items = [
                LineItemRequest(line.product.id, line.quantity) for line in cart.items
            ]
        return await c.checkout().handle(principal, shipping, payment_method, line_items)

    dto = run(_checkout)
    click.echo("Order placed.")
    _display_order(dto)


@click.command("show")
@identity_options
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(user_id: str, email: str, name: str, admin: bool, order_id: str) -> None:
    """Show details of an existing order."""
    principal = principal_from(user_id, email, name, admin)
    dto = run(lambda c: c.show_order().handle(principal, order_id))
    _display_order(dto)


@click.command("list")
@identity_options
def order_list(user_id: str, email: str, name: str, admin: bool) -> None:
    """List your orders, newest first."""
    principal = principal_from(user_id, email, name, admin)
    summaries = run(lambda c: c.list_orders().handle(principal))

    if not summaries:
        click.echo("No orders found.")
        return

    click.echo(f"{'Order':<26} {'Status':<18} {'Items':>5} {'Total':>10}  Created")
    click.echo("-" * 80)
    for s in summaries:
        count = sum(i.quantity for i in s.items)
        click.echo(
            f"{s.order_id:<26} {s.status:<18} {count:>5} "
            f"{'$' + format(s.total, '.2f'):>10}  {s.created_at.strftime('%Y-%m-%d %H:%M')}"
        )


@click.command("status")
@identity_options
@click.option("--id", "order_id", required=True, help="Order ID.")
def order_status(user_id: str, email: str, name: str, admin: bool, order_id: str) -> None:
    """Show an order's status history."""
    principal = principal_from(user_id, email, name, admin)
    dto = run(lambda c: c.order_status().handle(principal, order_id))

    click.echo(f"Order {dto.order_id}  (status={dto.current_status}, total=${dto.total:.2f})")
    for entry in dto.history:
        click.echo(
            f"  {entry.timestamp.strftime('%Y-%m-%d %H:%M:%S')}  {entry.status:<18} {entry.note}"
        )


@click.command("update-status")
@identity_options
@click.option("--id", "order_id", required=True, help="Order ID.")
@click.option("--status", "new_status", required=True, help="New status.")
@click.option("--note", default=None, help="Note for the status history.")
def order_update_status(
    user_id: str,
    email: str,
    name: str,
    admin: bool,
    order_id: str,
    new_status: str,
    note: str | None,
) -> None:
    """Change an order's status (administrators only)."""
    principal = principal_from(user_id, email, name, admin)
    change = run(
        lambda c: c.update_order_status().handle(principal, order_id, new_status, note)
    )
    click.echo(
        f"Order {change.order_id} status updated: "
        f"{change.previous_status} -> {change.new_status}"
    )

import click

from shopcore.domain.exceptions import ConfigurationError
from shopcore.infrastructure.cli.cart_commands import cart_show, cart_sync
from shopcore.infrastructure.cli.order_commands import (
    order_checkout,
    order_list,
    order_show,
    order_status,
    order_update_status,
)
from shopcore.infrastructure.cli.product_commands import product_add, product_list
from shopcore.infrastructure.cli.runtime import run
from shopcore.infrastructure.config import Settings, configure_logging


@click.group()
def cli() -> None:
    """shop — storefront order processing"""
    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        raise click.ClickException(str(exc))
    configure_logging(settings.log_level)


@cli.command("init-db")
def init_db() -> None:
    """Create the database schema."""

    async def _create(container) -> None:
        await container.database.create_all()

    run(_create)
    click.echo("Database initialised.")


@cli.group()
def order() -> None:
    """Place and manage orders."""


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def cart() -> None:
    """Manage the stored cart."""


# Register subcommands
order.add_command(order_checkout)
order.add_command(order_list)
order.add_command(order_show)
order.add_command(order_status)
order.add_command(order_update_status)
product.add_command(product_add)
product.add_command(product_list)
cart.add_command(cart_show)
cart.add_command(cart_sync)

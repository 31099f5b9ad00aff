"""Helpers shared by the CLI commands: event loop, identity, item parsing."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

import click

from shopcore.application.dto import LineItemRequest
from shopcore.domain.exceptions import DomainException
from shopcore.domain.model.principal import Principal
from shopcore.infrastructure.bootstrap import Container, build_container

T = TypeVar("T")


def run(work: Callable[[Container], Awaitable[T]]) -> T:
    """Run one use case on a fresh container and map domain errors."""

    async def _main() -> T:
        container = build_container()
        try:
            return await work(container)
        finally:
            await container.aclose()

    try:
        return asyncio.run(_main())
    except DomainException as exc:
        raise click.ClickException(f"[{exc.kind}] {exc}")


def identity_options(func):
    """Add --user/--email/--name/--admin and pass a ``principal`` kwarg."""
    func = click.option("--admin", is_flag=True, default=False, help="Act as an administrator.")(func)
    func = click.option("--name", default="", help="Display name of the caller.")(func)
    func = click.option("--email", default="", help="E-mail of the caller.")(func)
    func = click.option("--user", "user_id", required=True, help="Verified user id of the caller.")(func)
    return func


def principal_from(user_id: str, email: str, name: str, admin: bool) -> Principal:
    return Principal(user_id=user_id, email=email, name=name, is_admin=admin)


def parse_items(raw: str) -> list[LineItemRequest]:
    """Parse 'p-1:3,p-2:5' into a LineItemRequest list."""
    specs: list[LineItemRequest] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(LineItemRequest(product_id=product_id.strip(), quantity=qty))
    return specs

"""Application services: Sync Cart and Show Cart.

The client holds the authoritative cart while browsing; syncing simply
replaces the persisted copy.  Checkout clears it.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from shopcore.application.dto import CartDTO, CartLineDTO, LineItemRequest, ProductDTO
from shopcore.domain.exceptions import EntityNotFoundError, ValidationError
from shopcore.domain.model.cart import CartItem
from shopcore.domain.model.principal import Principal, require_principal
from shopcore.domain.model.value_objects import Money, Quantity
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.pricing import PricedLine, PricingEngine

logger = logging.getLogger(__name__)


class SyncCartHandler:

    def __init__(
        self, uow_factory: Callable[[], UnitOfWork], pricing: PricingEngine
    ) -> None:
        self._uow_factory = uow_factory
        self._pricing = pricing

    async def handle(
        self, principal: Principal | None, items: list[LineItemRequest]
    ) -> CartDTO:
        """Replace the user's cart.

        Lines with a quantity of zero or less are dropped, repeated
        products are merged, and unknown products are rejected.
        """
        principal = require_principal(principal)

        merged: dict[str, int] = {}
        for item in items:
            if not isinstance(item.quantity, int) or isinstance(item.quantity, bool):
                raise ValidationError(
                    f"Quantity for {item.product_id} must be an integer, got {item.quantity!r}"
                )
            if item.quantity <= 0:
                continue
            merged[item.product_id] = merged.get(item.product_id, 0) + item.quantity

        async with self._uow_factory() as uow:
            for product_id in merged:
                if await uow.products.get_by_id(product_id) is None:
                    raise EntityNotFoundError(f"Product {product_id} not found")
            await uow.carts.replace(
                principal.user_id,
                [
                    CartItem(principal.user_id, product_id, Quantity(qty))
                    for product_id, qty in merged.items()
                ],
            )
            await uow.commit()

        logger.info("Cart synced for user %s: %d items", principal.user_id, len(merged))
        return await ShowCartHandler(self._uow_factory, self._pricing).handle(principal)


class ShowCartHandler:

    def __init__(
        self, uow_factory: Callable[[], UnitOfWork], pricing: PricingEngine
    ) -> None:
        self._uow_factory = uow_factory
        self._pricing = pricing

    async def handle(self, principal: Principal | None) -> CartDTO:
        principal = require_principal(principal)
        lines: list[CartLineDTO] = []
        async with self._uow_factory() as uow:
            for item in await uow.carts.list_for_user(principal.user_id):
                product = await uow.products.get_by_id(item.product_id)
                if product is None:
                    # delisted since it was added to the cart
                    continue
                lines.append(CartLineDTO(ProductDTO.from_product(product), item.quantity.value))

        totals = self._pricing.preview(
            [PricedLine(Money(line.product.price), Quantity(line.quantity)) for line in lines]
        )
        if totals is None:
            return CartDTO(items=tuple(lines))

        gap = self._pricing.to_free_shipping(totals.subtotal)
        return CartDTO(
            items=tuple(lines),
            subtotal=totals.subtotal.amount,
            shipping=totals.shipping.amount,
            tax=totals.tax.amount,
            total=totals.total.amount,
            to_free_shipping=gap.amount if gap is not None else None,
        )

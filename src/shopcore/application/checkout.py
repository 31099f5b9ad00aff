"""Application service: Checkout use case.

Turns a cart of line items into a placed order.  Every write happens
inside one unit of work, in this order:

1. reserve stock for each line (sequentially, atomic per product),
2. price the order from the reserved unit prices,
3. persist the order aggregate (order + items + initial status),
4. clear the customer's cart,

and only then commit.  If any step fails, or the caller goes away
before the commit, the transaction rolls back and no reservation,
order or cart change is visible.  The confirmation e-mail is sent
after the commit and never affects the result.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from shopcore.application.dto import LineItemRequest, OrderView
from shopcore.application.notifications import DetachedDispatcher, OrderEmail
from shopcore.domain.exceptions import EmptyOrderError, ValidationError
from shopcore.domain.model.order import Order, OrderItem
from shopcore.domain.model.principal import Principal, require_principal
from shopcore.domain.model.value_objects import Quantity, ShippingAddress
from shopcore.domain.repository.inventory_ledger import Reservation
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.domain.service.pricing import PricedLine, PricingEngine

logger = logging.getLogger(__name__)


class CheckoutHandler:

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        pricing: PricingEngine,
        dispatcher: DetachedDispatcher,
    ) -> None:
        self._uow_factory = uow_factory
        self._pricing = pricing
        self._dispatcher = dispatcher

    async def handle(
        self,
        principal: Principal | None,
        shipping_address: ShippingAddress | dict | None,
        payment_method: str | None,
        line_items: list[LineItemRequest],
    ) -> OrderView:
        principal = require_principal(principal)
        if not line_items:
            raise EmptyOrderError("Order must contain at least one item")

        # Reject malformed input before touching storage.
        address = (
            shipping_address
            if isinstance(shipping_address, ShippingAddress)
            else ShippingAddress.from_dict(shipping_address)
        )
        requested: list[tuple[str, Quantity]] = []
        for item in line_items:
            if not item.product_id:
                raise ValidationError("Every line item needs a product id")
            requested.append((item.product_id, Quantity(item.quantity)))

        async with self._uow_factory() as uow:
            reservations: list[Reservation] = []
            for product_id, quantity in requested:
                reservations.append(await uow.products.reserve(product_id, quantity))

            totals = self._pricing.price(
                [PricedLine(r.unit_price, r.quantity) for r in reservations]
            )
            order = Order.create(
                user_id=principal.user_id,
                items=[
                    OrderItem(
                        product_id=r.product_id,
                        product_name=r.product_name,
                        quantity=r.quantity,
                        unit_price=r.unit_price,  # <-- price snapshot
                    )
                    for r in reservations
                ],
                subtotal=totals.subtotal,
                shipping=totals.shipping,
                tax=totals.tax,
                total=totals.total,
                shipping_address=address,
                payment_method=payment_method,
                customer_email=principal.email,
                customer_name=principal.name,
            )
            await uow.orders.add(order)
            await uow.carts.clear(principal.user_id)
            await uow.commit()

        logger.info("Order created: %s for user %s", order.order_id, principal.user_id)
        self._dispatcher.dispatch(OrderEmail.confirmation(order))
        return OrderView.from_order(order)

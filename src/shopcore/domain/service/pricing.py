"""Domain service: Pricing Engine.

Pure and deterministic.  Checkout and cart previews both call it, so
the numbers a customer sees before paying are the numbers they are
charged.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shopcore.domain.exceptions import EmptyOrderError
from shopcore.domain.model.value_objects import CENT, Money, Quantity

FREE_SHIPPING_THRESHOLD = Money(Decimal("50.00"))  # strictly above
FLAT_SHIPPING_FEE = Money(Decimal("5.99"))
TAX_RATE = Decimal("0.08")


@dataclass(frozen=True)
class PricedLine:
    """Input: one line at its reserved unit price."""

    unit_price: Money
    quantity: Quantity


@dataclass(frozen=True)
class OrderTotals:

    subtotal: Money
    shipping: Money
    tax: Money
    total: Money

    @property
    def free_shipping(self) -> bool:
        return self.shipping.amount == 0


class PricingEngine:

    def __init__(
        self,
        free_shipping_threshold: Money = FREE_SHIPPING_THRESHOLD,
        flat_shipping_fee: Money = FLAT_SHIPPING_FEE,
        tax_rate: Decimal = TAX_RATE,
    ) -> None:
        self._threshold = free_shipping_threshold
        self._flat_fee = flat_shipping_fee
        self._tax_rate = tax_rate

    @property
    def free_shipping_threshold(self) -> Money:
        return self._threshold

    def price(self, lines: list[PricedLine]) -> OrderTotals:
        """Compute subtotal, shipping, tax and total, all to the cent.

        Shipping is free only when the subtotal is *strictly* greater
        than the threshold.
        """
        if not lines:
            raise EmptyOrderError("Order must contain at least one item")

        subtotal = Money.zero()
        for line in lines:
            subtotal = subtotal + line.unit_price * line.quantity.value
        subtotal = subtotal.rounded()

        shipping = Money.zero() if subtotal > self._threshold else self._flat_fee
        tax = subtotal.scaled(self._tax_rate)
        total = (subtotal + shipping + tax).rounded()
        return OrderTotals(subtotal=subtotal, shipping=shipping, tax=tax, total=total)

    def to_free_shipping(self, subtotal: Money) -> Money | None:
        """How much more the customer must spend to ship free.

        None once shipping is already free.  At the threshold itself the
        answer is one cent, since only a larger subtotal qualifies.
        """
        if subtotal > self._threshold:
            return None
        return Money(self._threshold.amount - subtotal.amount + CENT, subtotal.currency)

    def preview(self, lines: list[PricedLine]) -> OrderTotals | None:
        """Cart-page preview; an empty cart has no totals rather than an error."""
        if not lines:
            return None
        return self.price(lines)

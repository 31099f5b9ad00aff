"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the outer adapters (CLI, HTTP) and the
application layer without exposing domain internals.  ``to_dict()``
produces the camelCase shape clients consume.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from shopcore.domain.model.order import Order, StatusLogEntry
from shopcore.domain.model.product import Product


@dataclass(frozen=True)
class LineItemRequest:
    """Input: what the customer asked for (product id + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class OrderItemView:
    """Output: a single purchased line at its snapshot price."""

    product_id: str
    name: str
    quantity: int
    price: Decimal

    def to_dict(self) -> dict:
        return {"name": self.name, "quantity": self.quantity, "price": float(self.price)}


@dataclass(frozen=True)
class OrderView:
    """Output: the public projection of an order."""

    order_id: str
    status: str
    total: Decimal
    created_at: datetime
    items: tuple[OrderItemView, ...]

    @staticmethod
    def from_order(order: Order) -> OrderView:
        return OrderView(
            order_id=str(order.order_id),
            status=order.status.value,
            total=order.total.amount,
            created_at=order.created_at,
            items=_item_views(order),
        )

    def to_dict(self) -> dict:
        return {
            "orderId": self.order_id,
            "status": self.status,
            "total": float(self.total),
            "createdAt": self.created_at.isoformat(),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class OrderSummaryDTO:
    """Output: one entry of the customer's order history."""

    order_id: str
    status: str
    subtotal: Decimal
    shipping: Decimal
    tax: Decimal
    total: Decimal
    shipping_address: dict
    payment_method: str
    created_at: datetime
    updated_at: datetime
    items: tuple[OrderItemView, ...]

    @staticmethod
    def from_order(order: Order) -> OrderSummaryDTO:
        return OrderSummaryDTO(
            order_id=str(order.order_id),
            status=order.status.value,
            subtotal=order.subtotal.amount,
            shipping=order.shipping.amount,
            tax=order.tax.amount,
            total=order.total.amount,
            shipping_address=order.shipping_address.to_dict(),
            payment_method=order.payment_method,
            created_at=order.created_at,
            updated_at=order.updated_at,
            items=_item_views(order),
        )

    def to_dict(self) -> dict:
        return {
            "orderId": self.order_id,
            "status": self.status,
            "subtotal": float(self.subtotal),
            "shipping": float(self.shipping),
            "tax": float(self.tax),
            "total": float(self.total),
            "shippingAddress": dict(self.shipping_address),
            "paymentMethod": self.payment_method,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "items": [
                {"productId": item.product_id, **item.to_dict()} for item in self.items
            ],
        }


@dataclass(frozen=True)
class StatusHistoryEntryDTO:

    status: str
    note: str
    timestamp: datetime

    @staticmethod
    def from_entry(entry: StatusLogEntry) -> StatusHistoryEntryDTO:
        return StatusHistoryEntryDTO(
            status=entry.status.value, note=entry.note, timestamp=entry.created_at
        )


@dataclass(frozen=True)
class OrderStatusDTO:
    """Output: current status plus the full status history (oldest first)."""

    order_id: str
    current_status: str
    total: Decimal
    created_at: datetime
    updated_at: datetime
    history: tuple[StatusHistoryEntryDTO, ...]

    def to_dict(self) -> dict:
        return {
            "orderId": self.order_id,
            "currentStatus": self.current_status,
            "total": float(self.total),
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "statusHistory": [
                {
                    "status": h.status,
                    "note": h.note,
                    "timestamp": h.timestamp.isoformat(),
                }
                for h in self.history
            ],
        }


@dataclass(frozen=True)
class StatusChangeDTO:

    order_id: str
    previous_status: str
    new_status: str

    def to_dict(self) -> dict:
        return {
            "orderId": self.order_id,
            "previousStatus": self.previous_status,
            "newStatus": self.new_status,
        }


@dataclass(frozen=True)
class ProductDTO:

    id: str
    name: str
    price: Decimal
    stock: int
    image_url: str | None

    @staticmethod
    def from_product(product: Product) -> ProductDTO:
        return ProductDTO(
            id=product.id,
            name=product.name,
            price=product.price.amount,
            stock=product.stock,
            image_url=product.image_url,
        )


@dataclass(frozen=True)
class CartLineDTO:

    product: ProductDTO
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity


@dataclass(frozen=True)
class CartDTO:
    """Output: a user's cart with a non-binding price preview."""

    items: tuple[CartLineDTO, ...]
    subtotal: Decimal | None = None
    shipping: Decimal | None = None
    tax: Decimal | None = None
    total: Decimal | None = None
    to_free_shipping: Decimal | None = None

    @property
    def is_empty(self) -> bool:
        return not self.items


def _item_views(order: Order) -> tuple[OrderItemView, ...]:
    return tuple(
        OrderItemView(
            product_id=item.product_id,
            name=item.product_name,
            quantity=item.quantity.value,
            price=item.unit_price.amount,
        )
        for item in order.items
    )

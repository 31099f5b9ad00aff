"""Unit tests for the Order aggregate."""

from datetime import timedelta

import pytest

from shopcore.domain.exceptions import EmptyOrderError, InvalidStatusError, ValidationError
from shopcore.domain.model.order import Order, OrderItem, OrderStatus
from shopcore.domain.model.value_objects import Money, Quantity, ShippingAddress

ADDRESS = ShippingAddress("Ada Lovelace", "12 Analytical St", "London", "LDN", "N1")


def _items() -> list[OrderItem]:
    return [
        OrderItem("p-1", "Widget", Quantity(2), Money.of("15.00")),
        OrderItem("p-2", "Gadget", Quantity(1), Money.of("25.00")),
    ]


def _create(**overrides) -> Order:
    kwargs = dict(
        user_id="u-1",
        items=_items(),
        subtotal=Money.of("55.00"),
        shipping=Money.of("0.00"),
        tax=Money.of("4.40"),
        total=Money.of("59.40"),
        shipping_address=ADDRESS,
    )
    kwargs.update(overrides)
    return Order.create(**kwargs)


class TestOrderCreate:

    def test_new_order_is_pending_with_one_log_entry(self):
        order = _create()
        assert order.status == OrderStatus.PENDING
        assert len(order.status_log) == 1
        assert order.status_log[0].status == OrderStatus.PENDING
        assert order.status_log[0].note == "Order placed successfully"

    def test_defaults(self):
        order = _create()
        assert order.payment_method == "card"
        assert order.customer_name == "Ada Lovelace"
        assert order.item_count == 3
        assert str(order.order_id).startswith("ORD-")

    def test_empty_items_rejected(self):
        with pytest.raises(EmptyOrderError):
            _create(items=[])

    def test_subtotal_must_match_items(self):
        with pytest.raises(ValidationError, match="does not match line items"):
            _create(subtotal=Money.of("50.00"), total=Money.of("54.40"))

    def test_total_must_be_sum_of_parts(self):
        with pytest.raises(ValidationError, match="does not equal"):
            _create(total=Money.of("60.00"))


class TestOrderStatus:

    def test_parse_unknown_status(self):
        with pytest.raises(InvalidStatusError, match="Must be one of"):
            OrderStatus.parse("lost_at_sea")

    def test_terminal_states(self):
        assert OrderStatus.DELIVERED.is_terminal
        assert OrderStatus.CANCELLED.is_terminal
        assert not OrderStatus.SHIPPED.is_terminal

    def test_record_status_updates_order_and_log(self):
        order = _create()
        entry = order.record_status(OrderStatus.CONFIRMED, "ok")
        assert order.status == OrderStatus.CONFIRMED
        assert order.updated_at == entry.created_at
        assert order.status_log[-1] is entry

    def test_log_timestamps_never_go_backwards(self):
        order = _create()
        earlier = order.created_at - timedelta(minutes=5)
        entry = order.record_status(OrderStatus.CONFIRMED, "clock skew", at=earlier)
        assert entry.created_at == order.status_log[0].created_at

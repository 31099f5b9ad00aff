"""Cart items — a user's mutable basket until checkout clears it."""

from __future__ import annotations

from dataclasses import dataclass

from shopcore.domain.model.value_objects import Quantity


@dataclass(frozen=True)
class CartItem:

    user_id: str
    product_id: str
    quantity: Quantity

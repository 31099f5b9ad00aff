"""Abstract repository for persisted cart items."""

from __future__ import annotations

from abc import ABC, abstractmethod

from shopcore.domain.model.cart import CartItem


class CartRepository(ABC):

    @abstractmethod
    async def list_for_user(self, user_id: str) -> list[CartItem]:
        """Return the user's cart items."""

    @abstractmethod
    async def replace(self, user_id: str, items: list[CartItem]) -> None:
        """Replace the user's whole cart with *items*."""

    @abstractmethod
    async def clear(self, user_id: str) -> int:
        """Delete every cart item owned by the user; return how many."""

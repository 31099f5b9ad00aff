"""Application services: catalog administration (add / list products).

Checkout never writes products through here; stock only moves through
the inventory ledger's reserve.
"""

from __future__ import annotations

from collections.abc import Callable
from uuid import uuid4

from shopcore.application.dto import ProductDTO
from shopcore.domain.exceptions import ValidationError
from shopcore.domain.model.product import Product
from shopcore.domain.model.value_objects import Money
from shopcore.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def handle(
        self,
        name: str,
        price: str,
        stock: int,
        image_url: str | None = None,
        product_id: str | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog."""
        async with self._uow_factory() as uow:
            existing = await uow.products.list_all()
            if any(p.name.lower() == (name or "").strip().lower() for p in existing):
                raise ValidationError(f"Product '{name}' already exists")
            if product_id and any(p.id == product_id for p in existing):
                raise ValidationError(f"Product id '{product_id}' already exists")

            product = Product.create(
                id=product_id or str(uuid4()),
                name=name,
                price=Money.of(price),
                stock=stock,
                image_url=image_url,
            )
            await uow.products.save(product)
            await uow.commit()
        return ProductDTO.from_product(product)


class ListProductsHandler:

    def __init__(self, uow_factory: Callable[[], UnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def handle(self) -> list[ProductDTO]:
        async with self._uow_factory() as uow:
            products = await uow.products.list_all()
        return [ProductDTO.from_product(p) for p in products]

"""
Alpha Tower Backend — Product Services
========================================

What:  One class per product use case (create, list, show, update, delete).
How:   Each service receives a `ProductsRepository` and runs a single
       lookup → check → mutate → persist sequence in `execute()`.
Who:   Instantiated per request by the /products route handlers; unit tests
       build them over `InMemoryProductsRepository`.

Invariant:
    No two live products share a name. The services check first; the store
    constraint rejects concurrent duplicates that both passed the check.
"""

import logging
import uuid
from decimal import Decimal
from typing import List, Optional

from alpha_tower.exceptions import ConflictError, NotFoundError
from alpha_tower.models.product import Product
from alpha_tower.repositories.products import PRODUCT_NAME_CONFLICT, ProductsRepository

logger = logging.getLogger(__name__)

PRODUCT_NOT_FOUND = "Product not found."


async def find_product_or_raise(repository: ProductsRepository, product_id: uuid.UUID) -> Product:
    product = await repository.find_one(product_id)
    if product is None:
        raise NotFoundError(PRODUCT_NOT_FOUND, resource_id=str(product_id))
    return product


class CreateProductService:
    def __init__(self, repository: ProductsRepository):
        self.repository = repository

    async def execute(
        self,
        name: str,
        price: Decimal,
        quantity: int,
        description: Optional[str] = None,
    ) -> Product:
        """
        Persist a new product.

        Raises:
            ConflictError: a product with this name already exists
        """
        if await self.repository.find_by_name(name) is not None:
            logger.info("Rejected product create: name %r already used", name)
            raise ConflictError(PRODUCT_NAME_CONFLICT, context={"field": "name"})

        product = self.repository.create(
            name=name,
            description=description,
            price=price,
            quantity=quantity,
        )
        await self.repository.save(product)

        logger.info("Product created: %s (%s)", product.id, name)
        return product


class ListProductService:
    def __init__(self, repository: ProductsRepository):
        self.repository = repository

    async def execute(self) -> List[Product]:
        return await self.repository.find()


class ShowProductService:
    def __init__(self, repository: ProductsRepository):
        self.repository = repository

    async def execute(self, product_id: uuid.UUID) -> Product:
        return await find_product_or_raise(self.repository, product_id)


class UpdateProductService:
    """
    Overwrites name, description, price and quantity of an existing product.

    Full overwrite: `description=None` clears the stored description.
    Keeping the product's own current name is not a conflict.
    """

    def __init__(self, repository: ProductsRepository):
        self.repository = repository

    async def execute(
        self,
        product_id: uuid.UUID,
        name: str,
        price: Decimal,
        quantity: int,
        description: Optional[str] = None,
    ) -> Product:
        product = await find_product_or_raise(self.repository, product_id)

        owner = await self.repository.find_by_name(name)
        if owner is not None and owner.id != product.id:
            logger.info("Rejected product update %s: name %r owned by %s", product_id, name, owner.id)
            raise ConflictError(PRODUCT_NAME_CONFLICT, context={"field": "name"})

        product.name = name
        product.description = description
        product.price = price
        product.quantity = quantity

        await self.repository.save(product)

        logger.info("Product updated: %s", product.id)
        return product


class DeleteProductService:
    def __init__(self, repository: ProductsRepository):
        self.repository = repository

    async def execute(self, product_id: uuid.UUID) -> None:
        product = await find_product_or_raise(self.repository, product_id)
        await self.repository.remove(product)
        logger.info("Product deleted: %s", product_id)

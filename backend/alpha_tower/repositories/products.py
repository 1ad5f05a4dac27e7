"""Product repositories: contract plus in-memory and SQLAlchemy variants."""

from abc import abstractmethod
from typing import Optional

from alpha_tower.models.product import Product
from alpha_tower.repositories.base import (
    InMemoryRepository,
    Repository,
    SqlAlchemyRepository,
)

PRODUCT_NAME_CONFLICT = "There is already one product with this name"


class ProductsRepository(Repository[Product]):
    """Adds the lookup CreateProductService/UpdateProductService need."""

    @abstractmethod
    async def find_by_name(self, name: str) -> Optional[Product]:
        ...


class InMemoryProductsRepository(InMemoryRepository[Product], ProductsRepository):
    model = Product
    unique_fields = ("name",)
    conflict_message = PRODUCT_NAME_CONFLICT

    async def find_by_name(self, name: str) -> Optional[Product]:
        return await self._find_by("name", name)


class SqlAlchemyProductsRepository(SqlAlchemyRepository[Product], ProductsRepository):
    model = Product
    conflict_message = PRODUCT_NAME_CONFLICT

    async def find_by_name(self, name: str) -> Optional[Product]:
        return await self._find_by(Product.name, name)

"""
Alpha Tower Backend — Repositories
====================================

Per-entity data access. Each entity has an abstract contract and two
variants: in-memory (unit tests) and SQLAlchemy (the running service).
"""

from alpha_tower.repositories.products import (
    InMemoryProductsRepository,
    ProductsRepository,
    SqlAlchemyProductsRepository,
)
from alpha_tower.repositories.users import (
    InMemoryUsersRepository,
    SqlAlchemyUsersRepository,
    UsersRepository,
)

__all__ = [
    "ProductsRepository",
    "InMemoryProductsRepository",
    "SqlAlchemyProductsRepository",
    "UsersRepository",
    "InMemoryUsersRepository",
    "SqlAlchemyUsersRepository",
]

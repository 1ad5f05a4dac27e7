"""
Alpha Tower Backend — ORM Models
==================================

What:  Mapped records for the `products` and `users` tables.
Why:   Importing this package registers both tables on `Base.metadata`,
       which `Database.create_all()` and Alembic rely on.
"""

from alpha_tower.models.product import Product
from alpha_tower.models.user import User

__all__ = ["Product", "User"]

"""
Alpha Tower Backend — Product Model
=====================================

What:  ORM mapping of the `products` table.
Who:   Stored and returned by the product repositories; serialized by
       `ProductResponse`.

Table Design:
    - UUID primary key generated in Python, so the id is known before flush
    - name carries a UNIQUE constraint; the service checks first, the
      constraint catches concurrent creates that both passed the check
    - price NUMERIC(10, 2); quantity non-negative (CHECK constraint)
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, Integer, Numeric, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from alpha_tower.database import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Product(Base):
    """
    A product for sale. Passive record: no behavior beyond its columns.

    Lifecycle:
        1. Created by CreateProductService after a name-uniqueness check
        2. Overwritten in place by UpdateProductService (all four fields)
        3. Removed by DeleteProductService
    """

    __tablename__ = "products"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True),
        primary_key=True,
        default=uuid.uuid4,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True, default=None)

    price: Mapped[Decimal] = mapped_column(Numeric(10, 2, asdecimal=True), nullable=False)

    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Python-side defaults only: server-generated values would be expired
    # after flush and need a refresh round-trip to read.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_products_quantity_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', quantity={self.quantity})>"

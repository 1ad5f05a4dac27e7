"""
Alpha Tower Backend — Product Schemas
=======================================

What:  Request body and response models for /products.
How:   The same body model serves create and update: update overwrites all
       four fields, so an omitted `description` becomes null.
"""

import uuid
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_serializer, field_validator

CENT = Decimal("0.01")
MAX_PRICE = Decimal("100000000")


class ProductBody(BaseModel):
    """Validated body of POST /products and PUT /products/{id}."""

    name: str = Field(min_length=1, max_length=255, description="Unique product name")
    description: Optional[str] = Field(default=None, description="Free-text description")
    price: Decimal = Field(ge=0, description="Unit price, rounded to 2 places")
    quantity: int = Field(ge=0, description="Units in stock")

    @field_validator("price")
    @classmethod
    def round_price(cls, v: Decimal) -> Decimal:
        """
        Rounds to cents; the column is NUMERIC(10, 2).

        Float noise such as 0.30000000000000004 is accepted and rounded.
        The bound is checked before and after rounding: quantize() cannot
        represent huge values, and 99999999.995 rounds up past the column.
        """
        if v >= MAX_PRICE:
            raise ValueError(f"price must be less than {MAX_PRICE}")
        rounded = v.quantize(CENT, rounding=ROUND_HALF_UP)
        if rounded >= MAX_PRICE:
            raise ValueError(f"price must be less than {MAX_PRICE}")
        return rounded


class ProductResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    quantity: int
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}

    @field_serializer("price")
    def serialize_price(self, price: Decimal) -> float:
        return float(price)

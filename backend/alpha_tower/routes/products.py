"""
Alpha Tower Backend — Product Routes
======================================

What:  /products CRUD. Every route requires a valid access token.
How:   Path ids are parsed as UUIDs and bodies as `ProductBody` before the
       handler runs; handlers call exactly one service and pick the status.
"""

import logging
import uuid
from typing import List

from fastapi import APIRouter, Depends, Response, status

from alpha_tower.dependencies import get_current_user_id, get_products_repository
from alpha_tower.repositories import ProductsRepository
from alpha_tower.schemas.common import ErrorResponse
from alpha_tower.schemas.product import ProductBody, ProductResponse
from alpha_tower.services.product_service import (
    CreateProductService,
    DeleteProductService,
    ListProductService,
    ShowProductService,
    UpdateProductService,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/products",
    tags=["Products"],
    dependencies=[Depends(get_current_user_id)],
    responses={
        400: {"description": "Invalid input", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
    },
)


@router.get("", response_model=List[ProductResponse], summary="List products")
async def index(
    repository: ProductsRepository = Depends(get_products_repository),
) -> List[ProductResponse]:
    products = await ListProductService(repository).execute()
    return [ProductResponse.model_validate(product) for product in products]


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    responses={404: {"description": "Product not found", "model": ErrorResponse}},
    summary="Show a product",
)
async def show(
    product_id: uuid.UUID,
    repository: ProductsRepository = Depends(get_products_repository),
) -> ProductResponse:
    product = await ShowProductService(repository).execute(product_id)
    return ProductResponse.model_validate(product)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ProductResponse,
    responses={409: {"description": "Name already used", "model": ErrorResponse}},
    summary="Create a product",
)
async def create(
    body: ProductBody,
    repository: ProductsRepository = Depends(get_products_repository),
) -> ProductResponse:
    product = await CreateProductService(repository).execute(
        name=body.name,
        description=body.description,
        price=body.price,
        quantity=body.quantity,
    )
    return ProductResponse.model_validate(product)


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    responses={
        404: {"description": "Product not found", "model": ErrorResponse},
        409: {"description": "Name already used by another product", "model": ErrorResponse},
    },
    summary="Overwrite a product",
)
async def update(
    product_id: uuid.UUID,
    body: ProductBody,
    repository: ProductsRepository = Depends(get_products_repository),
) -> ProductResponse:
    product = await UpdateProductService(repository).execute(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        quantity=body.quantity,
    )
    return ProductResponse.model_validate(product)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"description": "Product not found", "model": ErrorResponse}},
    summary="Delete a product",
)
async def delete(
    product_id: uuid.UUID,
    repository: ProductsRepository = Depends(get_products_repository),
) -> Response:
    await DeleteProductService(repository).execute(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Product API router.

Products have no persistence; each route answers with a plain-text message.
"""

from fastapi import Depends, status
from fastapi.responses import PlainTextResponse

from src.crud_api.api.http.deps import get_product_service
from src.crud_api.api.http.routing import Route, build_router
from src.crud_api.core.services import ProductService
from src.crud_api.entities.service.product import ProductCreate, ProductUpdate


def create_product(
    payload: ProductCreate,
    product_service: ProductService = Depends(get_product_service),
) -> str:
    return product_service.create(payload)


def list_products(
    product_service: ProductService = Depends(get_product_service),
) -> str:
    return product_service.find_all()


def get_product(
    product_id: int,
    product_service: ProductService = Depends(get_product_service),
) -> str:
    return product_service.find_one(product_id)


def update_product(
    product_id: int,
    payload: ProductUpdate | None = None,
    product_service: ProductService = Depends(get_product_service),
) -> str:
    return product_service.update(product_id, payload or ProductUpdate())


def delete_product(
    product_id: int,
    product_service: ProductService = Depends(get_product_service),
) -> str:
    return product_service.remove(product_id)


ROUTES = [
    Route("POST", "", create_product, status.HTTP_201_CREATED, response_class=PlainTextResponse),
    Route("GET", "", list_products, response_class=PlainTextResponse),
    Route("GET", "/{product_id}", get_product, response_class=PlainTextResponse),
    Route("PATCH", "/{product_id}", update_product, response_class=PlainTextResponse),
    Route("DELETE", "/{product_id}", delete_product, response_class=PlainTextResponse),
]

router = build_router(ROUTES)

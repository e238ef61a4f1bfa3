"""Product API router with CRUD operations.

Write endpoints follow the same lifecycle: validate the submitted body, hand
the product to the service, then map the store result to a status code.
Store faults are answered here and never escape as unhandled errors.
"""

import math
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, Path, Query
from loguru import logger
from starlette.responses import JSONResponse

from src.catalog.api.http.deps import get_product_service
from src.catalog.core.result import StoreFault
from src.catalog.core.services import ProductService
from src.catalog.entities._base import MAX_SQL_INTEGER
from src.catalog.entities.service.product import Product, validate_product
from src.catalog.runtime.context import get_config

router = APIRouter()


def _product_json(product: Product) -> dict[str, Any]:
    return product.model_dump(mode="json")


def _json_safe(value: Any) -> Any:
    """Replace NaN and infinities, which JSON cannot carry, by their names."""
    if isinstance(value, float) and not math.isfinite(value):
        if math.isnan(value):
            return "NaN"
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_json_safe(item) for item in value]
    return value


def _rejected(errors: list[str], payload: dict[str, Any]) -> JSONResponse:
    logger.bind(errors=errors).info("Rejected invalid product")
    return JSONResponse(
        status_code=400,
        content={"errors": errors, "product": _json_safe(payload)},
    )


def _not_found(product_id: int) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={"errorMessage": f"Product with id {product_id} not found"},
    )


def _store_failed(error: str, product: Product | None = None) -> JSONResponse:
    content: dict[str, Any] = {"error": error}
    if product is not None:
        content["product"] = _product_json(product)
    return JSONResponse(status_code=500, content=content)


@router.get("", response_model=list[Product])
def list_products(
    page: int | None = Query(default=None, ge=0, description="Zero-based page"),
    size: int | None = Query(default=None, ge=1, description="Items per page"),
    service: ProductService = Depends(get_product_service),
) -> list[Product]:
    """List products sorted by name, paginated when both page and size are set."""
    max_page_size = get_config().app.max_page_size
    # size alone does not paginate, so it is only bounded next to page
    if page is not None and size is not None and size > max_page_size:
        raise HTTPException(
            status_code=422, detail=f"size must not exceed {max_page_size}"
        )
    return service.list_products(page, size).unwrap()


@router.post("", status_code=201)
def create_product(
    payload: dict[str, Any] = Body(...),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    """Create a new product."""
    product, errors = validate_product(payload)
    if product is None:
        return _rejected(errors, payload)

    result = service.create_product(product)
    if isinstance(result, StoreFault):
        return _store_failed(
            "Error while creating the product; most likely cause: " + result.cause,
            product,
        )

    return JSONResponse(
        status_code=201,
        content={
            "message": "Product created successfully",
            "product": _product_json(result.value),
        },
    )


@router.put("/{product_id}")
def update_product(
    product_id: int = Path(ge=1, le=MAX_SQL_INTEGER),
    payload: dict[str, Any] = Body(...),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    """Update a product. The id in the path wins over any id in the body."""
    product, errors = validate_product(payload)
    if product is None:
        return _rejected(errors, payload)

    product = product.model_copy(update={"id": product_id})
    result = service.update_product(product_id, product)
    if isinstance(result, StoreFault):
        return _store_failed(
            "Error while updating the product; most likely cause: " + result.cause,
            product,
        )
    if result.value is None:
        return _not_found(product_id)

    return JSONResponse(
        status_code=200,
        content={
            "message": "Product updated successfully",
            "product": _product_json(result.value),
        },
    )


@router.get("/{product_id}")
def get_product(
    product_id: int = Path(ge=1, le=MAX_SQL_INTEGER),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    """Get a product by ID."""
    result = service.get_product(product_id)
    if isinstance(result, StoreFault):
        return _store_failed(
            f"Error while looking up product with id {product_id}; "
            f"most likely cause: {result.cause}"
        )
    if result.value is None:
        return _not_found(product_id)

    return JSONResponse(
        status_code=200,
        content={
            "message": f"Product with id {product_id} found",
            "product": _product_json(result.value),
        },
    )


@router.delete("/{product_id}")
def delete_product(
    product_id: int = Path(ge=1, le=MAX_SQL_INTEGER),
    service: ProductService = Depends(get_product_service),
) -> JSONResponse:
    """Delete a product."""
    result = service.delete_product(product_id)
    if isinstance(result, StoreFault):
        return _store_failed(
            f"Error while deleting product with id {product_id}; "
            f"most likely cause: {result.cause}"
        )
    if result.value is None:
        return _not_found(product_id)

    return JSONResponse(
        status_code=200,
        content={
            "message": f"Product with id {product_id} deleted",
            "product": _product_json(result.value),
        },
    )

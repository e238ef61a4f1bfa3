"""Product service: thin orchestration over the product repository."""

from __future__ import annotations

from loguru import logger

from src.catalog.core.result import Ok, StoreResult
from src.catalog.entities.service.product import AbstractProductRepository, Product
from src.catalog.entities.service.product.repository import DEFAULT_SORT


class ProductService:
    """Catalog operations used by the HTTP layer.

    The service adds no business rules of its own; it picks the repository
    call matching each request and passes the store result back unchanged.
    """

    def __init__(self, repository: AbstractProductRepository):
        self._repository = repository

    def list_products(
        self, page: int | None = None, size: int | None = None
    ) -> StoreResult[list[Product]]:
        """List products sorted by name.

        Pagination applies only when both ``page`` and ``size`` are given;
        otherwise the whole collection is returned.
        """
        if page is not None and size is not None:
            logger.debug("Listing products page={} size={}", page, size)
            return self._repository.list_page(page, size, DEFAULT_SORT)
        return self._repository.list_all(DEFAULT_SORT)

    def get_product(self, product_id: int) -> StoreResult[Product | None]:
        return self._repository.find_by_id(product_id)

    def create_product(self, product: Product) -> StoreResult[Product]:
        """Persist a new product; the store assigns its id."""
        return self._repository.save(product.model_copy(update={"id": None}))

    def update_product(
        self, product_id: int, product: Product
    ) -> StoreResult[Product | None]:
        """Overwrite the stored product ``product_id``.

        The path id wins over any id carried by ``product``. Returns
        ``Ok(None)`` when no such product exists; nothing is created then.
        """
        existing = self._repository.find_by_id(product_id)
        if not isinstance(existing, Ok) or existing.value is None:
            return existing
        return self._repository.save(product.model_copy(update={"id": product_id}))

    def delete_product(self, product_id: int) -> StoreResult[Product | None]:
        """Remove product ``product_id`` and return what was removed."""
        existing = self._repository.find_by_id(product_id)
        if not isinstance(existing, Ok) or existing.value is None:
            return existing
        deleted = self._repository.delete(existing.value)
        if not isinstance(deleted, Ok):
            return deleted
        return existing

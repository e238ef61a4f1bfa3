"""In-memory fake repository for testing.

Implements the same abstract interface as the SQLModel repository but keeps
everything in a dict. Operations named in ``fail_on`` return a StoreFault
instead of touching the dict, which is how tests simulate a broken store.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from src.catalog.core.result import Ok, StoreFault, StoreResult
from src.catalog.entities.service.product import AbstractProductRepository, Product
from src.catalog.entities.service.product.repository import DEFAULT_SORT


class InMemoryProductRepository(AbstractProductRepository):

    def __init__(
        self,
        products: Iterable[Product] = (),
        fail_on: Iterable[str] = (),
        cause: str = "connection refused",
    ) -> None:
        self._store: dict[int, Product] = {}
        self._next_id = 1
        self.fail_on = set(fail_on)
        self.cause = cause
        self.calls: list[str] = []
        for product in products:
            self._insert(product)

    def _insert(self, product: Product) -> Product:
        if product.id is None:
            product = product.model_copy(update={"id": self._next_id})
        self._next_id = max(self._next_id, product.id + 1)
        self._store[product.id] = product
        return product

    def _sorted(self, sort: Sequence[str]) -> list[Product]:
        return sorted(
            self._store.values(),
            key=lambda p: (*(getattr(p, field) for field in sort), p.id),
        )

    def _failed(self, operation: str) -> StoreFault | None:
        self.calls.append(operation)
        if operation in self.fail_on:
            return StoreFault(operation=operation, cause=self.cause)
        return None

    def list_all(self, sort: Sequence[str] = DEFAULT_SORT) -> StoreResult[list[Product]]:
        return self._failed("list_all") or Ok(self._sorted(sort))

    def list_page(
        self, page: int, size: int, sort: Sequence[str] = DEFAULT_SORT
    ) -> StoreResult[list[Product]]:
        start = page * size
        return self._failed("list_page") or Ok(self._sorted(sort)[start:start + size])

    def find_by_id(self, product_id: int) -> StoreResult[Product | None]:
        return self._failed("find_by_id") or Ok(self._store.get(product_id))

    def save(self, product: Product) -> StoreResult[Product]:
        return self._failed("save") or Ok(self._insert(product))

    def delete(self, product: Product) -> StoreResult[None]:
        fault = self._failed("delete")
        if fault:
            return fault
        self._store.pop(product.id, None)
        return Ok(None)

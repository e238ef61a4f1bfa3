"""Product repository for data access operations."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from src.catalog.core.result import Ok, StoreFault, StoreResult, most_specific_cause
from src.catalog.entities.service.product.entity import Product
from src.catalog.entities.service.product.table import ProductTable

DEFAULT_SORT: tuple[str, ...] = ("name",)
SORTABLE_FIELDS = frozenset({"id", "name", "price", "stock", "created_at"})


class AbstractProductRepository(ABC):
    """Persistence contract consumed by the product service.

    Every operation reports store failures as a ``StoreFault`` instead of
    raising.
    """

    @abstractmethod
    def list_all(self, sort: Sequence[str] = DEFAULT_SORT) -> StoreResult[list[Product]]:
        """Return every product ordered by ``sort`` then by id."""

    @abstractmethod
    def list_page(
        self, page: int, size: int, sort: Sequence[str] = DEFAULT_SORT
    ) -> StoreResult[list[Product]]:
        """Return items ``[page*size, page*size+size)`` of the sorted collection."""

    @abstractmethod
    def find_by_id(self, product_id: int) -> StoreResult[Product | None]:
        """Return the product with ``product_id`` or ``Ok(None)`` if absent."""

    @abstractmethod
    def save(self, product: Product) -> StoreResult[Product]:
        """Insert the product, or update it when its id is already stored."""

    @abstractmethod
    def delete(self, product: Product) -> StoreResult[None]:
        """Remove the stored record matching ``product.id``."""


def _order_by(sort: Sequence[str]) -> list:
    unknown = set(sort) - SORTABLE_FIELDS
    if unknown:
        raise ValueError(f"Cannot sort products by {sorted(unknown)}")
    columns = [getattr(ProductTable, field) for field in sort]
    if "id" not in sort:
        # Equal keys keep insertion order
        columns.append(ProductTable.id)
    return columns


class ProductRepository(AbstractProductRepository):
    """SQLModel-backed product repository."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def _fault(self, operation: str, exc: SQLAlchemyError) -> StoreFault:
        self._session.rollback()
        cause = most_specific_cause(exc)
        logger.bind(operation=operation, error_type=type(exc).__name__).error(
            "Product store operation {} failed: {}", operation, cause
        )
        return StoreFault(operation=operation, cause=cause)

    @staticmethod
    def _to_entity(row: ProductTable) -> Product:
        return Product.model_validate(row, from_attributes=True)

    def list_all(self, sort: Sequence[str] = DEFAULT_SORT) -> StoreResult[list[Product]]:
        statement = select(ProductTable).order_by(*_order_by(sort))
        try:
            rows = self._session.exec(statement).all()
        except SQLAlchemyError as exc:
            return self._fault("list_all", exc)
        return Ok([self._to_entity(row) for row in rows])

    def list_page(
        self, page: int, size: int, sort: Sequence[str] = DEFAULT_SORT
    ) -> StoreResult[list[Product]]:
        if page < 0 or size < 1:
            raise ValueError("page must be >= 0 and size must be >= 1")
        statement = (
            select(ProductTable)
            .order_by(*_order_by(sort))
            .offset(page * size)
            .limit(size)
        )
        try:
            rows = self._session.exec(statement).all()
        except SQLAlchemyError as exc:
            return self._fault("list_page", exc)
        return Ok([self._to_entity(row) for row in rows])

    def find_by_id(self, product_id: int) -> StoreResult[Product | None]:
        try:
            row = self._session.get(ProductTable, product_id)
        except SQLAlchemyError as exc:
            return self._fault("find_by_id", exc)
        if row is None:
            return Ok(None)
        return Ok(self._to_entity(row))

    def save(self, product: Product) -> StoreResult[Product]:
        data = product.model_dump(exclude={"id", "created_at", "updated_at"})
        try:
            row = None
            if product.id is not None:
                row = self._session.get(ProductTable, product.id)
            if row is None:
                row = ProductTable(id=product.id, **data)
                self._session.add(row)
            else:
                for key, value in data.items():
                    setattr(row, key, value)
            self._session.commit()
            self._session.refresh(row)
        except SQLAlchemyError as exc:
            return self._fault("save", exc)
        logger.info("Saved product {}", row.id)
        return Ok(self._to_entity(row))

    def delete(self, product: Product) -> StoreResult[None]:
        try:
            row = self._session.get(ProductTable, product.id)
            if row is None:
                return Ok(None)
            self._session.delete(row)
            self._session.commit()
        except SQLAlchemyError as exc:
            return self._fault("delete", exc)
        logger.info("Deleted product {}", product.id)
        return Ok(None)

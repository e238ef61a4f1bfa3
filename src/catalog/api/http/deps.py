"""FastAPI dependency implementations.

This module is the composition root: the session feeds the repository, the
repository feeds the service, and route handlers only ever see the service.
"""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.catalog.api.http.app_data import ApplicationDependencies
from src.catalog.core.services import DbSessionService, ProductService
from src.catalog.entities.service.product import (
    AbstractProductRepository,
    ProductRepository,
)


def get_database_service(request: Request) -> DbSessionService:
    """Get the database service instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.database_service


def get_db_session(
    database_service: DbSessionService = Depends(get_database_service),
) -> Iterator[Session]:
    """Yield a request-scoped database session and close it afterwards."""
    session = database_service.get_session()
    try:
        yield session
    finally:
        session.close()


def get_product_repository(
    db: Session = Depends(get_db_session),
) -> AbstractProductRepository:
    """Get the product repository bound to the request session."""
    return ProductRepository(db)


def get_product_service(
    repository: AbstractProductRepository = Depends(get_product_repository),
) -> ProductService:
    """Get the product service instance."""
    return ProductService(repository)

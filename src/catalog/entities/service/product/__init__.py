"""Entity package: Product."""

from .entity import Product, validate_product
from .repository import AbstractProductRepository, ProductRepository
from .table import ProductTable

__all__ = [
    "AbstractProductRepository",
    "Product",
    "ProductRepository",
    "ProductTable",
    "validate_product",
]

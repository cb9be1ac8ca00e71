"""
Storage contract shared by every stockroom backend.

Routes and services only talk to ``Repository``; which backend sits behind
it (in-memory or SQL) is decided once at wiring time by
``stockroom.repositories.build_repository``.
"""
from abc import ABC, abstractmethod
from typing import List

from stockroom.domain import Product, Stock


class ProductRepository(ABC):
    @abstractmethod
    def add_product(self, product: Product) -> str:
        """
        Validate and store a new product together with a zeroed stock row.
        Returns the identifier assigned by the backend.
        """

    @abstractmethod
    def get_product(self, product_id: str) -> Product:
        """Return the product, active or not. Raises ProductNotFound."""

    @abstractmethod
    def list_products(self) -> List[Product]:
        """All active products."""

    @abstractmethod
    def search_products(self, query: str) -> List[Product]:
        """
        Active products whose name or brand contains ``query``,
        case-insensitively. No match gives an empty list.
        """

    @abstractmethod
    def update_product(self, product: Product) -> None:
        """Validate and replace the stored product with the same id."""

    @abstractmethod
    def delete_product(self, product_id: str) -> None:
        """Soft delete: clear the active flag. Repeat deletes succeed."""


class StockRepository(ABC):
    @abstractmethod
    def get_stock(self, product_id: str) -> Stock:
        """Raises StockNotFound."""

    @abstractmethod
    def adjust_stock(self, product_id: str, boxes: int, units: int) -> Stock:
        """
        Apply a signed delta to both quantities and return the new stock.

        Raises InsufficientStock, leaving quantities untouched, when either
        quantity would go below zero.
        """

    @abstractmethod
    def set_min_stock(self, product_id: str, min_stock: int) -> None:
        """Overwrite the low-stock alert threshold."""

    @abstractmethod
    def list_low_stock(self) -> List[Product]:
        """Active products whose total units are below their threshold."""


class Repository(ProductRepository, StockRepository):
    def count(self) -> int:
        return len(self.list_products())

    def ping(self) -> bool:
        return True

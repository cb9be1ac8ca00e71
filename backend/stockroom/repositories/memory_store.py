"""
Process-local repository.

Everything lives in two dicts guarded by one reader/writer lock, so it is
safe to share between request threads. Data is gone when the process
exits; use it for tests and local development, not production.
"""
import logging
from dataclasses import replace
from typing import Dict, List

from stockroom.domain import Product, Stock, utcnow
from stockroom.errors import (
    InsufficientStock,
    InvalidThreshold,
    ProductNotFound,
    StockNotFound,
)
from stockroom.repositories.base import Repository
from stockroom.utils.rwlock import ReadWriteLock

log = logging.getLogger(__name__)


class MemoryStore(Repository):
    ID_FORMAT = "PROD-{:03d}"

    def __init__(self):
        self._products: Dict[str, Product] = {}
        self._stock: Dict[str, Stock] = {}
        self._next_id = 1
        self._lock = ReadWriteLock()

    def _gen_id(self) -> str:
        # caller holds the write lock
        pid = self.ID_FORMAT.format(self._next_id)
        self._next_id += 1
        return pid

    # --- products ---

    def add_product(self, product: Product) -> str:
        product.validate()
        with self._lock.write_locked():
            pid = self._gen_id()
            self._products[pid] = replace(product, id=pid, active=True)
            self._stock[pid] = Stock(product_id=pid)
        log.debug("added product %s (%s)", pid, product.name)
        return pid

    def get_product(self, product_id: str) -> Product:
        with self._lock.read_locked():
            p = self._products.get(product_id)
            if p is None:
                raise ProductNotFound(product_id)
            return replace(p)

    def list_products(self) -> List[Product]:
        with self._lock.read_locked():
            return [replace(p) for p in self._sorted() if p.active]

    def search_products(self, query: str) -> List[Product]:
        q = (query or "").lower()
        with self._lock.read_locked():
            return [
                replace(p)
                for p in self._sorted()
                if p.active and (q in p.name.lower() or q in p.brand.lower())
            ]

    def update_product(self, product: Product) -> None:
        product.validate()
        with self._lock.write_locked():
            if product.id not in self._products:
                raise ProductNotFound(product.id)
            self._products[product.id] = replace(product)
        log.debug("updated product %s", product.id)

    def delete_product(self, product_id: str) -> None:
        with self._lock.write_locked():
            p = self._products.get(product_id)
            if p is None:
                raise ProductNotFound(product_id)
            p.active = False
        log.debug("soft-deleted product %s", product_id)

    # --- stock ---

    def get_stock(self, product_id: str) -> Stock:
        with self._lock.read_locked():
            st = self._stock.get(product_id)
            if st is None:
                raise StockNotFound(product_id)
            return replace(st)

    def adjust_stock(self, product_id: str, boxes: int, units: int) -> Stock:
        with self._lock.write_locked():
            st = self._stock.get(product_id)
            if st is None:
                raise StockNotFound(product_id)
            new_boxes = st.quantity_boxes + boxes
            new_units = st.quantity_units + units
            if new_boxes < 0 or new_units < 0:
                log.warning(
                    "rejected adjust on %s by (%d, %d): would leave %d boxes, %d units",
                    product_id, boxes, units, new_boxes, new_units,
                )
                raise InsufficientStock(new_boxes, new_units)
            st.quantity_boxes = new_boxes
            st.quantity_units = new_units
            st.last_updated = utcnow()
            return replace(st)

    def set_min_stock(self, product_id: str, min_stock: int) -> None:
        if min_stock < 0:
            raise InvalidThreshold(min_stock)
        with self._lock.write_locked():
            st = self._stock.get(product_id)
            if st is None:
                raise StockNotFound(product_id)
            st.min_stock = min_stock

    def list_low_stock(self) -> List[Product]:
        with self._lock.read_locked():
            return [
                replace(p)
                for p in self._sorted()
                if p.active
                and p.id in self._stock
                and self._stock[p.id].is_low_stock(p.box_size)
            ]

    # --- utility ---

    def count(self) -> int:
        with self._lock.read_locked():
            return sum(1 for p in self._products.values() if p.active)

    def clear(self):
        """Drop all data and restart ids from 1."""
        with self._lock.write_locked():
            self._products = {}
            self._stock = {}
            self._next_id = 1

    def _sorted(self) -> List[Product]:
        # ids come from a counter and dicts keep insertion order, so this is id order
        # even past PROD-999, where string sorting would not be
        return list(self._products.values())

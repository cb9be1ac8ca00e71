"""
SQLAlchemy-backed repository over the ``products`` and ``stocks`` tables.

The tables are created by the bootstrap (``stockroom.db.init_db``), not here.
Each call opens its own short-lived session; writes that touch more than one
statement run inside a single transaction that is rolled back on any error.
"""
import hashlib
import logging
import os
import tempfile
from typing import List, Optional

from filelock import FileLock, Timeout
from sqlalchemy import func, or_, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from stockroom.domain import Product, Stock, utcnow
from stockroom.errors import (
    AlreadyExists,
    InsufficientStock,
    InvalidThreshold,
    ProductNotFound,
    StockNotFound,
    StorageUnavailable,
)
from stockroom.models.product import ProductRow
from stockroom.models.stock import StockRow
from stockroom.repositories.base import Repository
from stockroom.utils.transactions import smart_transaction, storage_errors

log = logging.getLogger(__name__)


def gen_id(p: Product) -> str:
    """Deterministic id from the natural key, e.g. ``COCACOLA-330-CAN``."""
    brand = p.brand.replace(" ", "").upper()
    return f"{brand}-{p.size}-{p.container_type.upper()}"


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqlStore(Repository):
    def __init__(
        self,
        session_factory: sessionmaker,
        lock_dir: Optional[str] = None,
        lock_timeout: float = 10,
    ):
        self.session_factory = session_factory
        self.lock_dir = lock_dir or os.path.join(tempfile.gettempdir(), "stockroom_locks")
        self.lock_timeout = lock_timeout
        os.makedirs(self.lock_dir, exist_ok=True)

    # --- mapping ---

    @staticmethod
    def _to_product(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            name=row.name,
            brand=row.brand,
            size=row.size,
            container_type=row.container_type,
            box_size=row.box_size,
            price=row.price,
            category=row.category,
            active=row.is_active,
        )

    @staticmethod
    def _to_stock(row: StockRow) -> Stock:
        return Stock(
            product_id=row.product_id,
            quantity_boxes=row.quantity_boxes,
            quantity_units=row.quantity_units,
            min_stock=row.min_stock,
            last_updated=row.last_updated,
        )

    @staticmethod
    def _existing_id(session: Session, p: Product) -> Optional[str]:
        return (
            session.query(ProductRow.id)
            .filter(
                ProductRow.brand == p.brand,
                ProductRow.size == p.size,
                ProductRow.container_type == p.container_type,
            )
            .scalar()
        )

    def _stock_lock(self, product_id: str) -> FileLock:
        # ids may hold spaces or non-ascii brand names; hash them into a safe filename
        digest = hashlib.sha1(product_id.encode("utf-8")).hexdigest()[:20]
        return FileLock(os.path.join(self.lock_dir, f"stock_{digest}.lock"))

    # --- products ---

    def add_product(self, product: Product) -> str:
        """
        Insert the product and its zeroed stock row in one transaction.

        A product whose brand, size and container type already exist is not
        inserted again; the id of the row already stored is returned instead.
        """
        product.validate()
        pid = product.id or gen_id(product)
        with storage_errors("add_product", pid):
            with self.session_factory() as session:
                try:
                    with smart_transaction(session):
                        existing = self._existing_id(session, product)
                        if existing is not None:
                            log.info("add_product: %s already stored as %s", pid, existing)
                            return existing
                        session.add(
                            ProductRow(
                                id=pid,
                                name=product.name,
                                brand=product.brand,
                                size=product.size,
                                container_type=product.container_type,
                                box_size=product.box_size,
                                price=product.price,
                                category=product.category,
                                is_active=True,
                            )
                        )
                        session.flush()
                        session.add(
                            StockRow(
                                product_id=pid,
                                quantity_boxes=0,
                                quantity_units=0,
                                min_stock=0,
                                last_updated=utcnow(),
                            )
                        )
                        session.flush()
                except IntegrityError:
                    # a concurrent insert won the natural key, or the id is taken
                    existing = self._existing_id(session, product)
                    if existing is None:
                        raise AlreadyExists(pid)
                    return existing
        log.debug("added product %s (%s)", pid, product.name)
        return pid

    def get_product(self, product_id: str) -> Product:
        with storage_errors("get_product", product_id):
            with self.session_factory() as session:
                row = session.query(ProductRow).filter(ProductRow.id == product_id).first()
                if row is None:
                    raise ProductNotFound(product_id)
                return self._to_product(row)

    def list_products(self) -> List[Product]:
        with storage_errors("list_products"):
            with self.session_factory() as session:
                rows = (
                    session.query(ProductRow)
                    .filter(ProductRow.is_active == True)
                    .order_by(ProductRow.name, ProductRow.id)
                    .all()
                )
                return [self._to_product(r) for r in rows]

    def search_products(self, query: str) -> List[Product]:
        like = f"%{_escape_like(query or '')}%"
        with storage_errors("search_products", query):
            with self.session_factory() as session:
                rows = (
                    session.query(ProductRow)
                    .filter(ProductRow.is_active == True)
                    .filter(
                        or_(
                            ProductRow.name.ilike(like, escape="\\"),
                            ProductRow.brand.ilike(like, escape="\\"),
                        )
                    )
                    .order_by(ProductRow.name, ProductRow.id)
                    .all()
                )
                return [self._to_product(r) for r in rows]

    def update_product(self, product: Product) -> None:
        product.validate()
        with storage_errors("update_product", product.id):
            try:
                with self.session_factory() as session, smart_transaction(session):
                    count = (
                        session.query(ProductRow)
                        .filter(ProductRow.id == product.id)
                        .update(
                            {
                                ProductRow.name: product.name,
                                ProductRow.brand: product.brand,
                                ProductRow.size: product.size,
                                ProductRow.container_type: product.container_type,
                                ProductRow.box_size: product.box_size,
                                ProductRow.price: product.price,
                                ProductRow.category: product.category,
                                ProductRow.is_active: product.active,
                                ProductRow.updated_at: utcnow(),
                            },
                            synchronize_session=False,
                        )
                    )
            except IntegrityError:
                # brand/size/container now collide with another catalog entry
                raise AlreadyExists(product.id)
        if count == 0:
            raise ProductNotFound(product.id)
        log.debug("updated product %s", product.id)

    def delete_product(self, product_id: str) -> None:
        with storage_errors("delete_product", product_id):
            with self.session_factory() as session, smart_transaction(session):
                count = (
                    session.query(ProductRow)
                    .filter(ProductRow.id == product_id)
                    .update(
                        {ProductRow.is_active: False, ProductRow.updated_at: utcnow()},
                        synchronize_session=False,
                    )
                )
        if count == 0:
            raise ProductNotFound(product_id)
        log.debug("soft-deleted product %s", product_id)

    # --- stock ---

    def get_stock(self, product_id: str) -> Stock:
        with storage_errors("get_stock", product_id):
            with self.session_factory() as session:
                row = session.query(StockRow).filter(StockRow.product_id == product_id).first()
                if row is None:
                    raise StockNotFound(product_id)
                return self._to_stock(row)

    def adjust_stock(self, product_id: str, boxes: int, units: int) -> Stock:
        """
        Apply the delta with an in-place UPDATE, read the result back inside
        the same transaction and commit only if neither quantity went negative.

        The UPDATE takes the row (PostgreSQL) or database (SQLite) write lock
        before the check, and the per-product file lock serializes adjusters
        across threads and processes, so two deductions can never both pass
        against the same stale balance.
        """
        lock = self._stock_lock(product_id)
        try:
            with lock.acquire(timeout=self.lock_timeout):
                with storage_errors("adjust_stock", product_id):
                    with self.session_factory() as session, smart_transaction(session):
                        result = session.execute(
                            update(StockRow)
                            .where(StockRow.product_id == product_id)
                            .values(
                                quantity_boxes=StockRow.quantity_boxes + boxes,
                                quantity_units=StockRow.quantity_units + units,
                                last_updated=utcnow(),
                            )
                            .execution_options(synchronize_session=False)
                        )
                        if result.rowcount == 0:
                            raise StockNotFound(product_id)
                        row = (
                            session.query(StockRow)
                            .filter(StockRow.product_id == product_id)
                            .one()
                        )
                        if row.quantity_boxes < 0 or row.quantity_units < 0:
                            log.warning(
                                "rejected adjust on %s by (%d, %d): would leave %d boxes, %d units",
                                product_id, boxes, units, row.quantity_boxes, row.quantity_units,
                            )
                            # leaving the block rolls the UPDATE back
                            raise InsufficientStock(row.quantity_boxes, row.quantity_units)
                        return self._to_stock(row)
        except Timeout as e:
            raise StorageUnavailable("adjust_stock", product_id) from e

    def set_min_stock(self, product_id: str, min_stock: int) -> None:
        if min_stock < 0:
            raise InvalidThreshold(min_stock)
        with storage_errors("set_min_stock", product_id):
            with self.session_factory() as session, smart_transaction(session):
                count = (
                    session.query(StockRow)
                    .filter(StockRow.product_id == product_id)
                    .update({StockRow.min_stock: min_stock}, synchronize_session=False)
                )
        if count == 0:
            raise StockNotFound(product_id)

    def list_low_stock(self) -> List[Product]:
        # computed at query time so it always matches the live quantities
        total_units = (
            StockRow.quantity_boxes * func.coalesce(ProductRow.box_size, 0)
            + StockRow.quantity_units
        )
        with storage_errors("list_low_stock"):
            with self.session_factory() as session:
                rows = (
                    session.query(ProductRow)
                    .join(StockRow, StockRow.product_id == ProductRow.id)
                    .filter(ProductRow.is_active == True)
                    .filter(total_units < StockRow.min_stock)
                    .order_by(ProductRow.name, ProductRow.id)
                    .all()
                )
                return [self._to_product(r) for r in rows]

    # --- utility ---

    def count(self) -> int:
        with storage_errors("count"):
            with self.session_factory() as session:
                return (
                    session.query(func.count(ProductRow.id))
                    .filter(ProductRow.is_active == True)
                    .scalar()
                    or 0
                )

    def ping(self) -> bool:
        try:
            with self.session_factory() as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            return False

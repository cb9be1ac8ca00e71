import logging
from dataclasses import dataclass
from typing import List

from stockroom.domain import Product, Stock, StockMovement
from stockroom.repositories.base import Repository

log = logging.getLogger(__name__)


@dataclass
class StockStatus:
    product: Product
    stock: Stock

    @property
    def total_units(self) -> int:
        return self.stock.total_units(self.product.box_size)

    @property
    def is_low(self) -> bool:
        return self.stock.is_low_stock(self.product.box_size)


class InventoryService:
    def __init__(self, repo: Repository):
        self.repo = repo

    def status(self, product_id: str) -> StockStatus:
        product = self.repo.get_product(product_id)
        return StockStatus(product=product, stock=self.repo.get_stock(product_id))

    def record_movement(self, movement: StockMovement) -> Stock:
        """
        Apply a movement to stock.

        The movement is validated first; an invalid one never reaches the
        repository. Persisting the movement itself is left to the caller.
        """
        movement.validate()
        boxes, units = movement.signed_delta()
        stock = self.repo.adjust_stock(movement.product_id, boxes, units)
        log.info(
            "%s %s: %+d boxes %+d units by %s (reported by %s) %s",
            movement.movement_type,
            movement.product_id,
            boxes,
            units,
            movement.performed_by,
            movement.reported_by,
            movement.reason,
        )
        return stock

    def low_stock_report(self) -> List[StockStatus]:
        report = []
        for p in self.repo.list_low_stock():
            report.append(StockStatus(product=p, stock=self.repo.get_stock(p.id)))
        return report

    def check_low_stock(self) -> List[str]:
        """
        Log every active product below its threshold. Returns their ids.
        Run periodically by the scheduler in ``stockroom.main``.
        """
        ids = []
        for s in self.low_stock_report():
            log.warning(
                "low stock: %s (%s) has %d units, minimum %d",
                s.product.id,
                s.product.name,
                s.total_units,
                s.stock.min_stock,
            )
            ids.append(s.product.id)
        return ids

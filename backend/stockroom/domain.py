"""
Domain entities for the stockroom: products, their stock levels and the
movements that change them.

Entities are plain dataclasses. Repositories validate before storing, and
the ``new_*`` helpers validate before handing an entity back, so callers
never hold a half-valid product or movement.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Tuple

from stockroom.errors import (
    InvalidCategory,
    InvalidMovementType,
    InvalidPrice,
    InvalidSize,
    NameRequired,
    NegativeQuantity,
    NoPerformer,
    NoQuantity,
    ProductIDRequired,
)

# category key -> display label
CATEGORIES = {
    "drinks": "משקאות",
    "vegetables": "ירקות",
    "dairy": "מוצרי חלב",
    "meat": "בשר",
    "dry_goods": "מוצרים יבשים",
    "sauces": "רטבים",
    "canned": "שימורים",
}

MOVEMENT_IN = "IN"  # stock received
MOVEMENT_OUT = "OUT"  # sold / used
MOVEMENT_WASTE = "WASTE"  # thrown away
MOVEMENT_ADJUSTMENT = "ADJUSTMENT"  # inventory correction

MOVEMENT_TYPES = frozenset(
    {MOVEMENT_IN, MOVEMENT_OUT, MOVEMENT_WASTE, MOVEMENT_ADJUSTMENT}
)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Product:
    """A catalog entry. Identified in the catalog by brand + size + container."""

    name: str
    brand: str = ""
    size: int = 0  # ml or grams
    container_type: str = ""  # "can", "bottle", "bag", "kg", ...
    box_size: int = 0  # units per box, 0 when sold individually
    price: float = 0.0  # per unit
    category: str = ""
    active: bool = True
    id: str = ""

    def validate(self) -> None:
        if not self.name:
            raise NameRequired()
        if self.size <= 0:
            raise InvalidSize()
        if self.price < 0:
            raise InvalidPrice()
        if self.category and self.category not in CATEGORIES:
            raise InvalidCategory(self.category)


@dataclass
class Stock:
    product_id: str
    quantity_boxes: int = 0
    quantity_units: int = 0
    min_stock: int = 0
    last_updated: datetime = field(default_factory=utcnow)

    def validate(self) -> None:
        if not self.product_id:
            raise ProductIDRequired()
        if self.quantity_boxes < 0 or self.quantity_units < 0:
            raise NegativeQuantity()

    def total_units(self, box_size: int) -> int:
        return self.quantity_boxes * box_size + self.quantity_units

    def is_low_stock(self, box_size: int) -> bool:
        return self.total_units(box_size) < self.min_stock


@dataclass
class StockMovement:
    """
    One recorded stock change.

    ``performed_by`` is who physically moved the goods, ``reported_by`` who
    entered it; they differ when someone logs on another person's behalf.
    """

    product_id: str
    movement_type: str
    boxes: int = 0
    units: int = 0
    performed_by: str = ""
    reported_by: str = ""
    reason: str = ""
    created_at: datetime = field(default_factory=utcnow)
    id: str = ""

    def validate(self) -> None:
        if self.movement_type not in MOVEMENT_TYPES:
            raise InvalidMovementType(self.movement_type)
        if self.boxes == 0 and self.units == 0:
            raise NoQuantity()
        if not self.performed_by:
            raise NoPerformer()

    def signed_delta(self) -> Tuple[int, int]:
        """
        The (boxes, units) delta this movement applies to stock.

        IN adds and OUT/WASTE remove, whatever sign the caller used;
        ADJUSTMENT is applied exactly as given.
        """
        if self.movement_type == MOVEMENT_IN:
            return abs(self.boxes), abs(self.units)
        if self.movement_type in (MOVEMENT_OUT, MOVEMENT_WASTE):
            return -abs(self.boxes), -abs(self.units)
        return self.boxes, self.units


def total_units(stock: Stock, box_size: int) -> int:
    return stock.total_units(box_size)


def is_low_stock(stock: Stock, box_size: int) -> bool:
    return stock.is_low_stock(box_size)


def new_product(
    name: str,
    brand: str,
    size: int,
    container_type: str,
    box_size: int,
    price: float,
    category: str = "",
) -> Product:
    p = Product(
        name=name,
        brand=brand,
        size=size,
        container_type=container_type,
        box_size=box_size,
        price=price,
        category=category,
        active=True,
    )
    p.validate()
    return p


def new_stock_movement(
    product_id: str,
    movement_type: str,
    boxes: int,
    units: int,
    performed_by: str,
    reported_by: Optional[str] = "",
    reason: str = "",
) -> StockMovement:
    # self-reported unless someone else logged it
    if not reported_by:
        reported_by = performed_by
    m = StockMovement(
        product_id=product_id,
        movement_type=movement_type,
        boxes=boxes,
        units=units,
        performed_by=performed_by,
        reported_by=reported_by,
        reason=reason,
    )
    m.validate()
    return m

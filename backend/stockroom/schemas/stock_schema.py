from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic import Field


class StockOut(BaseModel):
    product_id: str
    quantity_boxes: int
    quantity_units: int
    min_stock: int
    last_updated: Optional[datetime] = None
    total_units: Optional[int] = None
    is_low: Optional[bool] = None


class AdjustIn(BaseModel):
    boxes: int = 0
    units: int = 0


class MinStockIn(BaseModel):
    min_stock: int = Field(..., description="alert when total units drop below this")


class MovementIn(BaseModel):
    movement_type: str
    boxes: int = 0
    units: int = 0
    performed_by: str = ""
    reported_by: str = ""
    reason: str = ""


class MovementOut(BaseModel):
    product_id: str
    movement_type: str
    boxes: int
    units: int
    performed_by: str
    reported_by: str
    reason: str
    created_at: datetime
    stock: StockOut

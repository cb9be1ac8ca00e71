# backend/stockroom/schemas/product_schema.py
from typing import Optional

from pydantic import BaseModel
from pydantic import ConfigDict

from stockroom.domain import Product


class ProductIn(BaseModel):
    # range checks live in the domain model so both paths report the same errors
    name: str
    brand: str = ""
    size: int
    container_type: str = ""
    box_size: int = 0
    price: float = 0.0
    category: str = ""
    active: Optional[bool] = None  # omitted: keep the stored flag

    def to_product(self, product_id: str = "", current_active: bool = True) -> Product:
        data = self.model_dump()
        # inactive is terminal; a body can deactivate but never revive
        data["active"] = current_active and (self.active is None or self.active)
        return Product(id=product_id, **data)


class ProductOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
    brand: str
    size: int
    container_type: str
    box_size: int
    price: float
    category: str
    active: bool


class ProductCreated(BaseModel):
    id: str

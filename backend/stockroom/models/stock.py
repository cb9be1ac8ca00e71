from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from stockroom.db import Base
from stockroom.domain import utcnow


class StockRow(Base):
    __tablename__ = "stocks"

    product_id = Column(String(128), ForeignKey("products.id"), primary_key=True)
    quantity_boxes = Column(Integer, nullable=False, default=0)
    quantity_units = Column(Integer, nullable=False, default=0)
    min_stock = Column(Integer, nullable=False, default=0)
    last_updated = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    product = relationship("ProductRow", back_populates="stock")

    def __repr__(self):
        return f"<StockRow product_id={self.product_id} boxes={self.quantity_boxes} units={self.quantity_units}>"

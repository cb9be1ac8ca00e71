from sqlalchemy import Boolean, Column, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.orm import relationship

from stockroom.db import Base
from stockroom.domain import utcnow


class ProductRow(Base):
    __tablename__ = "products"
    # identical catalog entries collapse onto one row
    __table_args__ = (
        UniqueConstraint("brand", "size", "container_type", name="uq_products_natural_key"),
    )

    id = Column(String(128), primary_key=True)
    name = Column(String(256), nullable=False)
    brand = Column(String(128), nullable=False, default="")
    size = Column(Integer, nullable=False)
    container_type = Column(String(64), nullable=False, default="")
    box_size = Column(Integer, nullable=False, default=0)
    price = Column(Float, nullable=False, default=0.0)
    category = Column(String(64), nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    stock = relationship("StockRow", back_populates="product", uselist=False)

    def __repr__(self):
        return f"<ProductRow id={self.id} name={self.name}>"

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Index, String, Text

from ..database import Base


class InventoryItem(Base):
    __tablename__ = "items"

    id = Column(String(36), primary_key=True)

    name = Column(String, nullable=False)
    name_ar = Column(String, nullable=False)
    category = Column(String, nullable=False)

    quantity = Column(Float, nullable=False, default=0)
    min_quantity = Column(Float, nullable=False, default=0)

    unit = Column(Text, nullable=True)  # e.g. 'kg' | 'box' | 'piece'
    capacity = Column(Text, nullable=True)  # packaging, e.g. '12 x 1L'

    last_updated = Column(DateTime, nullable=False, default=datetime.now)

    __table_args__ = (Index("by-category", "category"),)

    @property
    def is_low_stock(self) -> bool:
        return float(self.quantity or 0) <= float(self.min_quantity or 0)

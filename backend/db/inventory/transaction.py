from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from ..database import Base


class InventoryTransaction(Base):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True)
    date = Column(DateTime, nullable=False)
    department = Column(String, nullable=False)
    type = Column(String(3), nullable=False)  # 'in' | 'out'
    notes = Column(Text, nullable=True)
    created_by_user_id = Column(String(36), nullable=True)

    lines = relationship(
        "TransactionLine",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionLine.position",
        lazy="selectin",
    )

    __table_args__ = (
        Index("by-date", "date"),
        Index("by-department", "department"),
    )


class TransactionLine(Base):
    __tablename__ = "transaction_lines"

    id = Column(Integer, primary_key=True, autoincrement=True)
    transaction_id = Column(
        String(36),
        ForeignKey("transactions.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    position = Column(Integer, nullable=False, default=0)

    # No FK to items: history outlives deleted items.
    item_id = Column(String(36), nullable=False, index=True)
    quantity = Column(Float, nullable=False)
    unit = Column(Text, nullable=True)
    capacity = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    transaction = relationship("InventoryTransaction", back_populates="lines")

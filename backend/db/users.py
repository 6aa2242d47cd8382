from datetime import datetime

from sqlalchemy import Column, DateTime, String

from .database import Base


class User(Base):
    """Placeholder staff record. Nothing is authorized against it."""
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    username = Column(String, nullable=False, unique=True, index=True)
    display_name = Column(String, nullable=True)
    role = Column(String, nullable=False, default="staff")
    created_at = Column(DateTime, nullable=False, default=datetime.now)

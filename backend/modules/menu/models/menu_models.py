# backend/modules/menu/models/menu_models.py

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text

from core.database import Base


class MenuItem(Base):
    """Menu items that orders snapshot at add-time"""
    __tablename__ = "menu_items"

    id = Column(String(64), primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)
    category = Column(String(50), nullable=True, index=True)
    price = Column(Numeric(10, 2), nullable=False)

    is_available = Column(Boolean, nullable=False, default=True)
    preparation_time = Column(Integer, nullable=False, default=0)  # minutes

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow,
                        onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<MenuItem(id={self.id}, name='{self.name}', price={self.price})>"

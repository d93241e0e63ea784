from sqlalchemy import (Column, Integer, String, ForeignKey, DateTime,
                        Numeric, Text)
from sqlalchemy.orm import relationship
from core.database import Base


class Order(Base):
    __tablename__ = "orders"

    id = Column(String(64), primary_key=True, index=True)
    order_number = Column(String(32), nullable=False, index=True)
    table_id = Column(String(64), nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)
    created_by = Column(String(64), nullable=False, index=True)

    customer_name = Column(String(100), nullable=True)
    customer_count = Column(Integer, nullable=True)
    special_requests = Column(Text, nullable=True)

    subtotal = Column(Numeric(10, 2), nullable=False, default=0)
    tax = Column(Numeric(10, 2), nullable=False, default=0)
    discount = Column(Numeric(10, 2), nullable=False, default=0)
    total = Column(Numeric(10, 2), nullable=False, default=0)

    created_at = Column(DateTime, nullable=False, index=True)
    updated_at = Column(DateTime, nullable=False)
    completed_at = Column(DateTime, nullable=True)

    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItem.position",
    )
    history = relationship(
        "OrderStatusHistory",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderStatusHistory.id",
    )


class OrderItem(Base):
    __tablename__ = "order_items"

    # item ids are only unique within their order
    order_id = Column(String(64), ForeignKey("orders.id"), primary_key=True)
    id = Column(String(64), primary_key=True)
    position = Column(Integer, nullable=False, default=0)

    menu_item_id = Column(String(64), nullable=False, index=True)
    menu_item_name = Column(String(200), nullable=False)
    menu_item_price = Column(Numeric(10, 2), nullable=False)
    preparation_time = Column(Integer, nullable=False, default=0)

    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False)
    special_instructions = Column(Text, nullable=True)
    prepared_by = Column(String(64), nullable=True)
    prepared_at = Column(DateTime, nullable=True)

    order = relationship("Order", back_populates="items")


class OrderStatusHistory(Base):
    __tablename__ = "order_status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(String(64), ForeignKey("orders.id"),
                      nullable=False, index=True)
    previous_status = Column(String(20), nullable=True)
    new_status = Column(String(20), nullable=False)
    changed_by = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)
    timestamp = Column(DateTime, nullable=False)

    order = relationship("Order", back_populates="history")


class OrderSequence(Base):
    """Named counters; the order_number row feeds ORD-NNN numbering"""
    __tablename__ = "order_sequences"

    name = Column(String(50), primary_key=True)
    value = Column(Integer, nullable=False, default=0)

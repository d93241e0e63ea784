# backend/modules/orders/services/order_store.py

"""
Order persistence behind a small repository interface.

The store only knows whole orders: ``save`` always replaces the stored
record with the given one (items and history included) and never merges.
Copies go in and out, so callers can mutate what ``get`` returns without
touching stored state until they ``save``.
"""

from abc import ABC, abstractmethod
from threading import Lock
from typing import Dict, Iterable, List, Optional
import logging

from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import NotFoundError
from ..models import order_models as models
from ..schemas.order_schemas import (
    MenuItemSnapshot, Order, OrderHistoryEntry, OrderItem
)

logger = logging.getLogger(__name__)


def format_order_number(sequence: int, prefix: Optional[str] = None,
                        width: Optional[int] = None) -> str:
    """Render a counter value as ``ORD-001`` style order number"""
    prefix = prefix if prefix is not None else settings.order_number_prefix
    width = width if width is not None else settings.order_number_width
    return f"{prefix}-{sequence:0{width}d}"


class OrderStore(ABC):
    """Durable keyed storage of orders"""

    @abstractmethod
    def list(self) -> List[Order]:
        """Return every stored order, oldest first"""
        pass

    @abstractmethod
    def get(self, order_id: str) -> Order:
        """Return the order or raise NotFoundError"""
        pass

    @abstractmethod
    def save(self, order: Order) -> None:
        """Insert or fully overwrite the order"""
        pass

    @abstractmethod
    def next_order_number(self) -> str:
        """Advance the order counter and return the formatted number"""
        pass


class InMemoryOrderStore(OrderStore):
    """Dictionary-backed store for tests and single-process demos"""

    def __init__(self, orders: Optional[Iterable[Order]] = None,
                 counter_start: int = 0, prefix: Optional[str] = None,
                 width: Optional[int] = None):
        self._orders: Dict[str, Order] = {}
        self._counter = counter_start
        self._counter_lock = Lock()
        self.prefix = prefix
        self.width = width
        for order in orders or []:
            self.save(order)

    def list(self) -> List[Order]:
        return sorted(
            (order.model_copy(deep=True) for order in self._orders.values()),
            key=lambda order: order.created_at,
        )

    def get(self, order_id: str) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError("Order", order_id)
        return order.model_copy(deep=True)

    def save(self, order: Order) -> None:
        self._orders[order.id] = order.model_copy(deep=True)

    def next_order_number(self) -> str:
        with self._counter_lock:
            self._counter += 1
            sequence = self._counter
        return format_order_number(sequence, self.prefix, self.width)


class SQLAlchemyOrderStore(OrderStore):
    """Store backed by the orders / order_items / order_status_history tables"""

    SEQUENCE_NAME = "order_number"

    def __init__(self, db: Session, prefix: Optional[str] = None,
                 width: Optional[int] = None):
        self.db = db
        self.prefix = prefix
        self.width = width

    def list(self) -> List[Order]:
        records = (
            self.db.query(models.Order)
            .order_by(models.Order.created_at, models.Order.order_number)
            .all()
        )
        return [self._to_domain(record) for record in records]

    def get(self, order_id: str) -> Order:
        record = self.db.get(models.Order, order_id)
        if record is None:
            raise NotFoundError("Order", order_id)
        return self._to_domain(record)

    def save(self, order: Order) -> None:
        record = self.db.get(models.Order, order.id)
        if record is None:
            record = models.Order(id=order.id)
            self.db.add(record)

        record.order_number = order.order_number
        record.table_id = order.table_id
        record.status = order.status.value
        record.created_by = order.created_by
        record.customer_name = order.customer_name
        record.customer_count = order.customer_count
        record.special_requests = order.special_requests
        record.subtotal = order.subtotal
        record.tax = order.tax
        record.discount = order.discount
        record.total = order.total
        record.created_at = order.created_at
        record.updated_at = order.updated_at
        record.completed_at = order.completed_at

        existing_items = {row.id: row for row in record.items}
        rows = []
        for position, item in enumerate(order.items):
            row = existing_items.get(item.id) or models.OrderItem(id=item.id)
            row.position = position
            row.menu_item_id = item.menu_item_id
            row.menu_item_name = item.menu_item.name
            row.menu_item_price = item.menu_item.price
            row.preparation_time = item.menu_item.preparation_time
            row.quantity = item.quantity
            row.price = item.price
            row.status = item.status.value
            row.special_instructions = item.special_instructions
            row.prepared_by = item.prepared_by
            row.prepared_at = item.prepared_at
            rows.append(row)
        # lines missing from the new order are deleted as orphans
        record.items = rows

        # history is append-only; rewrite it only if the caller dropped entries
        if len(order.history) < len(record.history):
            record.history = []
        for entry in order.history[len(record.history):]:
            record.history.append(models.OrderStatusHistory(
                previous_status=(
                    entry.previous_status.value if entry.previous_status else None
                ),
                new_status=entry.new_status.value,
                changed_by=entry.changed_by,
                notes=entry.notes,
                timestamp=entry.timestamp,
            ))

        self.db.commit()

    def next_order_number(self) -> str:
        query = self.db.query(models.OrderSequence).filter_by(
            name=self.SEQUENCE_NAME
        )
        # row lock where the dialect supports it (no-op on SQLite)
        sequence = query.with_for_update().first()
        if sequence is None:
            sequence = models.OrderSequence(name=self.SEQUENCE_NAME, value=0)
            self.db.add(sequence)

        sequence.value += 1
        value = sequence.value
        self.db.commit()
        logger.debug(f"Allocated order sequence value {value}")

        return format_order_number(value, self.prefix, self.width)

    @staticmethod
    def _to_domain(record: models.Order) -> Order:
        return Order(
            id=record.id,
            order_number=record.order_number,
            table_id=record.table_id,
            status=record.status,
            created_by=record.created_by,
            customer_name=record.customer_name,
            customer_count=record.customer_count,
            special_requests=record.special_requests,
            subtotal=record.subtotal,
            tax=record.tax,
            discount=record.discount,
            total=record.total,
            created_at=record.created_at,
            updated_at=record.updated_at,
            completed_at=record.completed_at,
            items=[
                OrderItem(
                    id=row.id,
                    menu_item_id=row.menu_item_id,
                    menu_item=MenuItemSnapshot(
                        name=row.menu_item_name,
                        price=row.menu_item_price,
                        preparation_time=row.preparation_time,
                    ),
                    quantity=row.quantity,
                    price=row.price,
                    status=row.status,
                    special_instructions=row.special_instructions,
                    prepared_by=row.prepared_by,
                    prepared_at=row.prepared_at,
                )
                for row in record.items
            ],
            history=[
                OrderHistoryEntry(
                    previous_status=entry.previous_status,
                    new_status=entry.new_status,
                    changed_by=entry.changed_by,
                    notes=entry.notes,
                    timestamp=entry.timestamp,
                )
                for entry in record.history
            ],
        )

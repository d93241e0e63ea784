# backend/modules/orders/services/order_lifecycle_service.py

"""
Order lifecycle engine.

Every operation reads the order from the store, mutates a copy, recomputes
totals and writes the full order back while holding that order's lock.
Operations return the saved order together with the notification events
they produced; the same events are handed to the configured notification
adapter after the write.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from threading import Lock
from typing import Callable, Dict, Iterable, List, Optional
import logging
import uuid

from core.config import settings
from core.exceptions import APIError, NotFoundError, ValidationError
from core.notification_adapter import (
    NotificationAdapter, NotificationEvent, get_notification_adapter
)
from modules.menu.services.menu_catalog import MenuCatalog
from ..enums.order_enums import OrderEventType, OrderItemStatus, OrderStatus
from ..schemas.order_schemas import (
    MenuItemSnapshot, Order, OrderCreate, OrderHistoryEntry, OrderItem
)
from .order_calculation_service import (
    Number, apply_totals, validate_discount
)
from .order_store import OrderStore

logger = logging.getLogger(__name__)

ITEM_STATUS_SEQUENCE = list(OrderItemStatus)


def derive_order_status(
    item_statuses: Iterable[OrderItemStatus], current_status: OrderStatus
) -> OrderStatus:
    """
    Infer the order status from its items' statuses.

    Rules are checked in order and the first match wins:

    1. every item served and the order is not completed -> served
    2. every item ready or served and the order is preparing -> ready
    3. any item preparing and the order is confirmed -> preparing

    Otherwise the current status is kept. An order without items keeps its
    status.
    """
    statuses = list(item_statuses)
    if not statuses:
        return current_status

    if (all(s == OrderItemStatus.SERVED for s in statuses)
            and current_status != OrderStatus.COMPLETED):
        return OrderStatus.SERVED
    if (all(s.is_prepared for s in statuses)
            and current_status == OrderStatus.PREPARING):
        return OrderStatus.READY
    if (any(s == OrderItemStatus.PREPARING for s in statuses)
            and current_status == OrderStatus.CONFIRMED):
        return OrderStatus.PREPARING
    return current_status


def is_forward_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """Whether moving from ``current`` to ``new`` never goes backwards"""
    if current == new:
        return True
    if current.is_terminal:
        return False
    if new == OrderStatus.CANCELLED:
        return True
    return new.rank > current.rank


def is_forward_item_transition(current: OrderItemStatus,
                               new: OrderItemStatus) -> bool:
    return (ITEM_STATUS_SEQUENCE.index(new)
            >= ITEM_STATUS_SEQUENCE.index(current))


class OrderLockRegistry:
    """
    One lock per order id.

    A lock lives only while some caller holds or waits on it, so ids that
    are looked up once (including unknown ones) do not accumulate.
    """

    def __init__(self):
        self._locks: Dict[str, Lock] = {}
        self._waiters: Dict[str, int] = {}
        self._guard = Lock()

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, order_id: str):
        with self._guard:
            lock = self._locks.setdefault(order_id, Lock())
            self._waiters[order_id] = self._waiters.get(order_id, 0) + 1
        try:
            with lock:
                yield
        finally:
            with self._guard:
                self._waiters[order_id] -= 1
                if not self._waiters[order_id]:
                    del self._waiters[order_id]
                    del self._locks[order_id]


order_locks = OrderLockRegistry()


@dataclass
class OrderEvent(NotificationEvent):
    """Notification event raised by an order operation"""

    order_id: Optional[str] = None
    order_number: Optional[str] = None
    previous_status: Optional[OrderStatus] = None
    new_status: Optional[OrderStatus] = None
    item_id: Optional[str] = None


@dataclass
class OrderChange:
    """Result of an engine operation: the saved order and its events"""

    order: Order
    events: List[OrderEvent] = field(default_factory=list)

    @property
    def event_kinds(self) -> List[str]:
        return [event.kind_value for event in self.events]


class OrderLifecycleEngine:
    def __init__(
        self,
        store: OrderStore,
        menu_catalog: MenuCatalog,
        notifier: Optional[NotificationAdapter] = None,
        clock: Optional[Callable[[], datetime]] = None,
        strict_transitions: Optional[bool] = None,
        lock_registry: Optional[OrderLockRegistry] = None,
    ):
        self.store = store
        self.menu_catalog = menu_catalog
        self.notifier = notifier or get_notification_adapter()
        self.clock = clock or datetime.utcnow
        self.strict_transitions = (
            settings.strict_status_transitions
            if strict_transitions is None else strict_transitions
        )
        self.locks = (
            lock_registry if lock_registry is not None else order_locks
        )

    # Operations

    def create_order(self, order_data: OrderCreate) -> OrderChange:
        """Build a pending order from a cart and persist it"""
        with self._reporting_failures("create_order"):
            if not order_data.items:
                raise ValidationError("Order must contain at least one item")

            lines = []
            for index, line in enumerate(order_data.items, start=1):
                menu_item = self.menu_catalog.get(line.menu_item_id)
                if menu_item is None:
                    raise NotFoundError("Menu item", line.menu_item_id)
                if not menu_item.is_available:
                    raise ValidationError(
                        f"Menu item is not available: {line.menu_item_id}"
                    )
                lines.append(OrderItem(
                    id=f"item-{index}",
                    menu_item_id=menu_item.id,
                    menu_item=MenuItemSnapshot(
                        name=menu_item.name,
                        price=menu_item.price,
                        preparation_time=menu_item.preparation_time,
                    ),
                    quantity=line.quantity,
                    price=menu_item.price,
                    special_instructions=line.special_instructions,
                ))

            now = self._now()
            order = Order(
                id=f"order-{uuid.uuid4().hex[:12]}",
                order_number=self.store.next_order_number(),
                table_id=order_data.table_id,
                items=lines,
                status=OrderStatus.PENDING,
                created_by=order_data.created_by,
                customer_name=order_data.customer_name,
                customer_count=order_data.customer_count,
                special_requests=order_data.special_requests,
                created_at=now,
                updated_at=now,
            )
            order.history.append(OrderHistoryEntry(
                previous_status=None,
                new_status=OrderStatus.PENDING,
                changed_by=order_data.created_by,
                timestamp=now,
            ))

            event = self._event(
                OrderEventType.NEW_ORDER, order,
                f"New order {order.order_number} for table {order.table_id}",
                now, new_status=OrderStatus.PENDING,
            )
            return self._commit(order, now, [event], "Created")

    def set_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        changed_by: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> OrderChange:
        with self._reporting_failures("set_order_status", order_id), \
                self.locks.hold(order_id):
            order = self.store.get(order_id)
            now = self._now()
            event = self._transition(order, status, now, changed_by, notes)
            return self._commit(order, now, [event], f"Set status {status.value}")

    def set_item_status(
        self,
        order_id: str,
        item_id: str,
        status: OrderItemStatus,
        prepared_by: Optional[str] = None,
    ) -> OrderChange:
        """
        Update one item and re-derive the order status from all items.

        Emits ``status_change`` when the derived order status moved and
        ``order_ready`` when this call is the one that made every item
        ready.
        """
        with self._reporting_failures("set_item_status", order_id), \
                self.locks.hold(order_id):
            order = self.store.get(order_id)
            item = order.find_item(item_id)
            if item is None:
                raise NotFoundError("Order item", item_id)
            if (self.strict_transitions
                    and not is_forward_item_transition(item.status, status)):
                raise ValidationError(
                    f"Cannot move item {item_id} from {item.status.value} "
                    f"to {status.value}"
                )

            now = self._now()
            was_all_ready = self._all_items(order, OrderItemStatus.READY)
            self._set_item(item, status, now, prepared_by)

            events = []
            derived = derive_order_status(order.item_statuses, order.status)
            if derived != order.status and (
                not self.strict_transitions
                or is_forward_transition(order.status, derived)
            ):
                events.append(self._transition(
                    order, derived, now, prepared_by,
                    notes=f"Derived from item {item_id}", check=False,
                ))

            if (status == OrderItemStatus.READY and not was_all_ready
                    and self._all_items(order, OrderItemStatus.READY)):
                events.append(self._event(
                    OrderEventType.ORDER_READY, order,
                    f"Order {order.order_number} is ready", now,
                    item_id=item_id,
                ))

            return self._commit(
                order, now, events, f"Set item {item_id} to {status.value}"
            )

    def start_preparing(self, order_id: str,
                        changed_by: Optional[str] = None) -> OrderChange:
        """Move the order to preparing along with its pending items"""
        with self._reporting_failures("start_preparing", order_id), \
                self.locks.hold(order_id):
            order = self.store.get(order_id)
            now = self._now()
            event = self._transition(order, OrderStatus.PREPARING, now,
                                     changed_by)
            for item in order.items:
                if item.status == OrderItemStatus.PENDING:
                    self._set_item(item, OrderItemStatus.PREPARING, now)
            return self._commit(order, now, [event], "Started preparing")

    def mark_order_ready(self, order_id: str,
                         prepared_by: Optional[str] = None) -> OrderChange:
        """Force every item ready; always emits a single order_ready event"""
        with self._reporting_failures("mark_order_ready", order_id), \
                self.locks.hold(order_id):
            order = self.store.get(order_id)
            now = self._now()
            self._transition(order, OrderStatus.READY, now, prepared_by)
            for item in order.items:
                self._set_item(item, OrderItemStatus.READY, now, prepared_by)
            event = self._event(
                OrderEventType.ORDER_READY, order,
                f"Order {order.order_number} is ready", now,
            )
            return self._commit(order, now, [event], "Marked ready")

    def bump_order(self, order_id: str,
                   changed_by: Optional[str] = None) -> OrderChange:
        """Mark the order served; item statuses are left alone"""
        return self._simple_transition(
            "bump_order", order_id, OrderStatus.SERVED, changed_by
        )

    def cancel_order(self, order_id: str, changed_by: Optional[str] = None,
                     notes: Optional[str] = None) -> OrderChange:
        # cancelled orders stay in the store
        return self._simple_transition(
            "cancel_order", order_id, OrderStatus.CANCELLED, changed_by, notes
        )

    def confirm_order(self, order_id: str,
                      changed_by: Optional[str] = None) -> OrderChange:
        return self._simple_transition(
            "confirm_order", order_id, OrderStatus.CONFIRMED, changed_by
        )

    def complete_order(self, order_id: str,
                       changed_by: Optional[str] = None) -> OrderChange:
        return self._simple_transition(
            "complete_order", order_id, OrderStatus.COMPLETED, changed_by
        )

    def apply_discount(self, order_id: str, amount: Number) -> OrderChange:
        """Set the order discount; it may not exceed subtotal plus tax"""
        with self._reporting_failures("apply_discount", order_id), \
                self.locks.hold(order_id):
            order = self.store.get(order_id)
            order.discount = validate_discount(order, amount)
            return self._commit(
                order, self._now(), [], f"Applied discount {order.discount}"
            )

    # Helpers

    def _simple_transition(self, operation, order_id, status,
                           changed_by=None, notes=None) -> OrderChange:
        with self._reporting_failures(operation, order_id), \
                self.locks.hold(order_id):
            order = self.store.get(order_id)
            now = self._now()
            event = self._transition(order, status, now, changed_by, notes)
            return self._commit(order, now, [event], operation)

    def _transition(self, order: Order, status: OrderStatus, now: datetime,
                    changed_by: Optional[str] = None,
                    notes: Optional[str] = None,
                    check: bool = True) -> OrderEvent:
        previous = order.status
        if (check and self.strict_transitions
                and not is_forward_transition(previous, status)):
            raise ValidationError(
                f"Invalid status transition from {previous.value} "
                f"to {status.value}"
            )

        order.status = status
        # completed_at tracks the latest completion only
        order.completed_at = now if status == OrderStatus.COMPLETED else None
        order.history.append(OrderHistoryEntry(
            previous_status=previous,
            new_status=status,
            changed_by=changed_by,
            notes=notes,
            timestamp=now,
        ))

        return self._event(
            OrderEventType.STATUS_CHANGE, order,
            f"Order {order.order_number}: {previous.value} -> {status.value}",
            now, previous_status=previous, new_status=status,
        )

    @staticmethod
    def _set_item(item: OrderItem, status: OrderItemStatus, now: datetime,
                  prepared_by: Optional[str] = None):
        item.status = status
        if status == OrderItemStatus.READY:
            item.prepared_at = now
        elif status == OrderItemStatus.SERVED:
            if item.prepared_at is None:
                item.prepared_at = now
        else:
            item.prepared_at = None
        if prepared_by:
            item.prepared_by = prepared_by

    @staticmethod
    def _all_items(order: Order, status: OrderItemStatus) -> bool:
        return bool(order.items) and all(
            item.status == status for item in order.items
        )

    def _commit(self, order: Order, now: datetime, events: List[OrderEvent],
                action: str) -> OrderChange:
        apply_totals(order)
        order.updated_at = now
        self.store.save(order)

        logger.info(
            f"{action} for order {order.order_number} ({order.id}), "
            f"status {order.status.value}"
        )
        self._publish(events)
        return OrderChange(order=order, events=events)

    def _event(self, kind: OrderEventType, order: Order, message: str,
               now: datetime, **details) -> OrderEvent:
        return OrderEvent(
            kind=kind.value,
            message=message,
            timestamp=now,
            order_id=order.id,
            order_number=order.order_number,
            metadata={"table_id": order.table_id},
            **details,
        )

    def _publish(self, events: List[NotificationEvent]):
        for event in events:
            try:
                self.notifier.notify(event)
            except Exception:
                logger.exception(f"Failed to publish {event.kind_value} event")

    @contextmanager
    def _reporting_failures(self, operation: str,
                            order_id: Optional[str] = None):
        """Publish an error event for API errors, then re-raise them"""
        try:
            yield
        except APIError as exc:
            logger.warning(
                f"{operation} failed for order {order_id}: {exc.detail}"
            )
            self._publish([OrderEvent(
                kind=OrderEventType.ERROR.value,
                message=f"{operation} failed: {exc.detail}",
                timestamp=self._now(),
                order_id=order_id,
                metadata={"error_code": exc.error_code},
            )])
            raise

    def _now(self) -> datetime:
        return self.clock()

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"  # created, not yet sent to the kitchen
    CONFIRMED = "confirmed"  # sent to the kitchen
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    COMPLETED = "completed"  # paid and closed
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_ORDER_STATUSES

    @property
    def rank(self) -> int:
        """Position in the forward sequence; cancelled ranks after completed."""
        return ORDER_STATUS_SEQUENCE.index(self)


ORDER_STATUS_SEQUENCE = (
    OrderStatus.PENDING,
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
    OrderStatus.SERVED,
    OrderStatus.COMPLETED,
    OrderStatus.CANCELLED,
)

TERMINAL_ORDER_STATUSES = frozenset(
    {OrderStatus.COMPLETED, OrderStatus.CANCELLED}
)


class OrderItemStatus(str, Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"

    @property
    def is_prepared(self) -> bool:
        """Whether the item has gone through the kitchen (ready or later)."""
        return self in (OrderItemStatus.READY, OrderItemStatus.SERVED)


class OrderEventType(str, Enum):
    NEW_ORDER = "new_order"
    ORDER_READY = "order_ready"
    STATUS_CHANGE = "status_change"
    ERROR = "error"

# backend/modules/orders/services/order_query_service.py

from typing import List, Optional

from ..enums.order_enums import OrderStatus
from ..schemas.order_schemas import Order
from .order_store import OrderStore


def orders_by_status(store: OrderStore, status: OrderStatus) -> List[Order]:
    return [order for order in store.list() if order.status == status]


def active_orders(store: OrderStore) -> List[Order]:
    """Orders that are neither completed nor cancelled"""
    return [order for order in store.list() if not order.status.is_terminal]


def search_orders(store: OrderStore, query: str) -> List[Order]:
    """
    Case-insensitive substring match on order number, customer name and
    table id. A blank query matches every order.
    """
    needle = query.strip().lower()
    if not needle:
        return store.list()

    def matches(order: Order) -> bool:
        return any(
            needle in value.lower()
            for value in (order.order_number, order.customer_name or "",
                          order.table_id)
        )

    return [order for order in store.list() if matches(order)]


def list_orders(
    store: OrderStore,
    status: Optional[OrderStatus] = None,
    active: Optional[bool] = None,
    search: Optional[str] = None,
    newest_first: bool = False,
) -> List[Order]:
    """Apply the optional filters together; oldest first unless asked"""
    orders = search_orders(store, search) if search else store.list()
    if status is not None:
        orders = [order for order in orders if order.status == status]
    if active is not None:
        orders = [
            order for order in orders if order.status.is_terminal != active
        ]
    if newest_first:
        orders.reverse()
    return orders

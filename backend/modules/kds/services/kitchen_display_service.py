# backend/modules/kds/services/kitchen_display_service.py

"""
Kitchen display queue: the orders the kitchen is working on, with how long
each has been waiting.
"""

from datetime import datetime
from typing import Callable, List, Optional
import logging
import re

from modules.orders.enums.order_enums import OrderStatus
from modules.orders.schemas.order_schemas import Order
from modules.orders.services.order_store import OrderStore
from ..schemas.kds_schemas import (
    KitchenSortOption,
    KitchenStatusFilter,
    KitchenSummary,
    KitchenTicket,
    UrgencyLevel,
)

logger = logging.getLogger(__name__)

KITCHEN_STATUSES = (
    OrderStatus.CONFIRMED,
    OrderStatus.PREPARING,
    OrderStatus.READY,
)

ATTENTION_AFTER_MINUTES = 15
URGENT_AFTER_MINUTES = 30

_TABLE_NUMBER = re.compile(r"\d+")


def elapsed_minutes(created_at: datetime, now: datetime) -> int:
    """Whole minutes since ``created_at``; never negative"""
    seconds = (now - created_at).total_seconds()
    return max(0, int(seconds // 60))


def format_elapsed(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}m"
    return f"{minutes // 60}h {minutes % 60}m"


def urgency_for(minutes: int) -> UrgencyLevel:
    if minutes < ATTENTION_AFTER_MINUTES:
        return UrgencyLevel.FRESH
    if minutes < URGENT_AFTER_MINUTES:
        return UrgencyLevel.ATTENTION
    return UrgencyLevel.URGENT


def table_sort_key(table_id: str):
    """Sort ``table-2`` before ``table-10``; ids without digits go last"""
    match = _TABLE_NUMBER.search(table_id)
    number = int(match.group()) if match else float("inf")
    return (number, table_id)


class KitchenDisplayService:
    """Builds the kitchen queue and its status counts from an order store"""

    def __init__(self, store: OrderStore,
                 clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.clock = clock or datetime.utcnow

    def kitchen_orders(self) -> List[Order]:
        return [
            order for order in self.store.list()
            if order.status in KITCHEN_STATUSES
        ]

    def get_queue(
        self,
        status_filter: KitchenStatusFilter = KitchenStatusFilter.ALL,
        sort_by: KitchenSortOption = KitchenSortOption.TIME_ASC,
    ) -> List[KitchenTicket]:
        orders = self.kitchen_orders()
        if status_filter != KitchenStatusFilter.ALL:
            orders = [
                order for order in orders
                if order.status.value == status_filter.value
            ]

        if sort_by == KitchenSortOption.TIME_DESC:
            orders.sort(key=lambda order: order.created_at, reverse=True)
        elif sort_by == KitchenSortOption.TABLE_ASC:
            orders.sort(key=lambda order: table_sort_key(order.table_id))
        else:
            # urgency is longest wait first, which is also creation order
            orders.sort(key=lambda order: order.created_at)

        now = self.clock()
        tickets = []
        for order in orders:
            minutes = elapsed_minutes(order.created_at, now)
            tickets.append(KitchenTicket(
                order=order,
                elapsed_minutes=minutes,
                elapsed_label=format_elapsed(minutes),
                urgency=urgency_for(minutes),
            ))

        logger.debug(
            f"Kitchen queue: {len(tickets)} orders "
            f"(filter={status_filter.value}, sort={sort_by.value})"
        )
        return tickets

    def get_summary(self) -> KitchenSummary:
        orders = self.kitchen_orders()
        counts = {status: 0 for status in KITCHEN_STATUSES}
        for order in orders:
            counts[order.status] += 1
        return KitchenSummary(
            confirmed=counts[OrderStatus.CONFIRMED],
            preparing=counts[OrderStatus.PREPARING],
            ready=counts[OrderStatus.READY],
            total=len(orders),
        )

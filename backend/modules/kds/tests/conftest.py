# backend/modules/kds/tests/conftest.py

"""
Fixtures for kitchen display tests.
"""

import pytest
from decimal import Decimal

from core.notification_adapter import RecordingAdapter
from modules.menu.schemas.menu_schemas import MenuItem
from modules.menu.services.menu_catalog import InMemoryMenuCatalog
from modules.orders.schemas.order_schemas import OrderCreate, OrderItemCreate
from modules.orders.services.order_lifecycle_service import (
    OrderLifecycleEngine, OrderLockRegistry
)
from modules.orders.services.order_store import InMemoryOrderStore


KITCHEN_MENU = [
    MenuItem(id="menu-1", name="Fries", price=Decimal("4.00"),
             preparation_time=6),
    MenuItem(id="menu-5", name="Ribeye Steak", price=Decimal("24.99"),
             preparation_time=20),
]


@pytest.fixture
def order_store():
    return InMemoryOrderStore()


@pytest.fixture
def lifecycle_engine(order_store, clock):
    return OrderLifecycleEngine(
        store=order_store,
        menu_catalog=InMemoryMenuCatalog(KITCHEN_MENU),
        notifier=RecordingAdapter(),
        clock=clock,
        lock_registry=OrderLockRegistry(),
    )


@pytest.fixture
def place_order(lifecycle_engine):
    """Create and confirm an order for a table"""

    def place(table_id: str, confirm: bool = True):
        order = lifecycle_engine.create_order(OrderCreate(
            table_id=table_id,
            items=[
                OrderItemCreate(menu_item_id="menu-5"),
                OrderItemCreate(menu_item_id="menu-1", quantity=2),
            ],
            created_by="waiter-1",
        )).order
        if confirm:
            order = lifecycle_engine.confirm_order(order.id).order
        return order

    return place


@pytest.fixture
def db_kitchen_menu(db_session):
    from modules.menu.models.menu_models import MenuItem as MenuItemModel

    for item in KITCHEN_MENU:
        db_session.add(MenuItemModel(**item.model_dump(
            exclude={"created_at", "updated_at"}
        )))
    db_session.commit()
    return KITCHEN_MENU

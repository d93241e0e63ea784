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


@pytest.fixture
def menu_items():
    return [
        MenuItem(id="menu-1", name="Caesar Salad", category="starters",
                 price=Decimal("8.50"), preparation_time=5),
        MenuItem(id="menu-2", name="Tomato Soup", category="starters",
                 price=Decimal("6.00"), preparation_time=3),
        MenuItem(id="menu-5", name="Ribeye Steak", category="mains",
                 price=Decimal("24.99"), preparation_time=20),
        MenuItem(id="menu-9", name="Seasonal Tart", category="desserts",
                 price=Decimal("7.25"), preparation_time=0,
                 is_available=False),
    ]


@pytest.fixture
def menu_catalog(menu_items):
    return InMemoryMenuCatalog(menu_items)


@pytest.fixture
def order_store():
    return InMemoryOrderStore()


@pytest.fixture
def notifier():
    return RecordingAdapter()


@pytest.fixture
def lifecycle_engine(order_store, menu_catalog, notifier, clock):
    return OrderLifecycleEngine(
        store=order_store,
        menu_catalog=menu_catalog,
        notifier=notifier,
        clock=clock,
        strict_transitions=False,
        lock_registry=OrderLockRegistry(),
    )


@pytest.fixture
def strict_engine(order_store, menu_catalog, notifier, clock):
    return OrderLifecycleEngine(
        store=order_store,
        menu_catalog=menu_catalog,
        notifier=notifier,
        clock=clock,
        strict_transitions=True,
        lock_registry=OrderLockRegistry(),
    )


@pytest.fixture
def steak_order_data():
    """One steak for table 4, the basic end-to-end order"""
    return OrderCreate(
        table_id="table-4",
        items=[OrderItemCreate(menu_item_id="menu-5", quantity=1)],
        customer_count=1,
        created_by="waiter-1",
    )


@pytest.fixture
def three_item_order_data():
    return OrderCreate(
        table_id="table-7",
        items=[
            OrderItemCreate(menu_item_id="menu-1", quantity=2),
            OrderItemCreate(menu_item_id="menu-2", quantity=1),
            OrderItemCreate(menu_item_id="menu-5", quantity=1,
                            special_instructions="medium rare"),
        ],
        customer_name="Jordan",
        customer_count=3,
        created_by="waiter-2",
    )


@pytest.fixture
def db_menu(db_session, menu_items):
    """Persist the menu fixture into the test database"""
    from modules.menu.models.menu_models import MenuItem as MenuItemModel

    for item in menu_items:
        db_session.add(MenuItemModel(**item.model_dump(
            exclude={"created_at", "updated_at"}
        )))
    db_session.commit()
    return menu_items

import pytest
from decimal import Decimal

from core.exceptions import NotFoundError
from modules.orders.enums.order_enums import OrderItemStatus, OrderStatus
from modules.orders.models.order_models import OrderItem as OrderItemRecord
from modules.orders.services.order_lifecycle_service import (
    OrderLifecycleEngine, OrderLockRegistry
)
from modules.orders.services.order_store import (
    InMemoryOrderStore, SQLAlchemyOrderStore, format_order_number
)


@pytest.fixture
def sql_store(db_session):
    return SQLAlchemyOrderStore(db_session)


@pytest.fixture
def sql_engine(sql_store, menu_catalog, notifier, clock):
    return OrderLifecycleEngine(
        store=sql_store,
        menu_catalog=menu_catalog,
        notifier=notifier,
        clock=clock,
        lock_registry=OrderLockRegistry(),
    )


class TestFormatOrderNumber:
    def test_zero_padded(self):
        assert format_order_number(1, "ORD", 3) == "ORD-001"
        assert format_order_number(42, "ORD", 3) == "ORD-042"

    def test_wider_numbers_are_not_truncated(self):
        assert format_order_number(1234, "ORD", 3) == "ORD-1234"

    def test_defaults_come_from_settings(self):
        assert format_order_number(7) == "ORD-007"


class TestInMemoryOrderStore:
    def test_get_returns_a_copy(self, lifecycle_engine, steak_order_data,
                                order_store):
        order = lifecycle_engine.create_order(steak_order_data).order

        fetched = order_store.get(order.id)
        fetched.status = OrderStatus.CANCELLED
        fetched.items[0].status = OrderItemStatus.SERVED

        stored = order_store.get(order.id)
        assert stored.status == OrderStatus.PENDING
        assert stored.items[0].status == OrderItemStatus.PENDING

    def test_list_is_oldest_first(self, lifecycle_engine, steak_order_data,
                                  order_store, clock):
        first = lifecycle_engine.create_order(steak_order_data).order
        clock.advance(minutes=1)
        second = lifecycle_engine.create_order(steak_order_data).order

        assert [o.id for o in order_store.list()] == [first.id, second.id]

    def test_counter_start(self):
        store = InMemoryOrderStore(counter_start=99)
        assert store.next_order_number() == "ORD-100"

    def test_unknown_order(self, order_store):
        with pytest.raises(NotFoundError):
            order_store.get("order-missing")


class TestSQLAlchemyOrderStore:
    def test_round_trip(self, sql_engine, sql_store, three_item_order_data):
        created = sql_engine.create_order(three_item_order_data).order

        loaded = sql_store.get(created.id)

        assert loaded.order_number == "ORD-001"
        assert loaded.table_id == "table-7"
        assert loaded.customer_name == "Jordan"
        assert loaded.status == OrderStatus.PENDING
        assert loaded.subtotal == Decimal("47.99")
        assert loaded.tax == Decimal("4.80")
        assert loaded.total == Decimal("52.79")
        assert [item.id for item in loaded.items] == ["item-1", "item-2", "item-3"]
        assert loaded.items[0].quantity == 2
        assert loaded.items[2].menu_item.name == "Ribeye Steak"
        assert loaded.items[2].special_instructions == "medium rare"
        assert loaded.created_at == created.created_at
        assert len(loaded.history) == 1

    def test_order_numbers_continue_across_store_instances(
            self, db_session, sql_store):
        assert sql_store.next_order_number() == "ORD-001"
        assert sql_store.next_order_number() == "ORD-002"

        assert SQLAlchemyOrderStore(db_session).next_order_number() == "ORD-003"

    def test_save_overwrites_items_and_appends_history(
            self, sql_engine, sql_store, steak_order_data, clock):
        order = sql_engine.create_order(steak_order_data).order
        sql_engine.start_preparing(order.id)
        clock.advance(minutes=15)
        sql_engine.set_item_status(order.id, "item-1", OrderItemStatus.READY,
                                   prepared_by="chef-1")

        loaded = sql_store.get(order.id)

        assert loaded.status == OrderStatus.READY
        assert loaded.items[0].status == OrderItemStatus.READY
        assert loaded.items[0].prepared_by == "chef-1"
        assert loaded.items[0].prepared_at == clock.now
        assert [entry.new_status for entry in loaded.history] == [
            OrderStatus.PENDING, OrderStatus.PREPARING, OrderStatus.READY
        ]

    def test_save_removes_dropped_items(self, sql_engine, sql_store,
                                        three_item_order_data, db_session):
        order = sql_engine.create_order(three_item_order_data).order

        order.items = order.items[:1]
        sql_store.save(order)

        assert [item.id for item in sql_store.get(order.id).items] == ["item-1"]
        assert db_session.query(OrderItemRecord).count() == 1

    def test_end_to_end_scenario(self, sql_engine, sql_store,
                                 steak_order_data):
        order = sql_engine.create_order(steak_order_data).order
        assert order.total == Decimal("27.49")

        sql_engine.start_preparing(order.id)
        sql_engine.set_item_status(order.id, "item-1", OrderItemStatus.READY)
        assert sql_store.get(order.id).status == OrderStatus.READY

        sql_engine.set_item_status(order.id, "item-1", OrderItemStatus.SERVED)
        loaded = sql_store.get(order.id)
        assert loaded.status == OrderStatus.SERVED
        assert loaded.items[0].prepared_at is not None

    def test_cancelled_orders_are_still_listed(self, sql_engine, sql_store,
                                               steak_order_data):
        order = sql_engine.create_order(steak_order_data).order

        sql_engine.cancel_order(order.id)

        orders = sql_store.list()
        assert len(orders) == 1
        assert orders[0].status == OrderStatus.CANCELLED

    def test_completion_timestamp_persisted(self, sql_engine, sql_store,
                                            steak_order_data, clock):
        order = sql_engine.create_order(steak_order_data).order
        clock.advance(hours=1)

        sql_engine.complete_order(order.id)

        assert sql_store.get(order.id).completed_at == clock.now

    def test_unknown_order(self, sql_store):
        with pytest.raises(NotFoundError) as exc_info:
            sql_store.get("order-missing")
        assert exc_info.value.identifier == "order-missing"

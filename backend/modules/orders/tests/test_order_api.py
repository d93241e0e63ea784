import pytest
from decimal import Decimal


@pytest.fixture
def steak_payload():
    return {
        "table_id": "table-4",
        "items": [{"menu_item_id": "menu-5", "quantity": 1}],
        "customer_count": 1,
        "created_by": "waiter-1",
    }


@pytest.fixture
def created_order(client, db_menu, steak_payload):
    response = client.post("/orders/", json=steak_payload)
    assert response.status_code == 201
    return response.json()


class TestCreateOrderEndpoint:
    def test_create_order(self, created_order):
        """Test creating an order through the API"""
        assert created_order["order_number"] == "ORD-001"
        assert created_order["status"] == "pending"
        assert Decimal(created_order["subtotal"]) == Decimal("24.99")
        assert Decimal(created_order["tax"]) == Decimal("2.50")
        assert Decimal(created_order["total"]) == Decimal("27.49")
        assert created_order["items"][0]["id"] == "item-1"
        assert created_order["items"][0]["status"] == "pending"
        assert created_order["completed_at"] is None

    def test_empty_cart(self, client, db_menu):
        response = client.post("/orders/", json={
            "table_id": "table-4", "items": [], "created_by": "waiter-1",
        })

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert response.json()["path"] == "/orders/"

    def test_unknown_menu_item(self, client, db_menu):
        response = client.post("/orders/", json={
            "table_id": "table-4",
            "items": [{"menu_item_id": "menu-404"}],
            "created_by": "waiter-1",
        })

        assert response.status_code == 404
        assert response.json()["detail"] == "Menu item not found: menu-404"
        assert response.json()["error_code"] == "NOT_FOUND"

    def test_missing_creator_is_rejected(self, client, db_menu):
        response = client.post("/orders/", json={
            "table_id": "table-4", "items": [{"menu_item_id": "menu-5"}],
        })
        assert response.status_code == 422


class TestReadOrderEndpoints:
    def test_get_order(self, client, created_order):
        response = client.get(f"/orders/{created_order['id']}")
        assert response.status_code == 200
        assert response.json()["order_number"] == "ORD-001"

    def test_get_unknown_order(self, client, db_session):
        response = client.get("/orders/order-missing")
        assert response.status_code == 404
        assert response.json()["detail"] == "Order not found: order-missing"

    def test_list_orders_with_filters(self, client, created_order,
                                      steak_payload):
        second = client.post("/orders/", json={
            **steak_payload, "table_id": "table-9", "customer_name": "Rene",
        }).json()
        client.delete(f"/orders/{created_order['id']}")

        all_orders = client.get("/orders/").json()
        assert [o["id"] for o in all_orders] == [created_order["id"], second["id"]]

        active = client.get("/orders/", params={"active": True}).json()
        assert [o["id"] for o in active] == [second["id"]]

        cancelled = client.get("/orders/", params={"status": "cancelled"}).json()
        assert [o["id"] for o in cancelled] == [created_order["id"]]

        found = client.get("/orders/", params={"q": "rene"}).json()
        assert [o["id"] for o in found] == [second["id"]]

    def test_invalid_status_filter(self, client, db_session):
        response = client.get("/orders/", params={"status": "lost"})
        assert response.status_code == 422


class TestStatusEndpoints:
    def test_order_status_flow(self, client, created_order):
        order_id = created_order["id"]

        response = client.patch(f"/orders/{order_id}/status", json={
            "status": "confirmed", "changed_by": "waiter-1",
        })
        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"

        response = client.patch(f"/orders/{order_id}/items/item-1/status", json={
            "status": "preparing", "prepared_by": "chef-1",
        })
        assert response.json()["status"] == "preparing"

        response = client.patch(f"/orders/{order_id}/items/item-1/status", json={
            "status": "ready",
        })
        body = response.json()
        assert body["status"] == "ready"
        assert body["items"][0]["prepared_at"] is not None
        assert body["items"][0]["prepared_by"] == "chef-1"

        response = client.patch(f"/orders/{order_id}/items/item-1/status", json={
            "status": "served",
        })
        assert response.json()["status"] == "served"

        response = client.patch(f"/orders/{order_id}/status", json={
            "status": "completed",
        })
        body = response.json()
        assert body["status"] == "completed"
        assert body["completed_at"] is not None
        assert [h["new_status"] for h in body["history"]] == [
            "pending", "confirmed", "preparing", "ready", "served", "completed"
        ]

    def test_unknown_item(self, client, created_order):
        response = client.patch(
            f"/orders/{created_order['id']}/items/item-7/status",
            json={"status": "ready"},
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Order item not found: item-7"

    def test_invalid_status_value(self, client, created_order):
        response = client.patch(f"/orders/{created_order['id']}/status",
                                json={"status": "eaten"})
        assert response.status_code == 422


class TestDiscountAndCancel:
    def test_apply_discount(self, client, created_order):
        response = client.post(f"/orders/{created_order['id']}/discount",
                               json={"amount": "2.49"})
        assert response.status_code == 200
        assert Decimal(response.json()["total"]) == Decimal("25.00")

    def test_discount_over_total(self, client, created_order):
        response = client.post(f"/orders/{created_order['id']}/discount",
                               json={"amount": "100.00"})
        assert response.status_code == 400

    def test_cancel_keeps_the_order(self, client, created_order):
        response = client.delete(f"/orders/{created_order['id']}",
                                 params={"cancelled_by": "manager-1"})
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

        response = client.get(f"/orders/{created_order['id']}")
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"
        assert response.json()["history"][-1]["changed_by"] == "manager-1"

    def test_cancel_unknown_order_is_404(self, client):
        response = client.delete("/orders/order-404")
        assert response.status_code == 404
        assert response.json()["error_code"] == "NOT_FOUND"

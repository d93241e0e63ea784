"""Smoke tests for application assembly."""

from app.main import app
from app.startup import StartupValidator


class TestAppAssembly:
    def test_routes_are_mounted(self):
        paths = set(app.openapi()["paths"])

        assert "/orders/" in paths
        assert "/orders/{order_id}/items/{item_id}/status" in paths
        assert "/api/v1/kds/queue" in paths
        assert "/api/v1/kds/sound/toggle" in paths
        assert "/menu/items" in paths

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200


class TestStartupValidator:
    def test_environment_check_passes(self):
        validator = StartupValidator()
        assert validator.check_environment_config() is True
        assert validator.errors == []

# backend/modules/menu/tests/conftest.py

"""
Pytest configuration for menu catalog tests.
"""

import pytest
from decimal import Decimal

from modules.menu.schemas.menu_schemas import MenuItemCreate


@pytest.fixture
def burger_data() -> MenuItemCreate:
    return MenuItemCreate(
        id="menu-3",
        name="House Burger",
        category="mains",
        price=Decimal("14.50"),
        preparation_time=12,
    )

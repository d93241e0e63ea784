# backend/modules/menu/services/menu_catalog.py

"""
Menu catalog lookups used when orders are created.

Orders never read prices live: the lifecycle engine asks the catalog for a
menu item once and copies what it needs into the order line.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional
import logging

from sqlalchemy.orm import Session

from core.exceptions import ConflictError
from ..models import menu_models
from ..schemas.menu_schemas import MenuItem, MenuItemCreate

logger = logging.getLogger(__name__)


class MenuCatalog(ABC):
    """Read access to the menu for order creation"""

    @abstractmethod
    def get(self, menu_item_id: str) -> Optional[MenuItem]:
        """Return the menu item, or None when it does not exist"""
        pass

    @abstractmethod
    def list(self, available_only: bool = False) -> List[MenuItem]:
        pass


class InMemoryMenuCatalog(MenuCatalog):
    """Dictionary-backed catalog for tests and demos"""

    def __init__(self, items: Optional[Iterable[MenuItem]] = None):
        self._items: Dict[str, MenuItem] = {}
        for item in items or []:
            self.add(item)

    def add(self, item: MenuItem) -> MenuItem:
        self._items[item.id] = item
        return item

    def get(self, menu_item_id: str) -> Optional[MenuItem]:
        item = self._items.get(menu_item_id)
        return item.model_copy() if item else None

    def list(self, available_only: bool = False) -> List[MenuItem]:
        return [
            item.model_copy() for item in self._items.values()
            if item.is_available or not available_only
        ]


class SQLAlchemyMenuCatalog(MenuCatalog):
    """Catalog backed by the menu_items table"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, menu_item_id: str) -> Optional[MenuItem]:
        record = self.db.query(menu_models.MenuItem).filter_by(
            id=menu_item_id
        ).first()
        return MenuItem.model_validate(record) if record else None

    def list(self, available_only: bool = False) -> List[MenuItem]:
        query = self.db.query(menu_models.MenuItem)
        if available_only:
            query = query.filter(menu_models.MenuItem.is_available.is_(True))
        return [
            MenuItem.model_validate(record)
            for record in query.order_by(menu_models.MenuItem.name).all()
        ]

    def create(self, item_data: MenuItemCreate) -> MenuItem:
        """Add a menu item; ids are caller-chosen and must be unique"""
        if self.db.query(menu_models.MenuItem).filter_by(id=item_data.id).first():
            raise ConflictError(f"Menu item already exists: {item_data.id}")

        record = menu_models.MenuItem(**item_data.model_dump())
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)

        logger.info(f"Created menu item: {record.name} ({record.id})")
        return MenuItem.model_validate(record)

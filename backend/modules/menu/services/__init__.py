# backend/modules/menu/services/__init__.py

from .menu_catalog import MenuCatalog, InMemoryMenuCatalog, SQLAlchemyMenuCatalog

__all__ = ["MenuCatalog", "InMemoryMenuCatalog", "SQLAlchemyMenuCatalog"]

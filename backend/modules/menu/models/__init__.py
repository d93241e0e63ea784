# backend/modules/menu/models/__init__.py

from .menu_models import MenuItem

__all__ = ["MenuItem"]

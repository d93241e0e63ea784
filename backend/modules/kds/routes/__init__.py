# backend/modules/kds/routes/__init__.py

"""
Kitchen display routes.
"""

from .kds_routes import router

__all__ = ["router"]

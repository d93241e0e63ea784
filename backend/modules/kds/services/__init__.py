# backend/modules/kds/services/__init__.py

"""
Kitchen display services.
"""

from .kitchen_display_service import (
    KitchenDisplayService,
    elapsed_minutes,
    format_elapsed,
    urgency_for,
)

__all__ = [
    "KitchenDisplayService",
    "elapsed_minutes",
    "format_elapsed",
    "urgency_for",
]

# backend/modules/kds/__init__.py

"""
Kitchen display module: the kitchen queue, wait-time urgency and the
kitchen-side order actions.
"""

from .schemas import *
from .services import *

__all__ = [
    # Services
    "KitchenDisplayService",
    # Schemas
    "KitchenStatusFilter",
    "KitchenSortOption",
    "UrgencyLevel",
    "KitchenTicket",
    "KitchenSummary",
]

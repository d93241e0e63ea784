# backend/modules/kds/schemas/__init__.py

"""
Kitchen display schemas.
"""

from .kds_schemas import (
    KitchenStatusFilter,
    KitchenSortOption,
    UrgencyLevel,
    KitchenTicket,
    KitchenSummary,
    KitchenActionRequest,
    SoundCueOut,
    SoundCuesResponse,
    SoundToggleResponse,
)

__all__ = [
    "KitchenStatusFilter",
    "KitchenSortOption",
    "UrgencyLevel",
    "KitchenTicket",
    "KitchenSummary",
    "KitchenActionRequest",
    "SoundCueOut",
    "SoundCuesResponse",
    "SoundToggleResponse",
]

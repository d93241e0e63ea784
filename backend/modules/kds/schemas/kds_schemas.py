# backend/modules/kds/schemas/kds_schemas.py

"""
Pydantic schemas for the kitchen display.
"""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime
from enum import Enum

from modules.orders.schemas.order_schemas import Order


class KitchenStatusFilter(str, Enum):
    ALL = "all"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"


class KitchenSortOption(str, Enum):
    TIME_ASC = "time-asc"  # oldest first
    TIME_DESC = "time-desc"
    TABLE_ASC = "table-asc"
    URGENCY = "urgency"  # longest wait first


class UrgencyLevel(str, Enum):
    FRESH = "fresh"
    ATTENTION = "attention"
    URGENT = "urgent"


class KitchenTicket(BaseModel):
    """An order as shown on the kitchen display"""

    order: Order
    elapsed_minutes: int = Field(..., ge=0)
    elapsed_label: str
    urgency: UrgencyLevel


class KitchenSummary(BaseModel):
    """Counts of kitchen orders per status"""

    confirmed: int = 0
    preparing: int = 0
    ready: int = 0
    total: int = 0


class KitchenActionRequest(BaseModel):
    staff_id: Optional[str] = None


class SoundCueOut(BaseModel):
    kind: str
    frequency: int
    duration_ms: int
    repeat: int
    message: str
    timestamp: datetime


class SoundToggleResponse(BaseModel):
    enabled: bool


class SoundCuesResponse(BaseModel):
    enabled: bool
    cues: List[SoundCueOut] = Field(default_factory=list)
    config: Dict[str, Dict[str, Any]] = Field(default_factory=dict)

# backend/modules/kds/routes/kds_routes.py

"""
API routes for the kitchen display.
"""

from dataclasses import asdict
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
import logging

from core.database import get_db
from core.notification_adapter import (
    SOUND_CUES, SoundCueAdapter, get_sound_cue_adapter
)
from modules.orders.enums.order_enums import OrderItemStatus
from modules.orders.routes.order_routes import get_lifecycle_engine
from modules.orders.schemas.order_schemas import Order
from modules.orders.services.order_lifecycle_service import (
    OrderLifecycleEngine
)
from modules.orders.services.order_store import SQLAlchemyOrderStore
from ..services.kitchen_display_service import KitchenDisplayService
from ..schemas.kds_schemas import (
    KitchenActionRequest, KitchenSortOption, KitchenStatusFilter,
    KitchenSummary, KitchenTicket, SoundCuesResponse, SoundToggleResponse
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/kds", tags=["Kitchen Display System"])


def get_kitchen_display(
    db: Session = Depends(get_db)
) -> KitchenDisplayService:
    return KitchenDisplayService(SQLAlchemyOrderStore(db))


# ========== Queue ==========

@router.get("/queue", response_model=List[KitchenTicket])
def get_kitchen_queue(
    status: KitchenStatusFilter = Query(KitchenStatusFilter.ALL),
    sort: KitchenSortOption = Query(KitchenSortOption.TIME_ASC),
    service: KitchenDisplayService = Depends(get_kitchen_display),
):
    """Orders that are confirmed, preparing or ready, with wait times"""
    return service.get_queue(status_filter=status, sort_by=sort)


@router.get("/summary", response_model=KitchenSummary)
def get_kitchen_summary(
    service: KitchenDisplayService = Depends(get_kitchen_display),
):
    return service.get_summary()


# ========== Kitchen Actions ==========

@router.post("/orders/{order_id}/start", response_model=Order)
def start_order(
    order_id: str,
    action: Optional[KitchenActionRequest] = None,
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    staff_id = action.staff_id if action else None
    return engine.start_preparing(order_id, changed_by=staff_id).order


@router.post("/orders/{order_id}/ready", response_model=Order)
def mark_order_ready(
    order_id: str,
    action: Optional[KitchenActionRequest] = None,
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    staff_id = action.staff_id if action else None
    return engine.mark_order_ready(order_id, prepared_by=staff_id).order


@router.post("/orders/{order_id}/bump", response_model=Order)
def bump_order(
    order_id: str,
    action: Optional[KitchenActionRequest] = None,
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    """Hand the order to the floor; item statuses are not touched"""
    staff_id = action.staff_id if action else None
    return engine.bump_order(order_id, changed_by=staff_id).order


@router.post("/orders/{order_id}/items/{item_id}/ready", response_model=Order)
def mark_item_ready(
    order_id: str,
    item_id: str,
    action: Optional[KitchenActionRequest] = None,
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    staff_id = action.staff_id if action else None
    return engine.set_item_status(
        order_id, item_id, OrderItemStatus.READY, prepared_by=staff_id
    ).order


# ========== Sound Cues ==========

@router.get("/sound-cues", response_model=SoundCuesResponse)
def poll_sound_cues(
    sounds: SoundCueAdapter = Depends(get_sound_cue_adapter),
):
    """Return and clear the cues queued since the last poll"""
    return SoundCuesResponse(
        enabled=sounds.enabled,
        cues=sounds.drain(),
        config={kind: asdict(cue) for kind, cue in SOUND_CUES.items()},
    )


@router.post("/sound/toggle", response_model=SoundToggleResponse)
def toggle_sound(
    sounds: SoundCueAdapter = Depends(get_sound_cue_adapter),
):
    enabled = sounds.toggle()
    logger.info(f"Kitchen sound notifications {'on' if enabled else 'off'}")
    return SoundToggleResponse(enabled=enabled)

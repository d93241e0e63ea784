from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from core.database import get_db
from core.notification_adapter import get_notification_adapter
from modules.menu.services.menu_catalog import SQLAlchemyMenuCatalog
from ..enums.order_enums import OrderStatus
from ..schemas.order_schemas import (
    DiscountUpdate, Order, OrderCreate, OrderItemStatusUpdate,
    OrderStatusUpdate
)
from ..services.order_lifecycle_service import OrderLifecycleEngine
from ..services.order_query_service import list_orders
from ..services.order_store import SQLAlchemyOrderStore

router = APIRouter(prefix="/orders", tags=["Orders"])


def get_order_store(db: Session = Depends(get_db)) -> SQLAlchemyOrderStore:
    return SQLAlchemyOrderStore(db)


def get_lifecycle_engine(
    db: Session = Depends(get_db)
) -> OrderLifecycleEngine:
    return OrderLifecycleEngine(
        store=SQLAlchemyOrderStore(db),
        menu_catalog=SQLAlchemyMenuCatalog(db),
        notifier=get_notification_adapter(),
    )


@router.get("/", response_model=List[Order])
def get_orders(
    status: Optional[OrderStatus] = Query(
        None, description="Filter by order status"
    ),
    active: Optional[bool] = Query(
        None, description="Only orders that are (not) completed or cancelled"
    ),
    q: Optional[str] = Query(
        None, description="Search order number, customer name or table"
    ),
    newest_first: bool = Query(False, description="Reverse creation order"),
    store: SQLAlchemyOrderStore = Depends(get_order_store),
):
    """
    Retrieve orders with optional filtering.

    - **status**: Filter by order status (pending, confirmed, etc.)
    - **active**: true for open orders, false for completed/cancelled ones
    - **q**: Case-insensitive search text
    """
    return list_orders(store, status=status, active=active, search=q,
                       newest_first=newest_first)


@router.post("/", response_model=Order, status_code=status.HTTP_201_CREATED)
def create_order(
    order_data: OrderCreate,
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    return engine.create_order(order_data).order


@router.get("/{order_id}", response_model=Order)
def get_order(
    order_id: str, store: SQLAlchemyOrderStore = Depends(get_order_store)
):
    return store.get(order_id)


@router.patch("/{order_id}/status", response_model=Order)
def update_order_status(
    order_id: str,
    update: OrderStatusUpdate,
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    return engine.set_order_status(
        order_id, update.status, update.changed_by, update.notes
    ).order


@router.patch("/{order_id}/items/{item_id}/status", response_model=Order)
def update_item_status(
    order_id: str,
    item_id: str,
    update: OrderItemStatusUpdate,
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    """Update one item; the order status follows its items"""
    return engine.set_item_status(
        order_id, item_id, update.status, update.prepared_by
    ).order


@router.post("/{order_id}/discount", response_model=Order)
def apply_order_discount(
    order_id: str,
    discount: DiscountUpdate,
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    return engine.apply_discount(order_id, discount.amount).order


@router.delete("/{order_id}", response_model=Order)
def cancel_order(
    order_id: str,
    cancelled_by: Optional[str] = Query(None),
    engine: OrderLifecycleEngine = Depends(get_lifecycle_engine),
):
    """Cancel the order; the record is kept with status cancelled"""
    return engine.cancel_order(order_id, changed_by=cancelled_by).order

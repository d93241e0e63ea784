from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from core.database import get_db
from core.exceptions import NotFoundError
from ..schemas.menu_schemas import MenuItem, MenuItemCreate
from ..services.menu_catalog import SQLAlchemyMenuCatalog

router = APIRouter(prefix="/menu", tags=["Menu"])


@router.get("/items", response_model=List[MenuItem])
def list_menu_items(
    available_only: bool = Query(
        False, description="Only return items that can currently be ordered"
    ),
    db: Session = Depends(get_db)
):
    return SQLAlchemyMenuCatalog(db).list(available_only=available_only)


@router.get("/items/{item_id}", response_model=MenuItem)
def get_menu_item(item_id: str, db: Session = Depends(get_db)):
    item = SQLAlchemyMenuCatalog(db).get(item_id)
    if item is None:
        raise NotFoundError("Menu item", item_id)
    return item


@router.post("/items", response_model=MenuItem, status_code=201)
def create_menu_item(
    item_data: MenuItemCreate,
    db: Session = Depends(get_db)
):
    """
    Add a menu item that orders can reference.

    - **id**: caller-chosen identifier, e.g. `menu-5`
    - **price**: unit price copied into each order line at add-time
    - **preparation_time**: minutes, shown on the kitchen display
    """
    return SQLAlchemyMenuCatalog(db).create(item_data)

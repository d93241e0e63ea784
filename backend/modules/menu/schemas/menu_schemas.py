from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class MenuItemBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    category: Optional[str] = Field(None, max_length=50)
    price: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    is_available: bool = True
    preparation_time: int = Field(default=0, ge=0,
                                  description="Preparation time in minutes")


class MenuItemCreate(MenuItemBase):
    id: str = Field(..., min_length=1, max_length=64)


class MenuItem(MenuItemBase):
    id: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

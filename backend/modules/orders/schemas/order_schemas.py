from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime
from decimal import Decimal
from ..enums.order_enums import OrderStatus, OrderItemStatus


class MenuItemSnapshot(BaseModel):
    """Menu data copied into an order line when the line is created"""

    name: str
    price: Decimal
    preparation_time: int = 0

    model_config = ConfigDict(from_attributes=True)


class OrderItem(BaseModel):
    id: str
    menu_item_id: str
    menu_item: MenuItemSnapshot
    quantity: int = Field(..., gt=0)
    price: Decimal
    status: OrderItemStatus = OrderItemStatus.PENDING
    special_instructions: Optional[str] = None
    prepared_by: Optional[str] = None
    prepared_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def line_total(self) -> Decimal:
        return self.price * self.quantity


class OrderHistoryEntry(BaseModel):
    previous_status: Optional[OrderStatus] = None
    new_status: OrderStatus
    changed_by: Optional[str] = None
    notes: Optional[str] = None
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class Order(BaseModel):
    """
    An order as the lifecycle engine sees it.

    Financial fields are derived: subtotal, tax and total are recomputed
    from the line items and discount after every mutation.
    """

    id: str
    order_number: str
    table_id: str
    items: List[OrderItem]
    status: OrderStatus = OrderStatus.PENDING
    subtotal: Decimal = Decimal("0.00")
    tax: Decimal = Decimal("0.00")
    discount: Decimal = Decimal("0.00")
    total: Decimal = Decimal("0.00")
    created_by: str
    customer_name: Optional[str] = None
    customer_count: Optional[int] = Field(None, gt=0)
    special_requests: Optional[str] = None
    history: List[OrderHistoryEntry] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    completed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    def find_item(self, item_id: str) -> Optional[OrderItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    @property
    def item_statuses(self) -> List[OrderItemStatus]:
        return [item.status for item in self.items]


class OrderItemCreate(BaseModel):
    menu_item_id: str
    quantity: int = Field(1, gt=0)
    special_instructions: Optional[str] = None


class OrderCreate(BaseModel):
    table_id: str = Field(..., min_length=1)
    items: List[OrderItemCreate]
    customer_name: Optional[str] = Field(None, max_length=100)
    customer_count: Optional[int] = Field(None, gt=0)
    special_requests: Optional[str] = None
    created_by: str = Field(..., min_length=1,
                            description="User ID of the waiter placing the order")


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    changed_by: Optional[str] = None
    notes: Optional[str] = None


class OrderItemStatusUpdate(BaseModel):
    status: OrderItemStatus
    prepared_by: Optional[str] = None


class DiscountUpdate(BaseModel):
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)

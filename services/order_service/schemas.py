from datetime import datetime
from typing import List, Literal, Optional, get_args

from pydantic import BaseModel, Field

OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]

ORDER_STATUSES = get_args(OrderStatus)

MAX_ITEM_QUANTITY = 10_000


class OrderItemCreate(BaseModel):
    product_id: int
    quantity: int = Field(gt=0, le=MAX_ITEM_QUANTITY)
    # Accepted for compatibility with older clients; the stored price always comes from the product service
    price: Optional[float] = None


class OrderCreate(BaseModel):
    user_id: Optional[int] = None
    items: List[OrderItemCreate] = Field(default_factory=list)


class StatusUpdate(BaseModel):
    status: Optional[str] = None


class OrderItemResponse(BaseModel):
    id: int
    order_id: int
    product_id: int
    quantity: int
    price: float
    created_at: Optional[datetime] = None
    product_info: Optional[dict] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    id: int
    user_id: int
    total_price: float
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    user_info: Optional[dict] = None

    class Config:
        from_attributes = True


class OrderDetailResponse(OrderResponse):
    items: List[OrderItemResponse] = []

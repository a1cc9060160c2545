from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

ProductStatus = Literal["active", "inactive"]

# Largest value an INTEGER column holds
MAX_INT = 2**31 - 1


class ProductCreate(BaseModel):
    name: str
    merchant_id: int
    description: Optional[str] = None
    # NUMERIC(10, 2)
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0, le=MAX_INT)
    category: Optional[str] = None
    image_url: Optional[str] = None
    status: ProductStatus = "active"


class ProductUpdate(ProductCreate):
    pass


class StockUpdate(BaseModel):
    quantity: int = Field(ge=-MAX_INT, le=MAX_INT)  # signed delta added to current stock


class ProductResponse(BaseModel):
    id: int
    name: str
    merchant_id: int
    description: Optional[str] = None
    price: float
    stock: int
    category: Optional[str] = None
    image_url: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    merchant_info: Optional[dict] = None

    class Config:
        from_attributes = True

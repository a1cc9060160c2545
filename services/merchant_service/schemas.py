from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel

MerchantStatus = Literal["active", "inactive", "suspended"]


class MerchantCreate(BaseModel):
    name: str
    owner_id: Optional[int] = None
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    status: MerchantStatus = "active"


class MerchantUpdate(MerchantCreate):
    pass


class MerchantResponse(BaseModel):
    id: int
    name: str
    owner_id: Optional[int] = None
    description: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

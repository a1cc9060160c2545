from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from shared.config.database import Base


class Product(Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("price >= 0", name="ck_products_price_non_negative"),
        CheckConstraint("stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    merchant_id = Column(Integer, nullable=False)  # validated against merchant service at creation
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2, asdecimal=False), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    category = Column(String(100), nullable=True)
    image_url = Column(String(500), nullable=True)
    status = Column(String(20), nullable=False, default="active")  # active, inactive
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Product
from .schemas import MAX_INT

class ProductRepository:

    @staticmethod
    async def create_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def get_all_products(db: AsyncSession):
        result = await db.execute(select(Product).order_by(Product.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_product_by_id(db: AsyncSession, product_id: int) -> Optional[Product]:
        result = await db.execute(select(Product).where(Product.id == product_id))
        return result.scalars().first()

    @staticmethod
    async def update_product(db: AsyncSession, product: Product):
        db.add(product)
        await db.commit()
        await db.refresh(product)
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, product: Product):
        await db.delete(product)
        await db.commit()

    @staticmethod
    async def adjust_stock(db: AsyncSession, product_id: int, quantity: int) -> bool:
        """
        Adds `quantity` to stock in one statement. False if the row is missing
        or the result would leave the range of the INTEGER column.
        """
        if quantity >= 0:
            in_range = Product.stock <= MAX_INT - quantity
        else:
            in_range = Product.stock >= -quantity
        stmt = (
            update(Product)
            .where(Product.id == product_id, in_range)
            .values(stock=Product.stock + quantity)
            .execution_options(synchronize_session=False)
        )
        result = await db.execute(stmt)
        await db.commit()
        return result.rowcount == 1

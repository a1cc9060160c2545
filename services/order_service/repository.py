from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .models import Order, OrderItem

class OrderRepository:
    @staticmethod
    async def create_order(db: AsyncSession, order: Order) -> Order:
        """
        Inserts the header and every item in a single transaction.

        Nothing is visible to other sessions until the one commit; any failure
        rolls back the header together with whatever items were already sent.
        """
        try:
            db.add(order)
            await db.flush()  # header first, then the items referencing its id
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise
        return await OrderRepository.get_order(db, order.id)

    @staticmethod
    async def get_all_orders(db: AsyncSession) -> list[Order]:
        result = await db.execute(select(Order).order_by(Order.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_order(db: AsyncSession, order_id: int) -> Optional[Order]:
        result = await db.execute(
            select(Order)
            .options(selectinload(Order.items))
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        return result.scalars().first()

    @staticmethod
    async def update_status(db: AsyncSession, order_id: int, status: str) -> Optional[Order]:
        result = await db.execute(select(Order).where(Order.id == order_id))
        order = result.scalars().first()

        if not order:
            return None

        order.status = status

        await db.commit()
        await db.refresh(order)
        return order

    @staticmethod
    async def delete_order(db: AsyncSession, order_id: int) -> bool:
        """Removes the order and all of its items together. False if the order does not exist."""
        try:
            result = await db.execute(select(Order.id).where(Order.id == order_id))
            if result.scalar() is None:
                await db.rollback()
                return False

            await db.execute(delete(OrderItem).where(OrderItem.order_id == order_id))
            await db.execute(delete(Order).where(Order.id == order_id))
            await db.commit()
        except SQLAlchemyError:
            await db.rollback()
            raise
        return True

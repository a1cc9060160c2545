from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Merchant


class MerchantRepository:

    @staticmethod
    async def create(db: AsyncSession, merchant: Merchant) -> Merchant:
        db.add(merchant)
        await db.commit()
        await db.refresh(merchant)
        return merchant

    @staticmethod
    async def get_all(db: AsyncSession) -> list[Merchant]:
        result = await db.execute(select(Merchant).order_by(Merchant.id))
        return list(result.scalars().all())

    @staticmethod
    async def get_by_id(db: AsyncSession, merchant_id: int) -> Optional[Merchant]:
        result = await db.execute(select(Merchant).where(Merchant.id == merchant_id))
        return result.scalars().first()

    @staticmethod
    async def update(db: AsyncSession, merchant: Merchant) -> Merchant:
        db.add(merchant)
        await db.commit()
        await db.refresh(merchant)
        return merchant

    @staticmethod
    async def delete(db: AsyncSession, merchant: Merchant) -> None:
        await db.delete(merchant)
        await db.commit()

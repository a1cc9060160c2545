from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheAsideStore
from shared.errors import NotFound

from .models import Merchant
from .repository import MerchantRepository
from .schemas import MerchantCreate, MerchantResponse, MerchantUpdate

_FIELDS = ("name", "owner_id", "description", "phone", "email", "address", "status")


def merchant_snapshot(merchant: Merchant) -> dict:
    return MerchantResponse.model_validate(merchant).model_dump(mode="json")


def get_merchant_cache(request: Request) -> CacheAsideStore:
    resources = request.app.state.resources
    return CacheAsideStore(
        resources.redis,
        namespace="merchant",
        ttl=resources.settings.merchant_cache_ttl,
        loader=MerchantRepository.get_by_id,
        serializer=merchant_snapshot,
    )


class MerchantService:

    @staticmethod
    async def list_merchants(db: AsyncSession) -> list[Merchant]:
        return await MerchantRepository.get_all(db)

    @staticmethod
    async def get_merchant(db: AsyncSession, cache: CacheAsideStore, merchant_id: int) -> dict:
        merchant = await cache.get(db, merchant_id)
        if merchant is None:
            raise NotFound("Merchant not found")
        return merchant

    @staticmethod
    async def create_merchant(db: AsyncSession, data: MerchantCreate) -> Merchant:
        merchant = Merchant(**data.model_dump(include=set(_FIELDS)))
        return await MerchantRepository.create(db, merchant)

    @staticmethod
    async def update_merchant(
        db: AsyncSession, cache: CacheAsideStore, merchant_id: int, data: MerchantUpdate
    ) -> Merchant:
        merchant = await MerchantRepository.get_by_id(db, merchant_id)
        if not merchant:
            raise NotFound("Merchant not found")

        for field in _FIELDS:
            setattr(merchant, field, getattr(data, field))
        merchant = await MerchantRepository.update(db, merchant)

        await cache.put_invalidate(merchant_id)
        return merchant

    @staticmethod
    async def delete_merchant(db: AsyncSession, cache: CacheAsideStore, merchant_id: int) -> None:
        merchant = await MerchantRepository.get_by_id(db, merchant_id)
        if not merchant:
            raise NotFound("Merchant not found")
        await MerchantRepository.delete(db, merchant)
        await cache.put_invalidate(merchant_id)

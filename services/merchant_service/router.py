from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheAsideStore
from shared.config.database import get_db

from .schemas import MerchantCreate, MerchantResponse, MerchantUpdate
from .service import MerchantService, get_merchant_cache

router = APIRouter(tags=["Merchants"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health/status", include_in_schema=False)
async def health_check():
    return {"status": "Merchant Service is running"}


@router.get("/", response_model=list[MerchantResponse])
async def list_merchants(db: AsyncSession = Depends(get_db)):
    return await MerchantService.list_merchants(db)


@router.get("/{merchant_id}", response_model=MerchantResponse)
async def get_merchant(
    merchant_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_merchant_cache),
):
    return await MerchantService.get_merchant(db, cache, merchant_id)


@router.post("/", response_model=MerchantResponse, status_code=status.HTTP_201_CREATED)
async def create_merchant(payload: MerchantCreate, db: AsyncSession = Depends(get_db)):
    return await MerchantService.create_merchant(db, payload)


@router.put("/{merchant_id}")
async def update_merchant(
    merchant_id: int,
    payload: MerchantUpdate,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_merchant_cache),
):
    await MerchantService.update_merchant(db, cache, merchant_id, payload)
    return {"message": "Merchant updated successfully"}


@router.delete("/{merchant_id}")
async def delete_merchant(
    merchant_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_merchant_cache),
):
    await MerchantService.delete_merchant(db, cache, merchant_id)
    return {"message": "Merchant deleted successfully"}

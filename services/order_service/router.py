from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheAsideStore
from shared.clients import RemoteLookupClient, get_lookup_client
from shared.config.database import get_db

from .schemas import OrderCreate, OrderDetailResponse, OrderResponse, StatusUpdate
from .service import OrderService, get_order_cache

router = APIRouter(tags=["Orders"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health/status", include_in_schema=False)
async def health_check():
    return {"status": "Order Service is running"}


@router.get("/", response_model=list[OrderResponse])
async def list_orders(
    db: AsyncSession = Depends(get_db),
    lookup: RemoteLookupClient = Depends(get_lookup_client),
):
    return await OrderService.list_orders(db, lookup)


@router.get("/{order_id}", response_model=OrderDetailResponse)
async def get_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_order_cache),
    lookup: RemoteLookupClient = Depends(get_lookup_client),
):
    return await OrderService.get_order(db, cache, lookup, order_id)


@router.post("/", response_model=OrderDetailResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order: OrderCreate,
    db: AsyncSession = Depends(get_db),
    lookup: RemoteLookupClient = Depends(get_lookup_client),
):
    return await OrderService.create_order(db, lookup, order)


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: int,
    payload: StatusUpdate,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_order_cache),
):
    await OrderService.update_status(db, cache, order_id, payload.status)
    return {"message": "Order status updated successfully"}


@router.delete("/{order_id}")
async def delete_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_order_cache),
):
    await OrderService.delete_order(db, cache, order_id)
    return {"message": "Order deleted successfully"}

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheAsideStore
from shared.clients import RemoteLookupClient, get_lookup_client
from shared.config.database import get_db

from .schemas import ProductCreate, ProductResponse, ProductUpdate, StockUpdate
from .service import ProductService, get_product_cache

router = APIRouter(tags=["Products"])
public_router = APIRouter()  # For any public endpoints (e.g. health check)

@public_router.get("/health/status", include_in_schema=False)
async def health_check():
    return {"status": "Product Service is running"}


@router.get("/", response_model=list[ProductResponse])
async def list_products(
    db: AsyncSession = Depends(get_db),
    lookup: RemoteLookupClient = Depends(get_lookup_client),
):
    return await ProductService.list_products(db, lookup)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_product_cache),
    lookup: RemoteLookupClient = Depends(get_lookup_client),
):
    return await ProductService.get_product(db, cache, lookup, product_id)


@router.post("/", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
async def create_product(
    product: ProductCreate,
    db: AsyncSession = Depends(get_db),
    lookup: RemoteLookupClient = Depends(get_lookup_client),
):
    return await ProductService.create_product(db, lookup, product)


@router.put("/{product_id}")
async def update_product(
    product_id: int,
    payload: ProductUpdate,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_product_cache),
):
    await ProductService.update_product(db, cache, product_id, payload)
    return {"message": "Product updated successfully"}


@router.delete("/{product_id}")
async def delete_product(
    product_id: int,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_product_cache),
):
    await ProductService.delete_product(db, cache, product_id)
    return {"message": "Product deleted successfully"}


@router.put("/{product_id}/stock")
async def update_stock(
    product_id: int,
    payload: StockUpdate,
    db: AsyncSession = Depends(get_db),
    cache: CacheAsideStore = Depends(get_product_cache),
):
    await ProductService.adjust_stock(db, cache, product_id, payload.quantity)
    return {"message": "Stock updated successfully"}

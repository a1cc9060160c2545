from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheAsideStore
from shared.clients import RemoteLookupClient
from shared.errors import NotFound, ValidationError

from .models import Product
from .repository import ProductRepository
from .schemas import ProductCreate, ProductResponse, ProductUpdate

_FIELDS = ("name", "merchant_id", "description", "price", "stock", "category", "image_url", "status")


def product_snapshot(product: Product) -> dict:
    return ProductResponse.model_validate(product).model_dump(mode="json", exclude={"merchant_info"})


def get_product_cache(request: Request) -> CacheAsideStore:
    resources = request.app.state.resources
    return CacheAsideStore(
        resources.redis,
        namespace="product",
        ttl=resources.settings.product_cache_ttl,
        loader=ProductRepository.get_product_by_id,
        serializer=product_snapshot,
    )


class ProductService:

    @staticmethod
    async def list_products(db: AsyncSession, lookup: RemoteLookupClient) -> list[dict]:
        products = [product_snapshot(p) for p in await ProductRepository.get_all_products(db)]
        # Return the connection to the pool before waiting on the merchant service
        await db.commit()
        merchants = await lookup.fetch_many("merchant", [p["merchant_id"] for p in products])
        for product, merchant in zip(products, merchants):
            product["merchant_info"] = merchant
        return products

    @staticmethod
    async def get_product(
        db: AsyncSession, cache: CacheAsideStore, lookup: RemoteLookupClient, product_id: int
    ) -> dict:
        # The cached snapshot is the bare row; merchant info is attached fresh on every read
        product = await cache.get(db, product_id)
        await db.commit()
        if product is None:
            raise NotFound("Product not found")
        product["merchant_info"] = await lookup.fetch("merchant", product["merchant_id"])
        return product

    @staticmethod
    async def create_product(db: AsyncSession, lookup: RemoteLookupClient, data: ProductCreate) -> dict:
        merchant = await lookup.fetch("merchant", data.merchant_id)
        if merchant is None:
            raise ValidationError("Invalid merchant_id")

        product = Product(**data.model_dump(include=set(_FIELDS)))
        product = await ProductRepository.create_product(db, product)

        created = product_snapshot(product)
        created["merchant_info"] = merchant
        return created

    @staticmethod
    async def update_product(
        db: AsyncSession, cache: CacheAsideStore, product_id: int, data: ProductUpdate
    ) -> Product:
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFound("Product not found")

        for field in _FIELDS:
            setattr(product, field, getattr(data, field))
        product = await ProductRepository.update_product(db, product)

        await cache.put_invalidate(product_id)
        return product

    @staticmethod
    async def delete_product(db: AsyncSession, cache: CacheAsideStore, product_id: int) -> None:
        product = await ProductRepository.get_product_by_id(db, product_id)
        if not product:
            raise NotFound("Product not found")
        await ProductRepository.delete_product(db, product)
        await cache.put_invalidate(product_id)

    @staticmethod
    async def adjust_stock(db: AsyncSession, cache: CacheAsideStore, product_id: int, quantity: int) -> None:
        if not await ProductRepository.adjust_stock(db, product_id, quantity):
            if not await ProductRepository.get_product_by_id(db, product_id):
                raise NotFound("Product not found")
            if quantity > 0:
                raise ValidationError("Stock limit exceeded")
            raise ValidationError("Insufficient stock")

        await cache.put_invalidate(product_id)

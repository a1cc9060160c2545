"""
Order aggregate: creation (validate, price, persist atomically) and the
read side that enriches stored rows with user and product snapshots fetched
from their owning services.
"""
import asyncio
from decimal import ROUND_HALF_UP, Decimal

import structlog
from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.cache import CacheAsideStore
from shared.clients import RemoteLookupClient
from shared.errors import NotFound, StorageError, ValidationError
from shared.observability import ecomm_order_create_duration_seconds, ecomm_orders_created_total

from .models import Order, OrderItem
from .repository import OrderRepository
from .schemas import ORDER_STATUSES, OrderCreate, OrderDetailResponse, OrderResponse

logger = structlog.get_logger(__name__)

CENT = Decimal("0.01")
# total_price is NUMERIC(10, 2)
MAX_TOTAL = Decimal("99999999.99")


def order_snapshot(order: Order) -> dict:
    """Header plus items, as stored. Enrichment fields stay empty."""
    return OrderDetailResponse.model_validate(order).model_dump(mode="json")


def get_order_cache(request: Request) -> CacheAsideStore:
    resources = request.app.state.resources
    return CacheAsideStore(
        resources.redis,
        namespace="order",
        ttl=resources.settings.order_cache_ttl,
        loader=OrderRepository.get_order,
        serializer=order_snapshot,
    )


class OrderService:
    @staticmethod
    async def create_order(db: AsyncSession, lookup: RemoteLookupClient, data: OrderCreate) -> dict:
        with ecomm_order_create_duration_seconds.time():
            try:
                created = await OrderService._create_order(db, lookup, data)
            except ValidationError:
                ecomm_orders_created_total.labels(status="rejected").inc()
                raise
            except StorageError:
                ecomm_orders_created_total.labels(status="failed").inc()
                raise
        ecomm_orders_created_total.labels(status="success").inc()
        return created

    @staticmethod
    async def _create_order(db: AsyncSession, lookup: RemoteLookupClient, data: OrderCreate) -> dict:
        if not data.user_id or not data.items:
            raise ValidationError("user_id and items are required")

        # An unreachable user service is indistinguishable from an unknown user here
        user = await lookup.fetch("user", data.user_id)
        if user is None:
            raise ValidationError("Invalid user_id")

        products = await lookup.fetch_many("product", [item.product_id for item in data.items])

        total = Decimal("0")
        lines = []
        for item, product in zip(data.items, products):
            if product is None:
                raise ValidationError(f"Invalid product_id: {item.product_id}")
            unit_price = Decimal(str(product["price"])).quantize(CENT, rounding=ROUND_HALF_UP)
            total += unit_price * item.quantity
            lines.append(OrderItem(product_id=item.product_id, quantity=item.quantity, price=unit_price))

        total = total.quantize(CENT, rounding=ROUND_HALF_UP)
        if total > MAX_TOTAL:
            raise ValidationError("Order total exceeds the maximum allowed")

        order = Order(
            user_id=data.user_id,
            total_price=total,
            status="pending",
            items=lines,
        )
        try:
            order = await OrderRepository.create_order(db, order)
        except SQLAlchemyError as e:
            logger.error("order_write_failed", user_id=data.user_id, error=str(e))
            raise StorageError("Failed to create order") from e

        logger.info("order_created", order_id=order.id, user_id=order.user_id, total_price=order.total_price)
        created = order_snapshot(order)
        created["user_info"] = user
        return created

    @staticmethod
    async def list_orders(db: AsyncSession, lookup: RemoteLookupClient) -> list[dict]:
        orders = [
            OrderResponse.model_validate(o).model_dump(mode="json")
            for o in await OrderRepository.get_all_orders(db)
        ]
        # Return the connection to the pool before waiting on other services
        await db.commit()
        users = await lookup.fetch_many("user", [o["user_id"] for o in orders])
        for order, user in zip(orders, users):
            order["user_info"] = user
        return orders

    @staticmethod
    async def get_order(
        db: AsyncSession, cache: CacheAsideStore, lookup: RemoteLookupClient, order_id: int
    ) -> dict:
        order = await cache.get(db, order_id)
        await db.commit()
        if order is None:
            raise NotFound("Order not found")

        user, products = await asyncio.gather(
            lookup.fetch("user", order["user_id"]),
            lookup.fetch_many("product", [item["product_id"] for item in order["items"]]),
        )
        order["user_info"] = user
        for item, product in zip(order["items"], products):
            item["product_info"] = product
        return order

    @staticmethod
    async def update_status(db: AsyncSession, cache: CacheAsideStore, order_id: int, status: str) -> Order:
        # Any status may follow any other; only the value itself is checked
        if status not in ORDER_STATUSES:
            raise ValidationError("Invalid status")

        order = await OrderRepository.update_status(db, order_id, status)
        if not order:
            raise NotFound("Order not found")

        await cache.put_invalidate(order_id)
        return order

    @staticmethod
    async def delete_order(db: AsyncSession, cache: CacheAsideStore, order_id: int) -> None:
        if not await OrderRepository.delete_order(db, order_id):
            raise NotFound("Order not found")
        await cache.put_invalidate(order_id)

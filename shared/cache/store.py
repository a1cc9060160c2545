import json
from typing import Any, Awaitable, Callable, Optional

import structlog
from redis import asyncio as aioredis
from redis.exceptions import RedisError
from sqlalchemy.ext.asyncio import AsyncSession

from shared.observability.metrics import ecomm_cache_requests_total

logger = structlog.get_logger(__name__)

Loader = Callable[[AsyncSession, int], Awaitable[Optional[Any]]]
Serializer = Callable[[Any], dict]


class CacheAsideStore:
    """
    Read-through / write-invalidate cache in front of a repository lookup.

    Snapshots are stored as JSON under "<namespace>:<id>" with a fixed TTL.
    Absence is never cached. Redis being unreachable degrades every call to
    the relational store instead of failing the request.
    """

    def __init__(
        self,
        redis: aioredis.Redis,
        namespace: str,
        ttl: int,
        loader: Loader,
        serializer: Serializer,
    ):
        self.redis = redis
        self.namespace = namespace
        self.ttl = ttl
        self.loader = loader
        self.serializer = serializer

    def key(self, entity_id) -> str:
        return f"{self.namespace}:{entity_id}"

    async def get(self, db: AsyncSession, entity_id: int) -> Optional[dict]:
        key = self.key(entity_id)
        cache_ok = True
        try:
            cached = await self.redis.get(key)
        except RedisError as e:
            logger.warning("cache_read_failed", key=key, error=str(e))
            ecomm_cache_requests_total.labels(namespace=self.namespace, result="error").inc()
            cached, cache_ok = None, False

        if cached is not None:
            ecomm_cache_requests_total.labels(namespace=self.namespace, result="hit").inc()
            return json.loads(cached)

        if cache_ok:
            ecomm_cache_requests_total.labels(namespace=self.namespace, result="miss").inc()

        entity = await self.loader(db, entity_id)
        if entity is None:
            return None

        snapshot = self.serializer(entity)
        if cache_ok:
            try:
                await self.redis.set(key, json.dumps(snapshot), ex=self.ttl)
            except RedisError as e:
                logger.warning("cache_write_failed", key=key, error=str(e))
        return snapshot

    async def put_invalidate(self, entity_id: int) -> None:
        key = self.key(entity_id)
        try:
            await self.redis.delete(key)
        except RedisError as e:
            logger.warning("cache_invalidate_failed", key=key, error=str(e))

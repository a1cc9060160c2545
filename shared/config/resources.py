"""
Process-wide handles shared by a service's request handlers.

Nothing here is a module-level singleton: a ServiceResources instance is built
once at startup (or by a test), attached to `app.state.resources`, and closed
at shutdown by whoever opened it.
"""
from dataclasses import dataclass

import httpx
import structlog
from redis import asyncio as aioredis

from .database import Database
from .settings import Settings

logger = structlog.get_logger(__name__)


@dataclass
class ServiceResources:
    settings: Settings
    database: Database
    redis: aioredis.Redis
    http: httpx.AsyncClient

    @classmethod
    def open(cls, settings: Settings) -> "ServiceResources":
        database = Database(
            settings.database_url,
            pool_size=settings.db_pool_size,
            pool_timeout=settings.db_pool_timeout,
            echo=settings.db_echo,
        )
        redis = aioredis.from_url(settings.redis_url, socket_connect_timeout=1.0, socket_timeout=1.0)
        http = httpx.AsyncClient(timeout=settings.lookup_timeout)
        logger.info("resources_opened", redis_url=settings.redis_url, pool_size=settings.db_pool_size)
        return cls(settings=settings, database=database, redis=redis, http=http)

    async def close(self) -> None:
        await self.http.aclose()
        await self.redis.aclose()
        await self.database.dispose()
        logger.info("resources_closed")


def install_resources(app, settings: Settings, resources: ServiceResources = None, tables: list = None) -> None:
    """
    Attach resources to `app`. Injected resources belong to the caller; when
    none are given the app opens its own at startup (bootstrapping `tables`)
    and closes them at shutdown.
    """
    app.state.resources = resources
    app.state.owns_resources = False

    @app.on_event("startup")
    async def open_resources():
        if app.state.resources is None:
            app.state.resources = ServiceResources.open(settings)
            app.state.owns_resources = True
            await app.state.resources.database.create_all(tables)

    @app.on_event("shutdown")
    async def close_resources():
        if app.state.owns_resources:
            await app.state.resources.close()
            app.state.resources = None
            app.state.owns_resources = False

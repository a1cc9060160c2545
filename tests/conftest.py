import os

# Keep test runs off the OTLP exporter and the shared Prometheus registry
os.environ.setdefault("TRACING_ENABLED", "false")
os.environ.setdefault("METRICS_ENABLED", "false")

import fakeredis
import httpx
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from main import create_cluster_app
from shared.config.database import Database
from shared.config.resources import ServiceResources
from shared.config.settings import Settings

BASE_URL = "http://testserver"


class BrokenRedis:
    """Stands in for a Redis server that refuses every connection."""

    async def get(self, key):
        raise RedisConnectionError("Connection refused")

    async def set(self, key, value, ex=None):
        raise RedisConnectionError("Connection refused")

    async def delete(self, *keys):
        raise RedisConnectionError("Connection refused")

    async def aclose(self):
        pass


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'ecommerce.db'}",
        redis_url="redis://localhost:6379/15",
        user_service_url=f"{BASE_URL}/api/users",
        merchant_service_url=f"{BASE_URL}/api/merchants",
        product_service_url=f"{BASE_URL}/api/products",
        db_pool_timeout=5.0,
        tracing_enabled=False,
        metrics_enabled=False,
    )


@pytest.fixture
async def resources(settings):
    database = Database(settings.database_url, pool_size=settings.db_pool_size, pool_timeout=settings.db_pool_timeout)
    await database.create_all()
    resources = ServiceResources(
        settings=settings,
        database=database,
        redis=fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer()),
        http=None,
    )
    yield resources
    if resources.http is not None:
        await resources.http.aclose()
    await resources.redis.aclose()
    await database.dispose()


@pytest.fixture
async def client(settings, resources):
    """
    Client for the whole cluster. The same client is the services' outbound
    HTTP handle, so cross-service lookups go through the real handlers.
    """
    app = create_cluster_app(settings, resources)
    resources.http = httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app, raise_app_exceptions=False),
        base_url=BASE_URL,
    )
    return resources.http


@pytest.fixture
async def user(client):
    resp = await client.post("/api/users/", json={"name": "A", "email": "a@x.com"})
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
async def merchant(client):
    resp = await client.post("/api/merchants/", json={"name": "Shop"})
    assert resp.status_code == 201
    return resp.json()


@pytest.fixture
async def product(client, merchant):
    resp = await client.post(
        "/api/products/",
        json={"name": "P", "merchant_id": merchant["id"], "price": 9.99, "stock": 5},
    )
    assert resp.status_code == 201
    return resp.json()

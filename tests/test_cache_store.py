import json

import fakeredis
import pytest

from shared.cache import CacheAsideStore

from conftest import BrokenRedis


class FakeLoader:
    def __init__(self, rows):
        self.rows = rows
        self.calls = 0

    async def __call__(self, db, entity_id):
        self.calls += 1
        return self.rows.get(entity_id)


@pytest.fixture
def redis():
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer())


def make_store(redis, loader, ttl=3600):
    return CacheAsideStore(redis, namespace="user", ttl=ttl, loader=loader, serializer=dict)


async def test_miss_reads_source_and_caches_with_ttl(redis):
    loader = FakeLoader({1: {"id": 1, "name": "A"}})
    store = make_store(redis, loader, ttl=1800)

    assert await store.get(None, 1) == {"id": 1, "name": "A"}
    assert loader.calls == 1
    assert json.loads(await redis.get("user:1")) == {"id": 1, "name": "A"}
    assert 0 < await redis.ttl("user:1") <= 1800


async def test_hit_skips_source(redis):
    loader = FakeLoader({1: {"id": 1, "name": "A"}})
    store = make_store(redis, loader)

    await store.get(None, 1)
    assert await store.get(None, 1) == {"id": 1, "name": "A"}
    assert loader.calls == 1


async def test_absence_is_not_cached(redis):
    loader = FakeLoader({})
    store = make_store(redis, loader)

    assert await store.get(None, 7) is None
    assert await redis.exists("user:7") == 0

    loader.rows[7] = {"id": 7}
    assert await store.get(None, 7) == {"id": 7}


async def test_invalidate_forces_next_read_from_source(redis):
    loader = FakeLoader({1: {"id": 1, "name": "old"}})
    store = make_store(redis, loader)
    await store.get(None, 1)

    loader.rows[1] = {"id": 1, "name": "new"}
    await store.put_invalidate(1)

    assert await store.get(None, 1) == {"id": 1, "name": "new"}
    assert loader.calls == 2


async def test_unreachable_redis_falls_back_to_source():
    loader = FakeLoader({1: {"id": 1}})
    store = make_store(BrokenRedis(), loader)

    assert await store.get(None, 1) == {"id": 1}
    assert await store.get(None, 2) is None
    await store.put_invalidate(1)  # must not raise
    assert loader.calls == 2

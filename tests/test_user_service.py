from conftest import BrokenRedis


async def test_health(client):
    resp = await client.get("/api/users/health/status")
    assert resp.status_code == 200
    assert resp.json() == {"status": "User Service is running"}


async def test_create_and_get_user(client, user):
    resp = await client.get(f"/api/users/{user['id']}")
    assert resp.status_code == 200
    assert resp.json()["email"] == "a@x.com"


async def test_missing_fields_rejected(client):
    resp = await client.post("/api/users/", json={"name": "No Email"})
    assert resp.status_code == 400
    assert "email" in resp.json()["error"]


async def test_duplicate_email_conflicts(client, user):
    resp = await client.post("/api/users/", json={"name": "Other", "email": "a@x.com"})
    assert resp.status_code == 409
    assert resp.json() == {"error": "Email already exists"}


async def test_update_to_taken_email_conflicts(client, user):
    other = (await client.post("/api/users/", json={"name": "B", "email": "b@x.com"})).json()
    resp = await client.put(f"/api/users/{other['id']}", json={"name": "B", "email": "a@x.com"})
    assert resp.status_code == 409


async def test_get_unknown_user(client):
    resp = await client.get("/api/users/424242")
    assert resp.status_code == 404
    assert resp.json() == {"error": "User not found"}


async def test_update_invalidates_cached_snapshot(client, resources, user):
    await client.get(f"/api/users/{user['id']}")
    assert await resources.redis.exists(f"user:{user['id']}") == 1

    resp = await client.put(
        f"/api/users/{user['id']}", json={"name": "Renamed", "email": "a@x.com", "phone": "555"}
    )
    assert resp.status_code == 200
    assert await resources.redis.exists(f"user:{user['id']}") == 0

    fresh = (await client.get(f"/api/users/{user['id']}")).json()
    assert fresh["name"] == "Renamed"
    assert fresh["phone"] == "555"


async def test_delete_invalidates_cached_snapshot(client, user):
    await client.get(f"/api/users/{user['id']}")

    resp = await client.delete(f"/api/users/{user['id']}")
    assert resp.status_code == 200

    assert (await client.get(f"/api/users/{user['id']}")).status_code == 404
    assert (await client.delete(f"/api/users/{user['id']}")).status_code == 404


async def test_list_users(client, user):
    await client.post("/api/users/", json={"name": "B", "email": "b@x.com"})
    resp = await client.get("/api/users/")
    assert [u["name"] for u in resp.json()] == ["A", "B"]


async def test_reads_survive_cache_outage(client, resources, user):
    resources.redis = BrokenRedis()

    resp = await client.get(f"/api/users/{user['id']}")
    assert resp.status_code == 200
    assert resp.json()["name"] == "A"

    resp = await client.put(f"/api/users/{user['id']}", json={"name": "Still Works", "email": "a@x.com"})
    assert resp.status_code == 200

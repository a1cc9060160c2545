import asyncio


async def test_create_product_validates_merchant(client):
    resp = await client.post("/api/products/", json={"name": "P", "merchant_id": 999999, "price": 1.0})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Invalid merchant_id"}
    assert (await client.get("/api/products/")).json() == []


async def test_create_product_attaches_merchant(product, merchant):
    assert product["price"] == 9.99
    assert product["stock"] == 5
    assert product["status"] == "active"
    assert product["merchant_info"]["name"] == merchant["name"]


async def test_negative_price_rejected(client, merchant):
    resp = await client.post("/api/products/", json={"name": "P", "merchant_id": merchant["id"], "price": -1})
    assert resp.status_code == 400


async def test_price_above_column_limit_rejected(client, merchant):
    resp = await client.post("/api/products/", json={"name": "P", "merchant_id": merchant["id"], "price": 1e8})
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("price:")


async def test_price_with_sub_cent_precision_rejected(client, merchant):
    resp = await client.post("/api/products/", json={"name": "P", "merchant_id": merchant["id"], "price": 1.999})
    assert resp.status_code == 400


async def test_stock_above_integer_limit_rejected(client, merchant):
    resp = await client.post(
        "/api/products/", json={"name": "P", "merchant_id": merchant["id"], "price": 1, "stock": 2**31}
    )
    assert resp.status_code == 400


async def test_get_product_is_cached_without_merchant_info(client, resources, product):
    resp = await client.get(f"/api/products/{product['id']}")
    assert resp.json()["merchant_info"] is not None

    assert 0 < await resources.redis.ttl(f"product:{product['id']}") <= 1800
    cached = await resources.redis.get(f"product:{product['id']}")
    assert b"merchant_info" not in cached


async def test_missing_merchant_degrades_to_null(client, merchant, product):
    await client.delete(f"/api/merchants/{merchant['id']}")

    resp = await client.get(f"/api/products/{product['id']}")
    assert resp.status_code == 200
    assert resp.json()["merchant_info"] is None

    listed = await client.get("/api/products/")
    assert listed.status_code == 200
    assert listed.json()[0]["merchant_info"] is None


async def test_stock_delta_is_additive(client, product):
    resp = await client.put(f"/api/products/{product['id']}/stock", json={"quantity": 3})
    assert resp.status_code == 200
    assert (await client.get(f"/api/products/{product['id']}")).json()["stock"] == 8

    await client.put(f"/api/products/{product['id']}/stock", json={"quantity": -8})
    assert (await client.get(f"/api/products/{product['id']}")).json()["stock"] == 0


async def test_stock_cannot_go_negative(client, product):
    resp = await client.put(f"/api/products/{product['id']}/stock", json={"quantity": -6})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Insufficient stock"}
    assert (await client.get(f"/api/products/{product['id']}")).json()["stock"] == 5


async def test_stock_cannot_pass_integer_limit(client, product):
    resp = await client.put(f"/api/products/{product['id']}/stock", json={"quantity": 2**31 - 1})
    assert resp.status_code == 400
    assert resp.json() == {"error": "Stock limit exceeded"}
    assert (await client.get(f"/api/products/{product['id']}")).json()["stock"] == 5


async def test_stock_requires_quantity(client, product):
    resp = await client.put(f"/api/products/{product['id']}/stock", json={})
    assert resp.status_code == 400


async def test_stock_unknown_product(client):
    resp = await client.put("/api/products/5150/stock", json={"quantity": 1})
    assert resp.status_code == 404


async def test_update_invalidates_price(client, product, merchant):
    await client.get(f"/api/products/{product['id']}")
    resp = await client.put(
        f"/api/products/{product['id']}",
        json={"name": "P", "merchant_id": merchant["id"], "price": 12.5, "stock": 5},
    )
    assert resp.status_code == 200
    assert (await client.get(f"/api/products/{product['id']}")).json()["price"] == 12.5


async def test_delete_product(client, product):
    assert (await client.delete(f"/api/products/{product['id']}")).status_code == 200
    assert (await client.get(f"/api/products/{product['id']}")).status_code == 404


async def test_concurrent_cold_reads_do_not_exhaust_pool(client, resources, settings, product):
    await resources.redis.flushall()

    responses = await asyncio.gather(
        *(client.get(f"/api/products/{product['id']}") for _ in range(settings.db_pool_size))
    )
    assert [r.status_code for r in responses] == [200] * settings.db_pool_size
    assert all(r.json()["merchant_info"] is not None for r in responses)

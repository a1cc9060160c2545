import httpx
import pytest

from shared.clients import RemoteLookupClient

USERS = {"1": {"id": 1, "name": "A"}, "2": {"id": 2, "name": "B"}}


def handler(request: httpx.Request) -> httpx.Response:
    entity_id = request.url.path.rsplit("/", 1)[-1]
    if entity_id == "boom":
        return httpx.Response(500, json={"error": "Internal Server Error"})
    if entity_id == "slow":
        raise httpx.ReadTimeout("timed out", request=request)
    if entity_id == "garbage":
        return httpx.Response(200, content=b"<html>not json</html>")
    if entity_id == "list":
        return httpx.Response(200, json=[1, 2, 3])
    if entity_id in USERS:
        return httpx.Response(200, json=USERS[entity_id])
    return httpx.Response(404, json={"error": "User not found"})


@pytest.fixture
async def lookup():
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    yield RemoteLookupClient(http, {"user": "http://user-service:8081/"})
    await http.aclose()


async def test_fetch_returns_entity(lookup):
    assert await lookup.fetch("user", 1) == {"id": 1, "name": "A"}


@pytest.mark.parametrize("entity_id", [404, "boom", "slow", "garbage", "list"])
async def test_every_failure_is_absent(lookup, entity_id):
    assert await lookup.fetch("user", entity_id) is None


async def test_fetch_many_keeps_request_order(lookup):
    results = await lookup.fetch_many("user", [2, 99, 1])
    assert [r and r["id"] for r in results] == [2, None, 1]


async def test_transport_error_is_absent():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with httpx.AsyncClient(transport=httpx.MockTransport(refuse)) as http:
        lookup = RemoteLookupClient(http, {"product": "http://product-service:8083"})
        assert await lookup.fetch("product", 1) is None


async def test_unavailable_is_told_apart_from_absent(lookup):
    from shared.errors import DependencyUnavailable

    assert await lookup._get("user", 404) is None
    with pytest.raises(DependencyUnavailable):
        await lookup._get("user", "boom")

import pytest


@pytest.mark.asyncio
async def test_health_ok(client):
    r = await client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["db_ok"] is True
    assert isinstance(body["uptime_s"], int)
    assert r.headers.get("X-Request-ID")


@pytest.mark.asyncio
async def test_request_id_is_echoed(client):
    r = await client.get("/health", headers={"X-Request-ID": "req-abc-123"})
    assert r.headers["X-Request-ID"] == "req-abc-123"


@pytest.mark.asyncio
async def test_error_responses_carry_request_id(client):
    r = await client.get("/cats/999", headers={"X-Request-ID": "req-404"})
    assert r.status_code == 404
    assert r.headers["X-Request-ID"] == "req-404"


@pytest.mark.asyncio
async def test_root_redirects_to_docs(client):
    r = await client.get("/")
    assert r.status_code in (302, 307)
    assert r.headers["location"] == "/docs"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_envelope(client):
    r = await client.get("/nope")
    assert r.status_code == 404
    assert r.json() == {"error": "Not Found"}

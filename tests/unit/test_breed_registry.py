import httpx
import pytest

from spycats.api.fastapi_app.clients.breeds import BreedRegistry
from spycats.core.exceptions import ErrorKind, RegistryUnavailable

URL = "http://breeds.test/v1/breeds"


def _registry(handler, **kw) -> BreedRegistry:
    return BreedRegistry(URL, timeout=1.0, transport=httpx.MockTransport(handler), **kw)


@pytest.mark.asyncio
async def test_exists_exact_match():
    def handler(request):
        return httpx.Response(200, json=[{"id": "siam", "name": "Siamese"}, {"id": "pers", "name": "Persian"}])

    reg = _registry(handler)
    assert await reg.exists("Siamese") is True
    assert await reg.exists("siamese") is False
    assert await reg.exists("Sphynx") is False


@pytest.mark.asyncio
async def test_list_breeds_skips_malformed_entries():
    def handler(request):
        return httpx.Response(200, json=[{"name": "Bengal"}, {"id": "x"}, "junk", {"name": 3}])

    assert await _registry(handler).list_breeds() == ["Bengal"]


@pytest.mark.asyncio
async def test_server_error_maps_to_registry_unavailable():
    def handler(request):
        return httpx.Response(500, json={"message": "down"})

    with pytest.raises(RegistryUnavailable) as ei:
        await _registry(handler).exists("Siamese")
    assert str(ei.value).startswith("failed to validate breed")
    assert ei.value.kind is ErrorKind.dependency
    assert ei.value.http_status == 502


@pytest.mark.asyncio
async def test_timeout_maps_to_registry_unavailable():
    def handler(request):
        raise httpx.ConnectTimeout("timed out", request=request)

    with pytest.raises(RegistryUnavailable):
        await _registry(handler).exists("Siamese")


@pytest.mark.asyncio
async def test_invalid_json_maps_to_registry_unavailable():
    def handler(request):
        return httpx.Response(200, content=b"<html>nope</html>")

    with pytest.raises(RegistryUnavailable):
        await _registry(handler).list_breeds()


@pytest.mark.asyncio
async def test_non_list_payload_maps_to_registry_unavailable():
    def handler(request):
        return httpx.Response(200, json={"name": "Siamese"})

    with pytest.raises(RegistryUnavailable):
        await _registry(handler).list_breeds()


@pytest.mark.asyncio
async def test_api_key_header_is_sent():
    seen = {}

    def handler(request):
        seen["key"] = request.headers.get("x-api-key")
        return httpx.Response(200, json=[])

    await _registry(handler, api_key="secret").list_breeds()
    assert seen["key"] == "secret"

    await _registry(handler).list_breeds()
    assert seen["key"] is None

import json
import logging

import pytest

from spycats.core.log import ContextFilter, JsonFormatter
from tests.conftest import create_cat


class _JsonCapture(logging.Handler):
    """Handler de test monté comme celui de configure_logging (filtre + formateur JSON)."""

    def __init__(self):
        super().__init__()
        self.addFilter(ContextFilter())
        self.setFormatter(JsonFormatter())
        self.payloads = []

    def emit(self, record):
        self.payloads.append(json.loads(self.format(record)))


@pytest.fixture
def access_log():
    lg = logging.getLogger("api.access")
    handler = _JsonCapture()
    previous = lg.level
    lg.setLevel(logging.INFO)
    lg.addHandler(handler)
    try:
        yield handler.payloads
    finally:
        lg.removeHandler(handler)
        lg.setLevel(previous)


@pytest.mark.asyncio
async def test_access_line_carries_request_id(client, access_log):
    r = await client.get("/cats", headers={"X-Request-ID": "rid-123"})
    assert r.headers["X-Request-ID"] == "rid-123"

    lines = [p for p in access_log if p.get("path") == "/cats"]
    assert len(lines) == 1
    assert lines[0]["request_id"] == "rid-123"
    assert lines[0]["method"] == "GET"
    assert lines[0]["status_code"] == 200
    assert "duration_ms" in lines[0]


@pytest.mark.asyncio
async def test_access_line_for_error_uses_generated_request_id(client, access_log):
    await create_cat(client)
    r = await client.get("/cats/999")
    rid = r.headers["X-Request-ID"]

    line = next(p for p in access_log if p.get("path") == "/cats/999")
    assert line["request_id"] == rid
    assert line["status_code"] == 404

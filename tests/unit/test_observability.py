import sys

import pytest

from spycats.api.fastapi_app.observability.sentry import before_send, resource_tags
from spycats.core.exceptions import MissionAssigned, PersistenceError
from spycats.core.telemetry import metrics
from tests.conftest import create_cat


def _hint(exc):
    try:
        raise exc
    except Exception:
        return {"exc_info": sys.exc_info()}


def test_before_send_drops_expected_business_errors():
    event = {"message": "x"}
    assert before_send(event, _hint(MissionAssigned(3))) is None
    assert before_send(event, _hint(PersistenceError("failed to get cats"))) is event
    assert before_send(event, _hint(RuntimeError("boom"))) is event
    assert before_send(event, {}) is event


def test_resource_tags_keep_known_path_params():
    assert resource_tags({"cat_id": 4, "other": "x"}) == {"cat_id": "4"}
    assert resource_tags({"mission_id": 1, "target_id": 2}) == {"mission_id": "1", "target_id": "2"}
    assert resource_tags({}) == {}


@pytest.mark.asyncio
async def test_http_metrics_use_route_template(client, monkeypatch):
    monkeypatch.setenv("METRICS_ENABLED", "1")
    cat_id = await create_cat(client)
    await client.get(f"/cats/{cat_id}")
    await client.get("/cats/424242")

    payload = metrics.generate_latest().decode()
    assert 'route="/cats/{cat_id}"' in payload
    assert f'route="/cats/{cat_id}"' not in payload
    assert 'status_family="4xx"' in payload

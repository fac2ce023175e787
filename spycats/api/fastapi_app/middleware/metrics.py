from __future__ import annotations

import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from spycats.core.telemetry.metrics import (
    metrics_enabled,
    get_http_requests_total,
    get_http_requests_total_family,
    get_http_request_duration_seconds,
)

UNMATCHED_ROUTE = "/unmatched"


def route_label(request: Request) -> str:
    """Gabarit de la route résolue (``/cats/{cat_id}``), jamais le chemin brut."""
    route = request.scope.get("route")
    return getattr(route, "path_format", None) or getattr(route, "path", None) or UNMATCHED_ROUTE


class MetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Any):  # type: ignore[override]
        if not metrics_enabled() or request.url.path == "/metrics":
            return await call_next(request)

        start = time.perf_counter()
        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception:
            status_code = 500
            raise
        finally:
            elapsed = time.perf_counter() - start
            route = route_label(request)
            get_http_requests_total().labels(route, request.method, str(status_code)).inc()
            get_http_requests_total_family().labels(
                route, request.method, f"{status_code // 100}xx"
            ).inc()
            get_http_request_duration_seconds().labels(route, request.method).observe(elapsed)

        return response

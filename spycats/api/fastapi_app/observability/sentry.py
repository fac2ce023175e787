"""Initialisation Sentry et annotations par ressource (chat, mission, cible)."""
from __future__ import annotations

import os
from typing import Any, Dict, Mapping, Optional

import sentry_sdk
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from spycats import __version__
from spycats.core.exceptions import AppError

# Paramètres de chemin remontés en tags Sentry
RESOURCE_PARAMS = ("cat_id", "mission_id", "target_id")


def before_send(event: Dict[str, Any], hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Écarte les erreurs métier attendues (4xx) ; seules les 5xx partent."""
    exc_info = hint.get("exc_info")
    if exc_info:
        exc = exc_info[1]
        if isinstance(exc, AppError) and exc.http_status < 500:
            return None
    return event


def resource_tags(path_params: Mapping[str, Any]) -> Dict[str, str]:
    return {k: str(path_params[k]) for k in RESOURCE_PARAMS if k in path_params}


def init_sentry() -> bool:
    dsn = os.getenv("SENTRY_DSN", "")
    if not dsn:
        return False
    sentry_sdk.init(
        dsn=dsn,
        environment=os.getenv("SENTRY_ENV", "dev"),
        release=os.getenv("RELEASE", f"spycats@{__version__}"),
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0") or 0),
        before_send=before_send,
    )
    return True


class SentryContextMiddleware(BaseHTTPMiddleware):
    """Tague la requête courante: request id, route, ressource ciblée, statut."""

    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        rid = getattr(request.state, "request_id", None)
        if rid:
            sentry_sdk.set_tag("request_id", rid)
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            # path_params est rempli par le routeur une fois la route résolue
            for key, value in resource_tags(request.scope.get("path_params") or {}).items():
                sentry_sdk.set_tag(key, value)
            sentry_sdk.set_tag("route", request.url.path)
            sentry_sdk.set_tag("status", status)

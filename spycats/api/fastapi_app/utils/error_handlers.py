from __future__ import annotations

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from spycats.core.exceptions import AppError, ErrorKind
from spycats.core.telemetry.metrics import metrics_enabled, get_business_rule_rejections_total


def _make_body(message: Any) -> Dict[str, Any]:
    return {"error": message if isinstance(message, str) else str(message)}


def _validation_message(exc: RequestValidationError) -> str:
    """Résume la première erreur pydantic en « champ: raison »."""
    errors = exc.errors()
    if not errors:
        return "invalid request"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p not in ("body", "query")]
    msg = first.get("msg", "invalid value")
    if loc and loc[0] == "path":
        # cat_id -> "invalid cat id"
        return f"invalid {loc[-1].replace('_', ' ')}"
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def setup_error_handlers(app: FastAPI) -> None:
    log = logging.getLogger("api.error")

    @app.exception_handler(AppError)
    async def handle_app_error(request: Request, exc: AppError):  # type: ignore[override]
        rid = getattr(request.state, "request_id", None)
        if exc.http_status >= 500:
            # Log avec stacktrace et contexte request_id
            log.error("app_error: %s", exc, exc_info=exc, extra={"request_id": rid, "error_code": exc.code})
        else:
            log.info("app_error: %s", exc, extra={"request_id": rid, "error_code": exc.code})
        if exc.kind in (ErrorKind.business_rule, ErrorKind.conflict) and metrics_enabled():
            get_business_rule_rejections_total().labels(code=exc.code).inc()
        return JSONResponse(status_code=exc.http_status, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):  # type: ignore[override]
        rid = getattr(request.state, "request_id", None)
        # 5xx seulement: évite le bruit sur les 4xx attendues
        if exc.status_code >= 500:
            log.error("http_exception %s", exc.detail, extra={"request_id": rid})
        return JSONResponse(
            status_code=exc.status_code,
            content=_make_body(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):  # type: ignore[override]
        rid = getattr(request.state, "request_id", None)
        log.warning("request_validation_error", extra={"request_id": rid})
        return JSONResponse(status_code=400, content=_make_body(_validation_message(exc)))

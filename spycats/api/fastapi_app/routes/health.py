import logging
import time

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..deps import get_session

router = APIRouter(prefix="", tags=["health"])


@router.get("/health")
async def healthcheck(request: Request, session: AsyncSession = Depends(get_session)):
    rid = getattr(request.state, "request_id", None)
    lg = logging.getLogger("api.access")
    started_mono = getattr(request.app.state, "started_monotonic", None)
    uptime_s = int(time.monotonic() - started_mono) if started_mono else None
    body = {
        "status": "ok",
        "service": "api",
        "version": getattr(request.app, "version", None),
        "db_ok": True,
        "uptime_s": uptime_s,
    }
    try:
        await session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        lg.warning("HEALTH degraded", extra={"request_id": rid})
        body.update(status="degraded", db_ok=False, error=str(e))
        return body
    lg.info("HEALTH ok", extra={"request_id": rid})
    return body

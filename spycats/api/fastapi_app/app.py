from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from sqlmodel import SQLModel

# Charger .env le plus tôt possible (sauf si CONFIG_SKIP_DOTENV=1)
from dotenv import load_dotenv
if os.getenv("CONFIG_SKIP_DOTENV", "").strip().lower() not in {"1", "true", "yes", "on"}:
    load_dotenv()

import spycats.core.log  # noqa: F401  configure le root logger
from spycats import __version__
from spycats.core.storage import db_models  # noqa: F401  peuple SQLModel.metadata
from spycats.core.telemetry.metrics import metrics_enabled, generate_latest

from .deps import settings, engine
from .routes import health, cats, missions
from .middleware.request_id import RequestIdMiddleware
from .middleware.metrics import MetricsMiddleware
from .observability.sentry import init_sentry, SentryContextMiddleware
from .utils.error_handlers import setup_error_handlers

logger = logging.getLogger(__name__)

TAGS_METADATA = [
    {"name": "health", "description": "Healthcheck et disponibilité DB."},
    {"name": "cats", "description": "Gestion des chats espions : création, salaire, suppression."},
    {
        "name": "missions",
        "description": "Missions et cibles : création imbriquée, assignation, clôture.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.started_monotonic = time.monotonic()
    if settings.auto_create_schema:
        async with engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info("schema ensured (AUTO_CREATE_SCHEMA)")
    # --- application running ---
    yield
    await engine.dispose()


app = FastAPI(
    title="Spy Cats – Management API",
    version=__version__,
    openapi_tags=TAGS_METADATA,
    lifespan=lifespan,
)

setup_error_handlers(app)

# -------- Middlewares --------
# Le dernier ajouté est le plus externe: RequestId enveloppe Sentry, métriques et gzip
app.add_middleware(GZipMiddleware, minimum_size=1024)  # gzip
app.add_middleware(MetricsMiddleware)                  # Prometheus metrics
if init_sentry():
    app.add_middleware(SentryContextMiddleware)        # Sentry annotations
app.add_middleware(RequestIdMiddleware)                # X-Request-ID + access log

if metrics_enabled():
    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        payload = generate_latest()
        return Response(
            content=payload,
            media_type="text/plain; version=0.0.4; charset=utf-8",
        )

# CORS
# Origines autorisées via variable d'env ALLOWED_ORIGINS (CSV)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# -------- Routes --------
app.include_router(health.router)
app.include_router(cats.router)
app.include_router(missions.router)


# Redirection vers Swagger
@app.get("/", include_in_schema=False)
async def root():
    return RedirectResponse(url="/docs")

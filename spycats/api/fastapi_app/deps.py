from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import AsyncGenerator, Optional, Sequence

from fastapi import Depends
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy import event
from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from spycats.core.telemetry.metrics import metrics_enabled, get_db_pool_in_use
from spycats.core.storage.cats_repository import CatRepository
from spycats.core.storage.missions_repository import MissionRepository
from .clients.breeds import BreedRegistry
from .services.cat_service import CatService
from .services.mission_service import MissionService

logger = logging.getLogger(__name__)
_db_pool_hooks_attached = False


def _setup_db_pool_metrics(engine: AsyncEngine) -> None:
    global _db_pool_hooks_attached
    if _db_pool_hooks_attached or not metrics_enabled():
        return

    pool = getattr(getattr(engine, "sync_engine", engine), "pool", None)
    if pool is None:
        logger.debug("db_pool_in_use: aucun pool disponible, instrumentation ignorée")
        return

    def _checkout(*_, **__):
        if metrics_enabled():
            get_db_pool_in_use().labels(db="primary").inc()

    def _checkin(*_, **__):
        if metrics_enabled():
            get_db_pool_in_use().labels(db="primary").dec()

    try:
        event.listen(pool, "checkout", _checkout)
        event.listen(pool, "checkin", _checkin)
        _db_pool_hooks_attached = True
        logger.debug("db_pool_in_use hooks attached")
    except Exception:
        logger.debug("db_pool_in_use: échec de l'attachement des hooks", exc_info=True)


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite n'applique les clés étrangères (CASCADE / SET NULL) qu'avec ce PRAGMA."""
    if engine.dialect.name != "sqlite":
        return

    def _on_connect(dbapi_connection, _record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    event.listen(engine.sync_engine, "connect", _on_connect)


ENV_FILE = Path(__file__).resolve().parents[3] / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding="utf-8", extra="ignore"
    )

    # Valeurs par défaut suffisantes pour démarrer en local sans .env ;
    # les tests remplacent la session et le registre des races.
    database_url: str = Field(
        default="sqlite+aiosqlite:///./spycats.db", alias="DATABASE_URL"
    )
    allowed_origins_raw: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        alias="ALLOWED_ORIGINS",
    )
    breed_registry_url: str = Field(
        default="https://api.thecatapi.com/v1/breeds", alias="BREED_REGISTRY_URL"
    )
    breed_registry_timeout_s: float = Field(default=5.0, gt=0, alias="BREED_REGISTRY_TIMEOUT_S")
    breed_registry_api_key: Optional[str] = Field(default=None, alias="BREED_REGISTRY_API_KEY")
    # Hors production : crée les tables au démarrage (sinon `alembic upgrade head`)
    auto_create_schema: bool = Field(default=False, alias="AUTO_CREATE_SCHEMA")

    @property
    def allowed_origins(self) -> Sequence[str]:
        raw = self.allowed_origins_raw or ""
        return [o.strip() for o in raw.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


def build_engine(database_url: str) -> AsyncEngine:
    eng = create_async_engine(database_url, pool_pre_ping=True)
    enable_sqlite_foreign_keys(eng)
    logger.debug("engine ready (backend=%s)", make_url(database_url).get_backend_name())
    return eng


engine: AsyncEngine = build_engine(settings.database_url)
_setup_db_pool_metrics(engine)

SessionLocal: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine, expire_on_commit=False, class_=AsyncSession
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session


@lru_cache
def get_breed_registry() -> BreedRegistry:
    return BreedRegistry(
        settings.breed_registry_url,
        timeout=settings.breed_registry_timeout_s,
        api_key=settings.breed_registry_api_key,
    )


def get_cat_service(
    session: AsyncSession = Depends(get_session),
    registry: BreedRegistry = Depends(get_breed_registry),
) -> CatService:
    return CatService(CatRepository(session), registry)


def get_mission_service(session: AsyncSession = Depends(get_session)) -> MissionService:
    return MissionService(MissionRepository(session), CatRepository(session))

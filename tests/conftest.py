# tests/conftest.py
import os

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from asgi_lifespan import LifespanManager
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlmodel import SQLModel

# Réduit le bruit en tests: ne pas charger .env
os.environ.setdefault("CONFIG_SKIP_DOTENV", "1")

from spycats.api.fastapi_app.app import app
from spycats.api.fastapi_app import deps as api_deps
from spycats.api.fastapi_app.clients.breeds import BreedRegistry
from spycats.core.storage import db_models  # noqa: F401

REGISTRY_URL = "http://breeds.test/v1/breeds"


class BreedCatalog:
    """Faux catalogue servi via httpx.MockTransport (le vrai client HTTP est exercé)."""

    def __init__(self, names):
        self.names = list(names)
        self.fail_with: int | None = None
        self.calls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls += 1
        if self.fail_with is not None:
            return httpx.Response(self.fail_with, json={"message": "boom"})
        return httpx.Response(200, json=[{"id": n[:4].lower(), "name": n} for n in self.names])


# ---------- Engine & Session de test (SQLite fichier, un par test) ----------
@pytest_asyncio.fixture
async def engine(tmp_path):
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'spycats_test.db'}")
    api_deps.enable_sqlite_foreign_keys(eng)
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    try:
        yield eng
    finally:
        await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncSession:
    """Fournit une session SQLAlchemy Async par test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def breed_catalog():
    return BreedCatalog(["Siamese", "Persian", "Maine Coon", "Bengal"])


@pytest.fixture
def breed_registry(breed_catalog):
    return BreedRegistry(
        REGISTRY_URL,
        timeout=1.0,
        transport=httpx.MockTransport(breed_catalog.handler),
    )


# ---------- Override des deps FastAPI ----------
@pytest_asyncio.fixture
async def client(session_factory, breed_registry) -> AsyncClient:
    """
    Client httpx avec:
      - session branchée sur la base SQLite du test
      - registre des races servi par MockTransport
      - gestion correcte du lifespan app (startup/shutdown)
    """
    async def _override_get_session():
        async with session_factory() as session:
            try:
                yield session
            finally:
                # rollback de sécurité si une transaction est restée ouverte
                await session.rollback()

    app.dependency_overrides[api_deps.get_session] = _override_get_session
    app.dependency_overrides[api_deps.get_breed_registry] = lambda: breed_registry
    try:
        async with LifespanManager(app):
            transport = ASGITransport(app=app)
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
    finally:
        app.dependency_overrides.clear()


# ---------- Helpers ----------
async def create_cat(client, **overrides):
    payload = {
        "name": "Whiskers",
        "years_of_experience": 5,
        "breed": "Siamese",
        "salary": 1000.0,
    }
    payload.update(overrides)
    r = await client.post("/cats", json=payload)
    assert r.status_code == 201, r.text
    return r.json()["id"]


async def create_mission(client, **overrides):
    payload = {
        "name": "Operation Stealth",
        "targets": [
            {"name": "Target Alpha", "country": "Russia", "notes": "High priority"},
        ],
    }
    payload.update(overrides)
    r = await client.post("/missions", json=payload)
    assert r.status_code == 201, r.text
    return r.json()

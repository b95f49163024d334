# ruff: noqa: E402
# IMPORTANT:
# 1) Set environment variables (DATABASE_URL etc.) first, then import application modules.
# 2) Every test gets its own in-memory SQLite database through aiosqlite.

from collections.abc import AsyncGenerator
import os

from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient
import pytest
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool


def _setup_test_environment() -> str:
    """Sets up environment variables for tests and returns the DATABASE_URL."""
    os.environ.setdefault("DB_CHECK_ON_START", "false")
    os.environ.setdefault("ENVIRONMENT", "development")
    os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
    return os.environ["DATABASE_URL"]


TEST_DATABASE_URL_ASYNC = _setup_test_environment()

# isort: off
from app import create_app
from db import database
from db.database import Base, get_db
import db.models.post  # noqa: F401  registers the posts table
from ui.client import PostsApiClient

# isort: on

BASE_URL = "http://testserver.local"


def _create_test_engine() -> AsyncEngine:
    # StaticPool keeps the single in-memory connection alive for the whole test
    return create_async_engine(
        TEST_DATABASE_URL_ASYNC,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )


@pytest.fixture
async def engine(monkeypatch) -> AsyncGenerator[AsyncEngine]:
    test_engine = _create_test_engine()
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    # Health checks and lifespan hooks resolve the engine through db.database
    monkeypatch.setattr(database, "engine", test_engine)
    try:
        yield test_engine
    finally:
        await test_engine.dispose()


@pytest.fixture
def session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=engine, autoflush=True, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession]:
    """Fresh AsyncSession for repository and service tests."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def app():
    return create_app()


@pytest.fixture
def override_get_db(app, session_maker: async_sessionmaker[AsyncSession]):
    """Each request gets its own session from the test engine."""

    async def _get_db_test() -> AsyncGenerator[AsyncSession]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = _get_db_test
    try:
        yield
    finally:
        app.dependency_overrides.pop(get_db, None)


@pytest.fixture
async def client(app, override_get_db: None) -> AsyncGenerator[AsyncClient]:
    """Async HTTP client with app lifespan management."""
    async with LifespanManager(app):
        async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as ac:
            yield ac


@pytest.fixture
async def unit_client(app, override_get_db: None) -> AsyncGenerator[AsyncClient]:
    """Lightweight HTTP client without lifespan management."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url=BASE_URL) as ac:
        yield ac


@pytest.fixture
def api_client(client: AsyncClient) -> PostsApiClient:
    """Posts API client talking to the in-process app."""
    return PostsApiClient(client)

"""Global test configuration and fixtures for the Uwezo API."""

import os

os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret-key-for-testing-only")
os.environ.setdefault("DATABASE_URL", "sqlite:///./uwezo-test.db")

from collections.abc import AsyncGenerator
from typing import Callable
from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.api.core.constants import JWT_ALGORITHM
from src.database.connection import build_async_engine
from src.database.models import Base, Organization, UserProfile, UserRole
from src.modules.user.role_cache import RoleResolver
from src.utils.settings.auth import AuthSettings

# Import all factories
from tests.factories import OrganizationFactory, UserProfileFactory
from tests.utils.fake_redis import FakeRedisCache


@pytest.fixture
def profile_factory():
    return UserProfileFactory


@pytest.fixture
def organization_factory():
    return OrganizationFactory


@pytest.fixture(autouse=True)
def disable_external_cache(monkeypatch):
    """Stub cache helpers so tests do not require Redis."""

    async def _noop_get_cache(*_args, **_kwargs):
        return None

    async def _noop_set_cache(*_args, **_kwargs):
        return True

    async def _noop_invalidate(*_args, **_kwargs):
        return 0

    async def _noop_generation(*_args, **_kwargs):
        return 0

    monkeypatch.setattr("src.cache.decorator._get_cache", _noop_get_cache)
    monkeypatch.setattr("src.cache.decorator._set_cache", _noop_set_cache)
    monkeypatch.setattr("src.cache.decorator._invalidate_by_tag", _noop_invalidate)
    monkeypatch.setattr("src.cache.decorator._get_generation", _noop_generation)
    monkeypatch.setattr("src.cache.decorator._bump_generation", _noop_generation)


@pytest.fixture
def redis_cache_store(monkeypatch) -> FakeRedisCache:
    """Back the cache helpers with an in-memory store so `@cached` really caches."""
    store = FakeRedisCache()
    monkeypatch.setattr("src.cache.decorator._get_cache", store.get)
    monkeypatch.setattr("src.cache.decorator._set_cache", store.set)
    monkeypatch.setattr("src.cache.decorator._invalidate_by_tag", store.invalidate)
    monkeypatch.setattr("src.cache.decorator._get_generation", store.get_generation)
    monkeypatch.setattr("src.cache.decorator._bump_generation", store.bump_generation)
    return store


@pytest_asyncio.fixture
async def async_engine(tmp_path):
    """File-backed SQLite engine per test, so committed steps stay isolated."""
    engine = build_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'uwezo.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(async_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Provide a database session; services commit through it as in production."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def role_resolver(session_factory) -> RoleResolver:
    return RoleResolver.from_session_factory(session_factory)


@pytest_asyncio.fixture
async def app(session_factory, role_resolver):
    """Create FastAPI application with lifespan manager for testing."""
    from src.main import app

    app.state.session_factory = session_factory
    app.state.role_resolver = role_resolver

    async with LifespanManager(app):
        yield app

    app.dependency_overrides.clear()


# Test Data Fixtures
@pytest_asyncio.fixture
async def test_profile(db_session: AsyncSession, profile_factory) -> UserProfile:
    """A job seeker who has already confirmed their role."""
    profile = await profile_factory.create_async(db_session)
    await db_session.commit()
    return profile


@pytest_asyncio.fixture
async def test_owner(
    db_session: AsyncSession, profile_factory, organization_factory
) -> tuple[UserProfile, Organization]:
    """An organization owner together with their organization."""
    profile = await profile_factory.create_async(
        db_session,
        role=UserRole.ORGANIZATION_OWNER.value,
        org_name_hint="Acme Corp",
        org_industry_hint="Technology",
        org_size_hint="11-50",
    )
    organization = await organization_factory.create_async(
        db_session,
        owner_id=profile.user_id,
        name="Acme Corp",
        industry="Technology",
        size_range="11-50",
    )
    await db_session.commit()
    return profile, organization


# JWT Token Fixtures
@pytest.fixture()
def jwt_token_factory() -> Callable[..., str]:
    """Factory for creating JWT tokens for test users."""
    auth_settings = AuthSettings()

    def create_token(
        user_id: str | UUID,
        email: str = "test@example.com",
        role: str = "authenticated",
    ) -> str:
        payload = {
            "sub": str(user_id),
            "email": email,
            "role": role,
            "aud": auth_settings.JWT_AUDIENCE,
            "user_metadata": {"email_verified": True},
            "app_metadata": {"provider": "email", "providers": ["email"]},
            "is_anonymous": role == "anon",
        }
        return jwt.encode(
            payload, auth_settings.SUPABASE_JWT_SECRET, algorithm=JWT_ALGORITHM
        )

    return create_token


# HTTP Client Fixtures
@pytest_asyncio.fixture
async def public_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create HTTP client for testing public endpoints."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test-uwezo-api",
    ) as ac:
        yield ac


@pytest.fixture
def client_factory(app: FastAPI, jwt_token_factory):
    """Factory for creating HTTP clients acting as a given user id."""

    def create_client_for_user(user_id: UUID | None = None) -> AsyncClient:
        token = jwt_token_factory(user_id or uuid4())
        return AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://test-uwezo-api",
            headers={"Authorization": f"Bearer {token}"},
        )

    return create_client_for_user

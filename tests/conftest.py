"""pytest fixtures shared across all tests."""

from __future__ import annotations

import time
from urllib.parse import urlencode

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from itqan.core.session import SessionReconciler
from itqan.core.storage import MemoryStorage
from itqan.models.base import Base
from itqan.schemas.user import BackendUser, ProviderSession, TokenSet

# Use SQLite in-memory for tests.
# Each test function gets its own fresh DB to avoid cross-test pollution.
TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

PROVIDER_URL = "https://tenant.example.com"
APP_URL = "http://localhost:3000"


class FakeIdentity:
    """Stands in for IdentityBridge; no network, fixed claims."""

    def __init__(self) -> None:
        self.claims: dict = {
            "sub": "auth0|abc123",
            "email": "sara@example.com",
            "given_name": "Sara",
            "family_name": "Ali",
        }
        self.userinfo: dict = {"email": "sara@example.com"}
        self.userinfo_error: Exception | None = None
        self.login_error: Exception | None = None
        self.signup_error: Exception | None = None
        self.calls: list[tuple[str, str]] = []

    def tokens(self) -> TokenSet:
        return TokenSet(
            access_token="at-1",
            expires_at=int(time.time()) + 3600,
            refresh_token="rt-1",
            claims=dict(self.claims),
        )

    def authorize_url(self, *, redirect_uri, state, connection=None, screen_hint=None) -> str:
        params = {"redirect_uri": redirect_uri, "state": state}
        if connection:
            params["connection"] = connection
        if screen_hint:
            params["screen_hint"] = screen_hint
        return f"{PROVIDER_URL}/authorize?{urlencode(params)}"

    def logout_url(self, return_to: str) -> str:
        return f"{PROVIDER_URL}/v2/logout?{urlencode({'returnTo': return_to})}"

    async def exchange_code(self, code: str, redirect_uri: str) -> TokenSet:
        self.calls.append(("exchange_code", code))
        if self.login_error:
            raise self.login_error
        return self.tokens()

    async def password_login(self, email: str, password: str) -> TokenSet:
        self.calls.append(("password_login", email))
        if self.login_error:
            raise self.login_error
        return self.tokens()

    async def signup(self, *, email, password, first_name, last_name, user_metadata=None) -> dict:
        self.calls.append(("signup", email))
        if self.signup_error:
            raise self.signup_error
        return {"_id": "new-user", "email": email}

    async def get_access_token(self, tokens: TokenSet) -> TokenSet:
        return tokens

    async def fetch_userinfo(self, access_token: str) -> dict:
        self.calls.append(("userinfo", access_token))
        if self.userinfo_error:
            raise self.userinfo_error
        return self.userinfo

    async def restore(self, tokens: TokenSet | None):
        if tokens is None or tokens.subject is None:
            return ProviderSession(), None
        session = ProviderSession(
            is_authenticated=True,
            claims=tokens.claims,
            access_token=tokens.access_token,
        )
        return session, tokens

    async def aclose(self) -> None:
        pass


class FakeBackend:
    """Stands in for BackendClient; records every profile submission."""

    def __init__(self) -> None:
        self.error: Exception | None = None
        self.requests: list = []

    async def complete_profile(self, access_token, payload) -> BackendUser:
        self.requests.append((access_token, payload))
        if self.error:
            raise self.error
        return BackendUser(
            id="42",
            email=payload.email or "",
            first_name=payload.first_name,
            last_name=payload.last_name,
        )

    async def aclose(self) -> None:
        pass


@pytest.fixture
def fake_identity():
    return FakeIdentity()


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def reconciler(storage, fake_identity, fake_backend):
    """An English-locale reconciler over in-memory storage (not loaded yet)."""
    return SessionReconciler(
        storage, fake_identity, fake_backend, locale="en", app_url=APP_URL
    )


@pytest.fixture
def profile_payload():
    return {
        "first_name": "Sara",
        "last_name": "Ali",
        "job_title": "Data engineer",
        "phone_number": "+966 55 123 4567",
        "business_model": "Non-profit",
        "team_size": "11-50",
        "about_yourself": "Building Quran apps",
    }


@pytest_asyncio.fixture
async def engine():
    """Create a fresh in-memory SQLite engine per test function."""
    eng = create_async_engine(
        TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        import itqan.models  # noqa: F401

        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    """Yield an async session bound to the test engine."""
    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=True)
    async with factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(engine, fake_identity, fake_backend):
    """HTTPX async test client wired to the FastAPI app with a test DB and fake providers."""
    from itqan.api.app import create_app
    from itqan.api.dependencies import get_backend_client, get_db, get_identity_bridge

    app = create_app()
    factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=True)

    async def override_db():
        async with factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[get_identity_bridge] = lambda: fake_identity
    app.dependency_overrides[get_backend_client] = lambda: fake_backend

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

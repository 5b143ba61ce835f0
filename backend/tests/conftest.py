"""
Pytest fixtures for test database, application context, client and auth.

Each test gets freshly created tables (in-memory SQLite by default, or the
async URL in TEST_DATABASE_URL), a fixed business clock, and a fake mail
provider behind httpx.MockTransport.
"""

import json
import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator

import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.pool import StaticPool

from court_rental.main import app
from court_rental.core.config import Settings
from court_rental.core.context import AppContext
from court_rental.core.security import create_access_token, hash_password
from court_rental.db.base import Base
from court_rental.db.engine import build_session_factory
from court_rental.db.session import get_db
from court_rental.models import AdminUser, Court, PromoCode

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")

LAGOS = timezone(timedelta(hours=1))
# Wednesday noon in Lagos; every test sees this as "now"
NOW = datetime(2025, 1, 1, 12, 0, tzinfo=LAGOS)
TODAY = NOW.date()
TOMORROW = TODAY + timedelta(days=1)


class FakeMailProvider:
    """Records outgoing provider requests and answers with a canned response."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.status_code = 200
        self.body = '{"id": "email_123"}'

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status_code, text=self.body)

    def payload(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


def make_settings(**overrides) -> Settings:
    values = dict(
        ENVIRONMENT="test",
        REDIS_ENABLED=False,
        SECRET_KEY="test-secret-key",
        PUBLIC_SITE_URL="https://rentals.test",
        COURT_IMAGE_BASE_URL="https://cdn.test/storage",
        MAIL_PROVIDER="resend",
        ADMIN_EMAIL="",
        RESEND_API_KEY="",
        EMAILJS_SERVICE_ID="",
        EMAILJS_TEMPLATE_ID="",
        EMAILJS_PUBLIC_KEY="",
        EMAILJS_PRIVATE_KEY="",
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def test_settings() -> Settings:
    return make_settings()


@pytest.fixture
def mail_provider() -> FakeMailProvider:
    return FakeMailProvider()


@pytest_asyncio.fixture
async def engine():
    """Create tables for one test, drop them afterwards."""
    kwargs = {}
    if TEST_DATABASE_URL.startswith("sqlite"):
        kwargs = {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    test_engine = create_async_engine(TEST_DATABASE_URL, **kwargs)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    async with build_session_factory(engine)() as session:
        yield session


@pytest_asyncio.fixture
async def ctx(engine, test_settings, mail_provider) -> AsyncGenerator[AppContext, None]:
    """Application context with a fixed clock and the fake mail provider."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(mail_provider.handler))
    context = AppContext(
        settings=test_settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        http=http,
        clock=lambda: NOW,
    )
    yield context
    context.booking_feed.close()
    await http.aclose()


@pytest.fixture
def configure_mail(ctx):
    """Give the context working credentials for both mail providers."""

    def _configure(**overrides):
        values = dict(
            ADMIN_EMAIL="admin@example.com",
            RESEND_API_KEY="re_test_key",
            EMAILJS_SERVICE_ID="service_test",
            EMAILJS_TEMPLATE_ID="template_test",
            EMAILJS_PUBLIC_KEY="public_test",
            EMAILJS_PRIVATE_KEY="private_test",
        )
        values.update(overrides)
        ctx.settings = ctx.settings.model_copy(update=values)
        return ctx.settings

    return _configure


@pytest_asyncio.fixture
async def client(ctx: AppContext, db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test context, sharing the test session."""

    async def override_get_db():
        yield db_session

    app.state.context = ctx
    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def live_client(ctx: AppContext) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client using the real request-scoped sessions (commit/rollback in get_db)."""
    app.state.context = ctx
    app.dependency_overrides.clear()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> AdminUser:
    admin = AdminUser(
        email="admin@example.com",
        hashed_password=hash_password("adminpassword123"),
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest_asyncio.fixture
async def auth_headers(admin_user: AdminUser, test_settings: Settings) -> dict:
    token = create_access_token({"sub": str(admin_user.id)}, test_settings)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def courts(db_session: AsyncSession) -> dict[str, Court]:
    """Two active courts and one inactive court."""
    rows = [
        Court(
            id="indoor-arena",
            name="Indoor Arena",
            slug="arena",
            card_image="/courts/indoor arena.jpg",
            hourly_rate=30000,
            daily_rate=140000,
            weekly_rate=850000,
            is_active=True,
        ),
        Court(
            id="lounge",
            name="Lounge",
            hero_image="https://images.example.com/lounge.jpg",
            hourly_rate=12000,
            daily_rate=90000,
            weekly_rate=520000,
            is_active=True,
        ),
        Court(
            id="old-hall",
            name="Old Hall",
            hourly_rate=5000,
            daily_rate=40000,
            weekly_rate=200000,
            is_active=False,
        ),
    ]
    db_session.add_all(rows)
    await db_session.commit()
    return {court.id: court for court in rows}


@pytest.fixture
def make_promo(db_session: AsyncSession):
    """Factory for promo codes; defaults to an open-ended 10% code."""

    async def _make(**fields) -> PromoCode:
        values = dict(code="SAVE10", type="percent", value=10, is_active=True, redeemed_count=0)
        values.update(fields)
        promo = PromoCode(**values)
        db_session.add(promo)
        await db_session.commit()
        await db_session.refresh(promo)
        return promo

    return _make


def booking_payload(**overrides) -> dict:
    payload = {
        "court_id": "indoor-arena",
        "plan": "Hourly",
        "start_date": TOMORROW.isoformat(),
        "start_time": "10:00",
        "hours": 2,
        "customer_name": "Ada Obi",
        "customer_phone": "+2348012345678",
        "customer_email": "ada@example.com",
        "event_type": "Tournament",
        "notes": "Need extra chairs",
    }
    payload.update(overrides)
    return payload

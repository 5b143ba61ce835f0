"""
Tests for admin login, booking review and the stream guard.
"""

from datetime import timedelta

import httpx
import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import AsyncAdaptedQueuePool

from court_rental.core.context import AppContext
from court_rental.core.security import create_access_token, get_streaming_admin, hash_password
from court_rental.db.base import Base
from court_rental.db.engine import build_session_factory
from court_rental.models import AdminUser, Booking
from court_rental.services.auth_service import ensure_admin

from conftest import NOW, TOMORROW


async def add_booking(db_session, name: str, created_at) -> Booking:
    booking = Booking(
        court_id="lounge",
        plan="Daily",
        start_date=TOMORROW,
        end_date=TOMORROW,
        base_amount=90000,
        discount_amount=0,
        total_amount=90000,
        customer_name=name,
        customer_phone="+2348000000000",
        customer_email=f"{name.lower()}@example.com",
        status="pending",
        created_at=created_at,
    )
    db_session.add(booking)
    await db_session.commit()
    await db_session.refresh(booking)
    return booking


@pytest.mark.asyncio
async def test_login(client: AsyncClient, admin_user):
    response = await client.post(
        "/api/v1/admin/login",
        json={"email": "admin@example.com", "password": "adminpassword123"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, admin_user):
    response = await client.post(
        "/api/v1/admin/login",
        json={"email": "admin@example.com", "password": "wrong"},
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Login failed. Check your email and password."


@pytest.mark.asyncio
async def test_login_deactivated(client: AsyncClient, db_session, admin_user):
    admin_user.is_active = False
    await db_session.commit()

    response = await client.post(
        "/api/v1/admin/login",
        json={"email": "admin@example.com", "password": "adminpassword123"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_me(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/admin/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["email"] == "admin@example.com"


@pytest.mark.asyncio
async def test_list_requires_auth(client: AsyncClient):
    response = await client.get("/api/v1/admin/bookings")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_rejects_bad_token(client: AsyncClient, admin_user):
    response = await client.get(
        "/api/v1/admin/bookings", headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


@pytest.mark.asyncio
async def test_list_rejects_expired_token(client: AsyncClient, admin_user, test_settings):
    token = create_access_token(
        {"sub": str(admin_user.id)}, test_settings, expires_delta=timedelta(minutes=-1)
    )
    response = await client.get(
        "/api/v1/admin/bookings", headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_newest_first(client: AsyncClient, db_session, courts, auth_headers):
    await add_booking(db_session, "Older", NOW - timedelta(hours=2))
    await add_booking(db_session, "Newest", NOW)
    await add_booking(db_session, "Middle", NOW - timedelta(hours=1))

    response = await client.get("/api/v1/admin/bookings", headers=auth_headers)
    assert response.status_code == 200
    names = [b["customer_name"] for b in response.json()]
    assert names == ["Newest", "Middle", "Older"]


@pytest.mark.asyncio
@pytest.mark.parametrize("new_status", ["confirmed", "rejected", "pending"])
async def test_update_status(client: AsyncClient, db_session, courts, auth_headers, new_status):
    booking = await add_booking(db_session, "Ada", NOW)

    response = await client.patch(
        f"/api/v1/admin/bookings/{booking.id}",
        json={"status": new_status},
        headers=auth_headers,
    )
    assert response.status_code == 200
    assert response.json()["status"] == new_status


@pytest.mark.asyncio
async def test_update_keeps_price_snapshot(client: AsyncClient, db_session, courts, auth_headers):
    booking = await add_booking(db_session, "Ada", NOW)

    response = await client.patch(
        f"/api/v1/admin/bookings/{booking.id}",
        json={"status": "confirmed"},
        headers=auth_headers,
    )
    data = response.json()
    assert data["total_amount"] == 90000
    assert data["customer_name"] == "Ada"


@pytest.mark.asyncio
async def test_update_unknown_booking(client: AsyncClient, auth_headers):
    response = await client.patch(
        "/api/v1/admin/bookings/9999",
        json={"status": "confirmed"},
        headers=auth_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_invalid_status(client: AsyncClient, db_session, courts, auth_headers):
    booking = await add_booking(db_session, "Ada", NOW)

    response = await client.patch(
        f"/api/v1/admin/bookings/{booking.id}",
        json={"status": "cancelled"},
        headers=auth_headers,
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_update_requires_auth(client: AsyncClient, db_session, courts):
    booking = await add_booking(db_session, "Ada", NOW)
    response = await client.patch(
        f"/api/v1/admin/bookings/{booking.id}", json={"status": "confirmed"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_stream_requires_auth(client: AsyncClient):
    response = await client.get("/api/v1/admin/bookings/stream")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_internal_domain(client: AsyncClient, db_session):
    await ensure_admin(db_session, " ops@courts.local ", "secretpass1")
    await db_session.commit()

    response = await client.post(
        "/api/v1/admin/login",
        json={"email": "ops@courts.local", "password": "secretpass1"},
    )
    assert response.status_code == 200

    padded = await client.post(
        "/api/v1/admin/login",
        json={"email": "  ops@courts.local ", "password": "secretpass1"},
    )
    assert padded.status_code == 200


@pytest.mark.asyncio
async def test_login_empty_email(client: AsyncClient):
    response = await client.post("/api/v1/admin/login", json={"email": "", "password": "x"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_stream_admin_releases_connection(tmp_path, test_settings, mail_provider):
    # A pooled engine so checked-out connections are visible
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'stream.db'}", poolclass=AsyncAdaptedQueuePool
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = build_session_factory(engine)
    async with session_factory() as session:
        admin = AdminUser(email="admin@example.com", hashed_password=hash_password("pw123456"))
        session.add(admin)
        await session.commit()
        admin_id = admin.id

    http = httpx.AsyncClient(transport=httpx.MockTransport(mail_provider.handler))
    ctx = AppContext(
        settings=test_settings,
        engine=engine,
        session_factory=session_factory,
        http=http,
        clock=lambda: NOW,
    )
    try:
        token = create_access_token({"sub": str(admin_id)}, test_settings)
        credentials = HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)

        resolved = await get_streaming_admin(credentials=credentials, ctx=ctx)
        assert resolved.id == admin_id
        assert engine.pool.checkedout() == 0

        with pytest.raises(HTTPException) as exc:
            await get_streaming_admin(credentials=None, ctx=ctx)
        assert exc.value.status_code == 401
        assert engine.pool.checkedout() == 0
    finally:
        ctx.booking_feed.close()
        await http.aclose()
        await engine.dispose()

"""
Admin endpoints: login, booking review and the live new-booking stream.
"""

import asyncio

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from court_rental.core.context import AppContext, get_context
from court_rental.core.security import get_current_admin, get_streaming_admin
from court_rental.db.session import get_db
from court_rental.models.admin_user import AdminUser
from court_rental.schemas.admin import AdminLogin, AdminResponse, Token
from court_rental.schemas.booking import BookingResponse, BookingStatusUpdate
from court_rental.services.auth_service import authenticate_admin
from court_rental.services.booking_service import list_bookings, update_booking_status
from court_rental.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/admin", tags=["Admin"])

KEEPALIVE_SECONDS = 15.0


@router.post("/login", response_model=Token)
async def login(
    login_data: AdminLogin,
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """Authenticate and receive a JWT access token."""
    token = await authenticate_admin(db, login_data, ctx.settings)
    return Token(access_token=token)


@router.get("/me", response_model=AdminResponse)
async def me(admin: AdminUser = Depends(get_current_admin)):
    return admin


@router.get("/bookings", response_model=list[BookingResponse])
async def list_bookings_endpoint(
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """All bookings, newest first."""
    return await list_bookings(db)


@router.patch("/bookings/{booking_id}", response_model=BookingResponse)
async def update_booking_endpoint(
    booking_id: int,
    update: BookingStatusUpdate,
    admin: AdminUser = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    """Confirm, reject, or re-open (pending) a booking."""
    return await update_booking_status(db, booking_id, update.status)


@router.get("/bookings/stream")
async def stream_bookings(
    request: Request,
    admin: AdminUser = Depends(get_streaming_admin),
    ctx: AppContext = Depends(get_context),
):
    """
    Server-Sent Events stream of new bookings. Each event carries an
    AdminNotice; a booking id is sent at most once per connection.
    """
    subscription = ctx.booking_feed.subscribe()
    logger.info("admin_stream_opened", admin_id=admin.id)

    async def event_source():
        try:
            while not await request.is_disconnected():
                try:
                    notice = await asyncio.wait_for(subscription.get(), timeout=KEEPALIVE_SECONDS)
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
                    continue
                if notice is None:
                    break
                yield f"event: booking\nid: {notice.booking.id}\ndata: {notice.model_dump_json()}\n\n"
        finally:
            subscription.close()
            logger.info("admin_stream_closed", admin_id=admin.id)

    return StreamingResponse(
        event_source(),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "X-Accel-Buffering": "no"},
    )

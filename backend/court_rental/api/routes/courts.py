"""
Public court catalogue and booking-form defaults.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from court_rental.core.context import AppContext, get_context
from court_rental.db.session import get_db
from court_rental.schemas.court import BookingFormDefaults, CourtResponse
from court_rental.services.court_service import (
    booking_form_defaults,
    get_court,
    list_active_courts,
    to_response,
)

router = APIRouter(tags=["Courts"])


@router.get("/courts", response_model=list[CourtResponse])
async def list_courts_endpoint(
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """Active courts ordered by name. Cached in Redis when available."""
    return await list_active_courts(db, ctx.settings, ctx.redis)


@router.get("/courts/{court_ref}", response_model=CourtResponse)
async def get_court_endpoint(
    court_ref: str,
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """Get one active court by id or slug."""
    court = await get_court(db, court_ref)
    return to_response(court, ctx.settings)


@router.get("/booking-form", response_model=BookingFormDefaults)
async def booking_form_endpoint(
    reserve: Optional[str] = Query(None),
    court: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """
    Initial state for the booking form. QR links use `reserve=1` to open the
    form and `court=<id-or-slug>` to preselect a court.
    """
    courts = await list_active_courts(db, ctx.settings, ctx.redis)
    return booking_form_defaults(courts, ctx.settings, ctx.now(), reserve=reserve, court_ref=court)

"""
Court catalogue: active listing, id-or-slug lookup, image URLs and the
booking-form defaults derived from QR link parameters.
"""

from datetime import datetime
from typing import Optional
from urllib.parse import quote

import redis.asyncio as redis
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from court_rental.core.config import Settings
from court_rental.core.logging import get_logger
from court_rental.models.court import Court
from court_rental.models.enums import Plan
from court_rental.schemas.booking import EVENT_TYPES
from court_rental.schemas.court import BookingFormDefaults, CourtResponse
from court_rental.services.cache_service import get_cached_courts, set_cached_courts
from court_rental.services.pricing import DEFAULT_HOURS

logger = get_logger(__name__)

COURTS_BUCKET = "courts"
DEFAULT_START_TIME = "10:00"


def normalize_image_path(raw: str) -> str:
    trimmed = raw.strip()
    if not trimmed or trimmed.startswith("http"):
        return trimmed
    cleaned = trimmed.lstrip("/")
    prefix = f"{COURTS_BUCKET}/"
    return cleaned[len(prefix):] if cleaned.startswith(prefix) else cleaned


def resolve_court_image(court: Court, base_url: Optional[str]) -> Optional[str]:
    """Card image first, then hero image; relative paths live in the courts bucket."""
    path = normalize_image_path(court.card_image or court.hero_image or "")
    if not path:
        return None
    if path.startswith("http") or not base_url:
        return path
    return f"{base_url.rstrip('/')}/{COURTS_BUCKET}/{path}".replace(" ", "%20")


def to_response(court: Court, settings: Settings) -> CourtResponse:
    return CourtResponse(
        id=court.id,
        name=court.name,
        slug=court.slug,
        hourly_rate=court.hourly_rate,
        daily_rate=court.daily_rate,
        weekly_rate=court.weekly_rate,
        image_url=resolve_court_image(court, settings.COURT_IMAGE_BASE_URL),
    )


async def list_active_courts(
    db: AsyncSession,
    settings: Settings,
    cache: Optional[redis.Redis] = None,
) -> list[CourtResponse]:
    """Active courts ordered by name, served from Redis when cached."""
    cached = await get_cached_courts(cache)
    if cached is not None:
        return [CourtResponse(**item) for item in cached]

    result = await db.execute(
        select(Court).where(Court.is_active.is_(True)).order_by(Court.name.asc())
    )
    courts = [to_response(court, settings) for court in result.scalars().all()]
    await set_cached_courts(cache, [c.model_dump() for c in courts], settings.REDIS_CACHE_TTL)
    return courts


async def find_active_court(db: AsyncSession, court_ref: str) -> Optional[Court]:
    """Look up an active court by id or slug."""
    result = await db.execute(
        select(Court).where(
            Court.is_active.is_(True),
            or_(Court.id == court_ref, Court.slug == court_ref),
        )
    )
    return result.scalars().first()


async def get_court(db: AsyncSession, court_ref: str) -> Court:
    court = await find_active_court(db, court_ref)
    if not court:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Court {court_ref} not found",
        )
    return court


def featured_court(courts: list[CourtResponse]) -> Optional[CourtResponse]:
    for court in courts:
        if "indoor" in court.name.lower():
            return court
    return courts[0] if courts else None


def reserve_url(site_url: str, court: Optional[CourtResponse]) -> str:
    base = f"{site_url.rstrip('/')}/?reserve=1"
    if court is None:
        return base
    return f"{base}&court={quote(court.slug or court.id, safe='')}"


def booking_form_defaults(
    courts: list[CourtResponse],
    settings: Settings,
    now: datetime,
    reserve: Optional[str] = None,
    court_ref: Optional[str] = None,
) -> BookingFormDefaults:
    """
    Initial booking form state. `reserve=1` opens the form; `court` preselects
    a court by id or slug, falling back to the first listed court.
    """
    selected = None
    if court_ref:
        selected = next((c for c in courts if court_ref in (c.id, c.slug)), None)
        if selected is None:
            logger.info("booking_form_unknown_court", court=court_ref)
    if selected is None and courts:
        selected = courts[0]

    today = now.date()
    return BookingFormDefaults(
        open=reserve == "1",
        court_id=selected.id if selected else None,
        plan=Plan.HOURLY,
        start_date=today,
        end_date=today,
        start_time=DEFAULT_START_TIME,
        hours=DEFAULT_HOURS,
        event_types=EVENT_TYPES,
        reserve_url=reserve_url(settings.PUBLIC_SITE_URL, featured_court(courts)),
    )

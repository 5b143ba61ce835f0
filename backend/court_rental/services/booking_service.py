"""
Booking service: quoting, validation and submission of reservations, plus
the admin listing and status updates.

SUBMISSION FLOW
===============

  1. Contact fields present (name, phone, email)
  2. Court exists and is active
  3. Start date not in the past; multi-day end date not in the past
  4. Hourly bookings for today must start after the current minute
  5. Price the schedule and re-evaluate the promo code against that price
  6. Redeem the promo (conditional UPDATE) if it discounts the booking
  7. Insert one "pending" row carrying the pricing snapshot

Steps 1-5 have no side effects; any failure returns a user-facing message.
Steps 6-7 share the request transaction, so a failed insert also undoes the
redemption. There is no retry: the customer is asked to try again.

"Today" and "now" are the business-timezone clock passed in by the caller.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import HTTPException, status

from court_rental.models.booking import Booking
from court_rental.models.court import Court
from court_rental.models.enums import BookingStatus, Plan
from court_rental.schemas.booking import BookingCreate, BookingSchedule
from court_rental.services.court_service import find_active_court
from court_rental.services.pricing import (
    Pricing,
    apply_discount,
    booking_summary,
    clamp_hours,
    compute_base_amount,
)
from court_rental.services.promo_service import (
    PromoEvaluation,
    PromoStatus,
    evaluate_promo,
    redeem_promo,
)
from court_rental.core.logging import get_logger
from court_rental.core.metrics import booking_status_changes, record_booking_submission

logger = get_logger(__name__)


def _reject(message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> HTTPException:
    return HTTPException(status_code=status_code, detail=message)


def validate_contact(data: BookingCreate) -> None:
    if not (data.customer_name.strip() and data.customer_phone.strip() and data.customer_email.strip()):
        raise _reject("Please fill in your name, phone, and email.")


def validate_schedule(schedule: BookingSchedule, now: datetime) -> None:
    today = now.date()
    if schedule.start_date < today:
        raise _reject("Start date cannot be in the past.")

    if schedule.plan != Plan.HOURLY and schedule.end_date < today:
        raise _reject("End date cannot be in the past.")

    if schedule.plan == Plan.HOURLY and schedule.start_date == today:
        now_minutes = now.hour * 60 + now.minute
        start = schedule.start_time
        if start is None or start.hour * 60 + start.minute <= now_minutes:
            raise _reject("Start time must be later than the current time.")


async def quote_booking(
    db: AsyncSession,
    court: Optional[Court],
    schedule: BookingSchedule,
    promo_code: Optional[str],
    now: datetime,
) -> tuple[Pricing, PromoEvaluation, str]:
    """Price a schedule and evaluate a promo against it. No court prices at 0."""
    base = compute_base_amount(
        court, schedule.plan, schedule.start_date, schedule.end_date, schedule.hours
    )
    evaluation = await evaluate_promo(db, promo_code, base, now)
    pricing = apply_discount(base, evaluation.discount if evaluation.applied else 0)
    summary = ""
    if court is not None:
        summary = booking_summary(
            court.name,
            schedule.plan,
            schedule.start_date,
            schedule.end_date,
            schedule.start_time,
            pricing.total,
        )
    return pricing, evaluation, summary


async def create_booking(db: AsyncSession, data: BookingCreate, now: datetime) -> Booking:
    """Validate and insert a pending booking."""
    try:
        validate_contact(data)
        court = await find_active_court(db, data.court_id)
        if court is None:
            raise _reject("Select a court first.")
        validate_schedule(data, now)
    except HTTPException as e:
        record_booking_submission("rejected")
        logger.info("booking_rejected", court_id=data.court_id, reason=e.detail)
        raise

    pricing, evaluation, _ = await quote_booking(db, court, data, data.promo_code, now)

    if evaluation.status not in (PromoStatus.CLEARED, PromoStatus.APPLIED):
        record_booking_submission("rejected")
        code = (
            status.HTTP_503_SERVICE_UNAVAILABLE
            if evaluation.status == PromoStatus.LOOKUP_FAILED
            else status.HTTP_400_BAD_REQUEST
        )
        raise _reject(evaluation.message, code)

    promo_id = None
    if pricing.discount > 0:
        promo_id = evaluation.promo.id
        if not await redeem_promo(db, promo_id):
            record_booking_submission("rejected")
            raise _reject("Promo limit reached.", status.HTTP_409_CONFLICT)

    booking = Booking(
        court_id=court.id,
        plan=data.plan.value,
        start_date=data.start_date,
        end_date=data.start_date if data.plan == Plan.HOURLY else data.end_date,
        start_time=data.start_time,
        hours=clamp_hours(data.hours) if data.plan == Plan.HOURLY else None,
        base_amount=pricing.base,
        discount_amount=pricing.discount,
        total_amount=pricing.total,
        promo_code_id=promo_id,
        customer_name=data.customer_name.strip(),
        customer_phone=data.customer_phone.strip(),
        customer_email=data.customer_email.strip(),
        event_type=data.event_type,
        notes=data.notes,
        status=BookingStatus.PENDING.value,
        created_at=now,
    )
    db.add(booking)
    try:
        await db.flush()
        await db.refresh(booking)
    except SQLAlchemyError as e:
        await db.rollback()
        record_booking_submission("error")
        logger.error("booking_insert_failed", court_id=court.id, error=str(e))
        raise _reject("Booking failed. Try again.", status.HTTP_503_SERVICE_UNAVAILABLE)

    record_booking_submission("created")
    logger.info(
        "booking_created",
        booking_id=booking.id,
        court_id=booking.court_id,
        plan=booking.plan,
        total=booking.total_amount,
        promo_code_id=promo_id,
    )
    return booking


async def list_bookings(db: AsyncSession) -> list[Booking]:
    """All bookings, newest first."""
    result = await db.execute(
        select(Booking).order_by(Booking.created_at.desc(), Booking.id.desc())
    )
    return list(result.scalars().all())


async def update_booking_status(db: AsyncSession, booking_id: int, new_status: str) -> Booking:
    """
    Set a booking's status. Confirming or rejecting is the normal review
    step; setting "pending" re-opens a booking to correct a mistake.
    """
    result = await db.execute(select(Booking).where(Booking.id == booking_id))
    booking = result.scalar_one_or_none()

    if not booking:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Booking not found",
        )

    previous = booking.status
    booking.status = new_status
    await db.flush()
    await db.refresh(booking)

    booking_status_changes.labels(status=new_status).inc()
    logger.info(
        "booking_status_updated",
        booking_id=booking.id,
        previous=previous,
        status=new_status,
    )
    return booking

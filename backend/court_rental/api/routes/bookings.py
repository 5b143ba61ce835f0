"""
Public booking endpoints: price quotes and reservation submission.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from court_rental.core.context import AppContext, get_context
from court_rental.db.session import get_db
from court_rental.schemas.booking import BookingCreate, BookingResponse, QuoteRequest
from court_rental.schemas.promo import PromoEvaluationResponse, QuoteResponse
from court_rental.services.booking_service import create_booking, quote_booking
from court_rental.services.court_service import find_active_court
from court_rental.services.notification_service import announce_booking
from court_rental.services.promo_service import PromoStatus

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/quote", response_model=QuoteResponse)
async def quote_endpoint(
    request: QuoteRequest,
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """Base, discount and total for a schedule. Unknown courts price at 0."""
    court = await find_active_court(db, request.court_id)
    pricing, evaluation, summary = await quote_booking(
        db, court, request, request.promo_code, ctx.now()
    )
    promo = None
    if evaluation.status != PromoStatus.CLEARED:
        promo = PromoEvaluationResponse.from_evaluation(evaluation)
    return QuoteResponse(
        court_id=request.court_id,
        base=pricing.base,
        discount=pricing.discount,
        total=pricing.total,
        summary=summary,
        promo=promo,
    )


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_endpoint(
    booking_data: BookingCreate,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """
    Submit a reservation. The booking is created as "pending" and the admin
    is notified (live stream + email) after the response is sent.
    """
    booking = await create_booking(db, booking_data, ctx.now())
    response = BookingResponse.model_validate(booking)
    background_tasks.add_task(announce_booking, ctx, response)
    return response

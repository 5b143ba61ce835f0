"""
Promo code evaluation for the booking form.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from court_rental.core.context import AppContext, get_context
from court_rental.db.session import get_db
from court_rental.schemas.promo import PromoApplyRequest, PromoEvaluationResponse
from court_rental.services.booking_service import quote_booking
from court_rental.services.court_service import find_active_court

router = APIRouter(prefix="/promos", tags=["Promos"])


@router.post("/apply", response_model=PromoEvaluationResponse)
async def apply_promo_endpoint(
    request: PromoApplyRequest,
    db: AsyncSession = Depends(get_db),
    ctx: AppContext = Depends(get_context),
):
    """
    Evaluate a promo code against the price of the given schedule.

    Always answers 200: rejection reasons are part of the evaluation
    (status, tone and message for the form). An empty code clears the promo.
    """
    court = await find_active_court(db, request.court_id)
    _, evaluation, _ = await quote_booking(db, court, request, request.code, ctx.now())
    return PromoEvaluationResponse.from_evaluation(evaluation)

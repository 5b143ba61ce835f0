"""
Pydantic schemas for promo evaluation and price quotes.
"""

from typing import Optional
from pydantic import BaseModel

from court_rental.schemas.booking import BookingSchedule
from court_rental.services.promo_service import PromoEvaluation, PromoStatus


class PromoApplyRequest(BookingSchedule):
    code: str = ""


class PromoEvaluationResponse(BaseModel):
    status: PromoStatus
    tone: str
    message: str
    code: Optional[str] = None
    discount: int = 0

    @classmethod
    def from_evaluation(cls, evaluation: PromoEvaluation) -> "PromoEvaluationResponse":
        return cls(
            status=evaluation.status,
            tone=evaluation.tone,
            message=evaluation.message,
            code=evaluation.promo.code if evaluation.promo is not None else None,
            discount=evaluation.discount,
        )


class QuoteResponse(BaseModel):
    court_id: str
    base: int
    discount: int
    total: int
    summary: str
    promo: Optional[PromoEvaluationResponse] = None

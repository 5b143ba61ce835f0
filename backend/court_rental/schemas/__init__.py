from court_rental.schemas.admin import AdminLogin, AdminResponse, AdminNotice, Token
from court_rental.schemas.booking import (
    BookingSchedule, BookingCreate, BookingResponse, BookingStatusUpdate, QuoteRequest,
)
from court_rental.schemas.court import CourtResponse, BookingFormDefaults
from court_rental.schemas.notification import BookingRecord, NotificationRequest
from court_rental.schemas.promo import PromoApplyRequest, PromoEvaluationResponse, QuoteResponse

__all__ = [
    "AdminLogin", "AdminResponse", "AdminNotice", "Token",
    "BookingSchedule", "BookingCreate", "BookingResponse", "BookingStatusUpdate", "QuoteRequest",
    "CourtResponse", "BookingFormDefaults",
    "BookingRecord", "NotificationRequest",
    "PromoApplyRequest", "PromoEvaluationResponse", "QuoteResponse",
]

"""
Pydantic schemas for booking quotes, submissions and admin updates.
"""

from datetime import date, datetime, time
from typing import Literal, Optional
from pydantic import BaseModel, Field, model_validator

from court_rental.models.enums import Plan
from court_rental.services.pricing import DEFAULT_HOURS

EVENT_TYPES = [
    "Tournament",
    "School event",
    "Wedding",
    "Funeral",
    "Corporate event",
    "Other",
]


class BookingSchedule(BaseModel):
    """
    Court, plan and dates as entered on the booking form.

    Hourly bookings always end on their start date; a multi-day end date
    earlier than the start is moved up to the start. Hours outside 1..12
    are accepted here and clamped when priced.
    """

    court_id: str
    plan: Plan = Plan.HOURLY
    start_date: date
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    hours: int = DEFAULT_HOURS

    @model_validator(mode="after")
    def align_end_date(self):
        if self.plan == Plan.HOURLY or self.end_date is None or self.end_date < self.start_date:
            self.end_date = self.start_date
        return self


class QuoteRequest(BookingSchedule):
    promo_code: Optional[str] = None


class BookingCreate(BookingSchedule):
    promo_code: Optional[str] = None
    # Presence is checked by the booking validator so the customer gets one message
    customer_name: str = ""
    customer_phone: str = ""
    customer_email: str = ""
    event_type: Optional[str] = Field(default=EVENT_TYPES[0], max_length=100)
    notes: Optional[str] = Field(default=None, max_length=2000)


class BookingResponse(BaseModel):
    id: int
    court_id: str
    plan: Plan
    start_date: date
    end_date: date
    start_time: Optional[time]
    hours: Optional[int]
    base_amount: int
    discount_amount: int
    total_amount: int
    promo_code_id: Optional[int]
    customer_name: str
    customer_phone: str
    customer_email: str
    event_type: Optional[str]
    notes: Optional[str]
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class BookingStatusUpdate(BaseModel):
    status: Literal["pending", "confirmed", "rejected"]

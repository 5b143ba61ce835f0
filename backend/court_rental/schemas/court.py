"""
Pydantic schemas for the public court catalogue and booking form.
"""

from datetime import date
from typing import Optional
from pydantic import BaseModel

from court_rental.models.enums import Plan


class CourtResponse(BaseModel):
    id: str
    name: str
    slug: Optional[str] = None
    hourly_rate: int
    daily_rate: int
    weekly_rate: int
    image_url: Optional[str] = None


class BookingFormDefaults(BaseModel):
    open: bool
    court_id: Optional[str]
    plan: Plan
    start_date: date
    end_date: date
    start_time: str
    hours: int
    event_types: list[str]
    reserve_url: str

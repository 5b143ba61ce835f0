"""
Pydantic schemas for the admin login and booking feed.
"""

from datetime import datetime
from pydantic import BaseModel, Field

from court_rental.schemas.booking import BookingResponse


class AdminLogin(BaseModel):
    # Matched exactly against the stored address; internal domains are allowed
    email: str = Field(min_length=1, max_length=255)
    password: str


class AdminResponse(BaseModel):
    id: int
    email: str
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AdminNotice(BaseModel):
    id: str
    message: str
    meta: str
    booking: BookingResponse

"""
Request schema for the admin notification handlers.

The handlers accept exactly one envelope: the booking row under "record",
optionally accompanied by the database-webhook metadata fields. Anything
else at the top level is a validation error.
"""

from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field


class BookingRecord(BaseModel):
    # Rows carry more columns than the email needs
    model_config = ConfigDict(extra="ignore")

    court_id: Optional[str] = None
    plan: Optional[str] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    start_time: Optional[str] = None
    total_amount: Union[int, float, str, None] = None
    customer_name: Optional[str] = None
    customer_email: Optional[str] = None
    customer_phone: Optional[str] = None
    event_type: Optional[str] = None
    notes: Optional[str] = None


class NotificationRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: Optional[str] = None
    table: Optional[str] = None
    schema_: Optional[str] = Field(default=None, alias="schema")
    old_record: Optional[dict[str, Any]] = None
    record: BookingRecord

"""
Booking model: one customer reservation with its pricing snapshot.

Key design decisions:
- Amounts are copied onto the row at submission time; later rate or promo
  changes never rewrite an existing booking
- promo_code_id is only set when the promo actually discounted the booking
- No uniqueness on (court, date): overlapping requests are resolved by the
  admin when confirming or rejecting
"""

from sqlalchemy import (
    Column, Integer, String, Date, Time, Text, ForeignKey, CheckConstraint, Index,
)
from sqlalchemy.orm import relationship

from court_rental.db.base import Base, TimestampMixin


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    court_id = Column(String(64), ForeignKey("courts.id"), nullable=False, index=True)
    plan = Column(String(10), nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    start_time = Column(Time, nullable=True)
    hours = Column(Integer, nullable=True)

    base_amount = Column(Integer, nullable=False, default=0)
    discount_amount = Column(Integer, nullable=False, default=0)
    total_amount = Column(Integer, nullable=False, default=0)
    promo_code_id = Column(Integer, ForeignKey("promo_codes.id"), nullable=True)

    customer_name = Column(String(255), nullable=False)
    customer_phone = Column(String(64), nullable=False)
    customer_email = Column(String(255), nullable=False)
    event_type = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    status = Column(String(20), nullable=False, default="pending")  # pending, confirmed, rejected

    court = relationship("Court", back_populates="bookings")

    __table_args__ = (
        CheckConstraint("plan IN ('Hourly', 'Daily', 'Weekly')", name="check_booking_plan"),
        CheckConstraint("status IN ('pending', 'confirmed', 'rejected')", name="check_booking_status"),
        CheckConstraint("base_amount >= 0", name="check_booking_base_non_negative"),
        CheckConstraint("discount_amount >= 0", name="check_booking_discount_non_negative"),
        CheckConstraint("total_amount >= 0", name="check_booking_total_non_negative"),
        # Admin list: newest first
        Index("ix_bookings_created_at", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, court={self.court_id}, plan={self.plan}, status={self.status})>"

"""
Court model: a rentable space with one rate per plan.

Rates are whole Naira amounts. Courts are keyed by a readable string id
(e.g. "indoor-arena") so QR links can reference them by id or slug.
"""

from sqlalchemy import Column, Integer, String, Boolean, CheckConstraint, Index
from sqlalchemy.orm import relationship

from court_rental.db.base import Base, TimestampMixin


class Court(Base, TimestampMixin):
    __tablename__ = "courts"

    id = Column(String(64), primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(64), unique=True, nullable=True)
    hero_image = Column(String(500), nullable=True)
    card_image = Column(String(500), nullable=True)
    hourly_rate = Column(Integer, nullable=False, default=0)
    daily_rate = Column(Integer, nullable=False, default=0)
    weekly_rate = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)

    bookings = relationship("Booking", back_populates="court")

    __table_args__ = (
        CheckConstraint("hourly_rate >= 0", name="check_court_hourly_rate_non_negative"),
        CheckConstraint("daily_rate >= 0", name="check_court_daily_rate_non_negative"),
        CheckConstraint("weekly_rate >= 0", name="check_court_weekly_rate_non_negative"),
        # Public listing: active courts ordered by name
        Index("ix_courts_active_name", "is_active", "name"),
    )

    def __repr__(self) -> str:
        return f"<Court(id={self.id}, name={self.name}, active={self.is_active})>"

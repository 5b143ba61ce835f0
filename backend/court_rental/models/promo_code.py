"""
Promo code model.

Codes are stored upper-cased so lookups can match exactly on the
normalized customer input. `redeemed_count` is only ever incremented with a
conditional UPDATE guarded by `max_redemptions`.
"""

from sqlalchemy import Column, Integer, String, Boolean, Float, DateTime, CheckConstraint
from sqlalchemy.orm import validates

from court_rental.db.base import Base, TimestampMixin


class PromoCode(Base, TimestampMixin):
    __tablename__ = "promo_codes"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(64), unique=True, index=True, nullable=False)
    type = Column(String(16), nullable=False, default="percent")  # percent, fixed
    value = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)

    # Optional constraints
    starts_at = Column(DateTime(timezone=True), nullable=True)
    ends_at = Column(DateTime(timezone=True), nullable=True)
    max_redemptions = Column(Integer, nullable=True)
    redeemed_count = Column(Integer, nullable=False, default=0)
    min_amount = Column(Integer, nullable=True)

    __table_args__ = (
        CheckConstraint("type IN ('percent', 'fixed')", name="check_promo_type"),
        CheckConstraint("value >= 0", name="check_promo_value_non_negative"),
        CheckConstraint("redeemed_count >= 0", name="check_promo_redeemed_non_negative"),
    )

    @validates("code")
    def _normalize_code(self, key, value):
        return value.strip().upper()

    def __repr__(self) -> str:
        return f"<PromoCode(id={self.id}, code={self.code}, type={self.type}, value={self.value})>"

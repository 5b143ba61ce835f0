"""
Promo code evaluation and redemption.

Evaluation order (first failing check wins):
  1. normalize (trim, upper-case); empty clears any applied promo
  2. lookup by exact code (store error -> lookup_failed)
  3. missing or inactive -> invalid
  4. before starts_at -> not_active_yet
  5. after ends_at -> expired
  6. redeemed_count >= max_redemptions -> limit_reached
  7. base below min_amount -> minimum_not_met
  8. accept and compute the discount

Redemption happens once per booking insert as a single conditional UPDATE,
so two customers racing for the last use of a capped code cannot both win.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from sqlalchemy import select, update, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from court_rental.models.enums import PromoType
from court_rental.models.promo_code import PromoCode
from court_rental.core.logging import get_logger
from court_rental.core.metrics import record_promo_evaluation
from court_rental.utils.money import D, format_naira, round_naira

logger = get_logger(__name__)


class PromoStatus(str, Enum):
    CLEARED = "cleared"
    APPLIED = "applied"
    LOOKUP_FAILED = "lookup_failed"
    INVALID = "invalid"
    NOT_ACTIVE_YET = "not_active_yet"
    EXPIRED = "expired"
    LIMIT_REACHED = "limit_reached"
    MINIMUM_NOT_MET = "minimum_not_met"


@dataclass(frozen=True)
class PromoEvaluation:
    status: PromoStatus
    message: str = ""
    promo: Optional[PromoCode] = None
    discount: int = 0

    @property
    def applied(self) -> bool:
        return self.status == PromoStatus.APPLIED

    @property
    def tone(self) -> str:
        if self.status == PromoStatus.CLEARED:
            return ""
        return "good" if self.applied else "bad"


def normalize_code(raw: Optional[str]) -> str:
    return (raw or "").strip().upper()


def as_aware(value: datetime) -> datetime:
    """Timestamps without an offset are stored in UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def compute_discount(promo: PromoCode, base_amount: int) -> int:
    """Discount for an accepted promo, never more than the base amount."""
    if promo.type == PromoType.PERCENT.value:
        discount = round_naira(D(promo.value) * base_amount / 100)
    elif promo.type == PromoType.FIXED.value:
        discount = round_naira(promo.value)
    else:
        discount = 0
    return max(0, min(discount, base_amount))


def check_promo(promo: Optional[PromoCode], base_amount: int, now: datetime) -> PromoEvaluation:
    """Run checks 3-8 against an already looked-up promo."""
    if promo is None or not promo.is_active:
        return PromoEvaluation(PromoStatus.INVALID, "Invalid promo code.")

    if promo.starts_at and now < as_aware(promo.starts_at):
        return PromoEvaluation(PromoStatus.NOT_ACTIVE_YET, "Promo is not active yet.")

    if promo.ends_at and now > as_aware(promo.ends_at):
        return PromoEvaluation(PromoStatus.EXPIRED, "Promo has expired.")

    if promo.max_redemptions is not None and (promo.redeemed_count or 0) >= promo.max_redemptions:
        return PromoEvaluation(PromoStatus.LIMIT_REACHED, "Promo limit reached.")

    if promo.min_amount and base_amount < promo.min_amount:
        return PromoEvaluation(
            PromoStatus.MINIMUM_NOT_MET,
            f"Minimum booking amount is {format_naira(promo.min_amount)}.",
        )

    return PromoEvaluation(
        PromoStatus.APPLIED,
        f"Promo applied: {promo.code}",
        promo=promo,
        discount=compute_discount(promo, base_amount),
    )


async def find_promo(db: AsyncSession, code: str) -> Optional[PromoCode]:
    # Redemptions are counted with bulk UPDATEs; reload the row instead of
    # trusting a copy already held by the session
    result = await db.execute(
        select(PromoCode)
        .where(PromoCode.code == code)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one_or_none()


async def evaluate_promo(
    db: AsyncSession,
    raw_code: Optional[str],
    base_amount: int,
    now: datetime,
) -> PromoEvaluation:
    code = normalize_code(raw_code)
    if not code:
        return PromoEvaluation(PromoStatus.CLEARED)

    try:
        promo = await find_promo(db, code)
    except SQLAlchemyError as e:
        logger.error("promo_lookup_failed", code=code, error=str(e))
        record_promo_evaluation(PromoStatus.LOOKUP_FAILED.value)
        return PromoEvaluation(PromoStatus.LOOKUP_FAILED, "Promo lookup failed.")

    evaluation = check_promo(promo, base_amount, now)
    record_promo_evaluation(evaluation.status.value)
    if evaluation.applied:
        logger.info("promo_applied", code=code, base=base_amount, discount=evaluation.discount)
    else:
        logger.info("promo_rejected", code=code, base=base_amount, status=evaluation.status.value)
    return evaluation


async def redeem_promo(db: AsyncSession, promo_id: int) -> bool:
    """
    Count one use of a promo. Returns False if the cap was reached in the
    meantime (another booking took the last redemption).
    """
    result = await db.execute(
        update(PromoCode)
        .where(
            PromoCode.id == promo_id,
            or_(
                PromoCode.max_redemptions.is_(None),
                PromoCode.redeemed_count < PromoCode.max_redemptions,
            ),
        )
        .values(redeemed_count=PromoCode.redeemed_count + 1)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1

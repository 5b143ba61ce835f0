"""
Pricing engine: base amount from plan, rate and duration.

Every function here is pure. Callers pass the court (anything exposing
hourly_rate, daily_rate and weekly_rate) and the already-normalized
schedule.
"""

import math
from dataclasses import dataclass
from datetime import date, time
from typing import Optional, Protocol

from court_rental.models.enums import Plan
from court_rental.utils.money import format_naira

MIN_HOURS = 1
MAX_HOURS = 12
DEFAULT_HOURS = 2


class RateCard(Protocol):
    hourly_rate: int
    daily_rate: int
    weekly_rate: int


@dataclass(frozen=True)
class Pricing:
    base: int
    discount: int
    total: int


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_hours(hours: int) -> int:
    return clamp(hours, MIN_HOURS, MAX_HOURS)


def days_between_inclusive(start: date, end: date) -> int:
    """Inclusive day count; same day is 1 and reversed ranges floor to 1."""
    return max(1, (end - start).days + 1)


def weeks_for_days(days: int) -> int:
    return max(1, math.ceil(days / 7))


def compute_base_amount(
    court: Optional[RateCard],
    plan: Plan,
    start_date: date,
    end_date: date,
    hours: int = DEFAULT_HOURS,
) -> int:
    if court is None:
        return 0
    if plan == Plan.HOURLY:
        return court.hourly_rate * clamp_hours(hours)
    days = days_between_inclusive(start_date, end_date)
    if plan == Plan.DAILY:
        return court.daily_rate * days
    return court.weekly_rate * weeks_for_days(days)


def apply_discount(base: int, discount: int) -> Pricing:
    return Pricing(base=base, discount=discount, total=max(0, base - discount))


def date_label(plan: Plan, start_date: date, end_date: date, start_time: Optional[time]) -> str:
    if plan == Plan.HOURLY:
        if start_time is None:
            return start_date.isoformat()
        return f"{start_date.isoformat()} at {start_time.strftime('%H:%M')}"
    return f"{start_date.isoformat()} to {end_date.isoformat()}"


def booking_summary(
    court_name: str,
    plan: Plan,
    start_date: date,
    end_date: date,
    start_time: Optional[time],
    total: int,
) -> str:
    label = date_label(plan, start_date, end_date, start_time)
    return f"{court_name} | {plan.value} | {label} | Total {format_naira(total)}"

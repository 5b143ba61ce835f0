"""
Tests for the pricing engine and money formatting.
"""

from dataclasses import dataclass
from datetime import date, time

import pytest

from court_rental.models.enums import Plan
from court_rental.services.pricing import (
    apply_discount,
    booking_summary,
    clamp_hours,
    compute_base_amount,
    days_between_inclusive,
    weeks_for_days,
)
from court_rental.utils.money import format_naira, round_naira


@dataclass
class Rates:
    hourly_rate: int = 30000
    daily_rate: int = 140000
    weekly_rate: int = 850000


@pytest.mark.parametrize("hours,expected", [(0, 1), (-3, 1), (1, 1), (12, 12), (13, 12)])
def test_clamp_hours(hours, expected):
    assert clamp_hours(hours) == expected


def test_days_between_inclusive():
    assert days_between_inclusive(date(2025, 1, 10), date(2025, 1, 10)) == 1
    assert days_between_inclusive(date(2025, 1, 10), date(2025, 1, 12)) == 3
    # Reversed range floors to a single day
    assert days_between_inclusive(date(2025, 1, 12), date(2025, 1, 10)) == 1


@pytest.mark.parametrize("days,weeks", [(1, 1), (7, 1), (8, 2), (14, 2), (15, 3)])
def test_weeks_round_up(days, weeks):
    assert weeks_for_days(days) == weeks


def test_hourly_base_amount():
    base = compute_base_amount(Rates(), Plan.HOURLY, date(2025, 1, 2), date(2025, 1, 2), hours=2)
    assert base == 60000


def test_hourly_hours_are_clamped():
    start = date(2025, 1, 2)
    assert compute_base_amount(Rates(), Plan.HOURLY, start, start, hours=20) == 30000 * 12
    assert compute_base_amount(Rates(), Plan.HOURLY, start, start, hours=0) == 30000


def test_daily_base_amount():
    base = compute_base_amount(Rates(), Plan.DAILY, date(2025, 1, 1), date(2025, 1, 3))
    assert base == 420000


def test_weekly_base_amount():
    rates = Rates()
    assert compute_base_amount(rates, Plan.WEEKLY, date(2025, 1, 1), date(2025, 1, 7)) == 850000
    assert compute_base_amount(rates, Plan.WEEKLY, date(2025, 1, 1), date(2025, 1, 10)) == 1700000


def test_no_court_prices_at_zero():
    assert compute_base_amount(None, Plan.DAILY, date(2025, 1, 1), date(2025, 1, 5)) == 0


def test_apply_discount_never_negative():
    pricing = apply_discount(10000, 15000)
    assert pricing.total == 0
    assert apply_discount(60000, 6000).total == 54000


def test_booking_summary_labels():
    hourly = booking_summary(
        "Indoor Arena", Plan.HOURLY, date(2025, 1, 2), date(2025, 1, 2), time(10, 0), 60000
    )
    assert hourly == "Indoor Arena | Hourly | 2025-01-02 at 10:00 | Total NGN 60,000"

    daily = booking_summary(
        "Lounge", Plan.DAILY, date(2025, 1, 10), date(2025, 1, 12), None, 270000
    )
    assert daily == "Lounge | Daily | 2025-01-10 to 2025-01-12 | Total NGN 270,000"


def test_round_naira_half_up():
    assert round_naira(2.5) == 3
    assert round_naira(2.4) == 2
    assert round_naira(1234.5) == 1235


def test_format_naira():
    assert format_naira(60000) == "NGN 60,000"
    assert format_naira(0) == "NGN 0"
    assert format_naira(1234567) == "NGN 1,234,567"

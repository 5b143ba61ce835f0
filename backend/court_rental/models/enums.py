"""
Enumerations shared by models, schemas and services.
"""

from enum import Enum


class Plan(str, Enum):
    HOURLY = "Hourly"
    DAILY = "Daily"
    WEEKLY = "Weekly"


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class PromoType(str, Enum):
    PERCENT = "percent"
    FIXED = "fixed"

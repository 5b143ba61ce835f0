"""
Admin notification for new bookings: email formatting and dispatch.
"""

from typing import Optional, Union

from court_rental.core.context import AppContext
from court_rental.core.logging import get_logger
from court_rental.core.metrics import record_notification
from court_rental.schemas.booking import BookingResponse
from court_rental.schemas.notification import BookingRecord
from court_rental.services.interfaces.mail_relay import (
    MailConfigurationError,
    MailDeliveryError,
    MailMessage,
    MailRelay,
)
from court_rental.services.relay_factory import get_mail_relay
from court_rental.utils.money import format_naira

logger = get_logger(__name__)


def format_amount(value: Union[int, float, str, None]) -> str:
    if value is None:
        return "N/A"
    if isinstance(value, (int, float)):
        return format_naira(value)
    return value


def _short_time(value: str) -> str:
    # "10:00:00" as serialized from a TIME column
    if len(value) == 8 and value[2] == ":" and value[5] == ":":
        return value[:5]
    return value


def record_date_label(record: BookingRecord) -> str:
    start = record.start_date or ""
    if record.plan == "Hourly":
        return f"{start} at {_short_time(record.start_time)}" if record.start_time else start
    return f"{start} to {record.end_date}" if record.end_date else start


def compose_booking_email(record: BookingRecord) -> MailMessage:
    lines = [
        f"Court: {record.court_id or 'N/A'}",
        f"Plan: {record.plan or 'N/A'}",
        f"Date: {record_date_label(record) or 'N/A'}",
        f"Total: {format_amount(record.total_amount)}",
        f"Customer: {record.customer_name or 'N/A'}",
        f"Email: {record.customer_email or 'N/A'}",
        f"Phone: {record.customer_phone or 'N/A'}",
        f"Event: {record.event_type or 'N/A'}",
    ]
    if record.notes:
        lines.append(f"Notes: {record.notes}")

    return MailMessage(
        subject=f"New booking: {record.customer_name or 'New customer'}",
        text="\n".join(lines),
        fields=record.model_dump(),
    )


async def relay_booking(relay: MailRelay, record: BookingRecord) -> None:
    """
    Send the notification for one booking record.

    Raises MailConfigurationError before composing anything if the relay
    lacks credentials, and MailDeliveryError if the provider refuses.
    """
    relay.ensure_configured()
    message = compose_booking_email(record)
    try:
        await relay.send(message)
    except MailDeliveryError:
        record_notification(relay.provider, "failed")
        raise
    record_notification(relay.provider, "sent")
    logger.info("notification_sent", provider=relay.provider, customer=record.customer_name)


async def announce_booking(ctx: AppContext, booking: BookingResponse, provider: Optional[str] = None) -> None:
    """
    Post-insert hook: push the booking to live admin streams and email the
    admin. Runs as a background task after the customer's response is sent,
    so failures are logged rather than raised.
    """
    ctx.booking_feed.publish(booking)

    relay = get_mail_relay(ctx.settings, ctx.http, provider or "")
    record = BookingRecord.model_validate(booking.model_dump(mode="json"))
    try:
        await relay_booking(relay, record)
    except MailConfigurationError as e:
        record_notification(relay.provider, "skipped")
        logger.warning("notification_skipped", booking_id=booking.id, reason=str(e))
    except MailDeliveryError as e:
        logger.error(
            "notification_failed",
            booking_id=booking.id,
            provider=relay.provider,
            status_code=e.status_code,
            error=e.body[:500],
        )

"""
Admin notification handlers.

Two interchangeable endpoints relay a booking record to the admin by email,
one per mail provider. They are called by the database insert webhook (or
any other producer) with {"record": {...booking row...}}.

Responses: 200 "ok"; 405 for non-POST; 500 with a fixed message when the
provider is not configured; 500 with the provider's body when it refuses.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse

from court_rental.core.context import AppContext, get_context
from court_rental.schemas.notification import NotificationRequest
from court_rental.services.interfaces.mail_relay import (
    MailConfigurationError,
    MailDeliveryError,
)
from court_rental.services.mail_service import EmailJSRelay, ResendRelay
from court_rental.services.notification_service import relay_booking
from court_rental.services.relay_factory import get_mail_relay
from court_rental.core.logging import get_logger

logger = get_logger(__name__)
router = APIRouter(prefix="/functions", tags=["Notifications"])


async def _relay(provider: str, payload: NotificationRequest, ctx: AppContext) -> PlainTextResponse:
    relay = get_mail_relay(ctx.settings, ctx.http, provider)
    try:
        await relay_booking(relay, payload.record)
    except MailConfigurationError as e:
        logger.error("notification_not_configured", provider=provider, error=str(e))
        return PlainTextResponse(str(e), status_code=500)
    except MailDeliveryError as e:
        return PlainTextResponse(e.body, status_code=500)
    return PlainTextResponse("ok", status_code=200)


@router.post("/notify-admin", response_class=PlainTextResponse)
async def notify_admin_resend(payload: NotificationRequest, ctx: AppContext = Depends(get_context)):
    return await _relay(ResendRelay.provider, payload, ctx)


@router.post("/notify-admin-emailjs", response_class=PlainTextResponse)
async def notify_admin_emailjs(payload: NotificationRequest, ctx: AppContext = Depends(get_context)):
    return await _relay(EmailJSRelay.provider, payload, ctx)

"""
Mail relays for admin notifications.

Both relays post JSON to the provider over the shared httpx client and
treat any non-2xx answer as a delivery failure carrying the provider's
response body. Neither retries.
"""

import httpx

from court_rental.core.config import Settings
from court_rental.core.logging import get_logger
from court_rental.services.interfaces.mail_relay import (
    MailConfigurationError,
    MailDeliveryError,
    MailMessage,
    MailRelay,
)

logger = get_logger(__name__)


async def _post_json(http: httpx.AsyncClient, provider: str, url: str, payload: dict, headers: dict) -> None:
    try:
        response = await http.post(url, json=payload, headers=headers)
    except httpx.HTTPError as e:
        logger.error("mail_transport_error", provider=provider, error=str(e))
        raise MailDeliveryError(f"{provider} request failed: {e}") from e

    if not response.is_success:
        logger.error(
            "mail_rejected",
            provider=provider,
            status_code=response.status_code,
            body=response.text[:500],
        )
        raise MailDeliveryError(response.text, status_code=response.status_code)


class ResendRelay(MailRelay):
    """Sends plain-text mail through Resend with a bearer API key."""

    provider = "resend"

    def __init__(self, settings: Settings, http: httpx.AsyncClient):
        self.settings = settings
        self.http = http

    def ensure_configured(self) -> None:
        if not self.settings.RESEND_API_KEY or not self.settings.ADMIN_EMAIL:
            raise MailConfigurationError("Missing RESEND_API_KEY or ADMIN_EMAIL")

    async def send(self, message: MailMessage) -> None:
        self.ensure_configured()
        await _post_json(
            self.http,
            self.provider,
            self.settings.RESEND_ENDPOINT,
            {
                "from": self.settings.FROM_EMAIL,
                "to": self.settings.ADMIN_EMAIL,
                "subject": message.subject,
                "text": message.text,
            },
            {"Authorization": f"Bearer {self.settings.RESEND_API_KEY}"},
        )


class EmailJSRelay(MailRelay):
    """
    Sends through an EmailJS template. The template receives the subject,
    the rendered text and every booking field as template params.
    """

    provider = "emailjs"

    def __init__(self, settings: Settings, http: httpx.AsyncClient):
        self.settings = settings
        self.http = http

    def ensure_configured(self) -> None:
        s = self.settings
        if not (s.EMAILJS_SERVICE_ID and s.EMAILJS_TEMPLATE_ID and s.EMAILJS_PUBLIC_KEY):
            raise MailConfigurationError(
                "Missing EMAILJS_SERVICE_ID, EMAILJS_TEMPLATE_ID or EMAILJS_PUBLIC_KEY"
            )

    async def send(self, message: MailMessage) -> None:
        self.ensure_configured()
        s = self.settings
        template_params = {
            **{k: ("" if v is None else v) for k, v in message.fields.items()},
            "subject": message.subject,
            "message": message.text,
            "to_email": s.ADMIN_EMAIL,
            "from_name": s.FROM_EMAIL,
        }
        payload = {
            "service_id": s.EMAILJS_SERVICE_ID,
            "template_id": s.EMAILJS_TEMPLATE_ID,
            "user_id": s.EMAILJS_PUBLIC_KEY,
            "template_params": template_params,
        }
        if s.EMAILJS_PRIVATE_KEY:
            payload["accessToken"] = s.EMAILJS_PRIVATE_KEY
        await _post_json(self.http, self.provider, s.EMAILJS_ENDPOINT, payload, {})

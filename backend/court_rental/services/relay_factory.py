"""
Mail relay factory.
Configures which provider delivers admin notifications.
"""

import httpx

from court_rental.core.config import Settings
from court_rental.services.interfaces.mail_relay import MailRelay
from court_rental.services.mail_service import EmailJSRelay, ResendRelay

RELAYS = {
    ResendRelay.provider: ResendRelay,
    EmailJSRelay.provider: EmailJSRelay,
}


def get_mail_relay(settings: Settings, http: httpx.AsyncClient, provider: str = "") -> MailRelay:
    """
    Build the relay for `provider`, falling back to MAIL_PROVIDER.

    The HTTP handlers pin their provider explicitly; the in-process
    notification after a booking insert uses the configured one.
    Unknown names fall back to Resend.
    """
    name = (provider or settings.MAIL_PROVIDER).lower()
    relay_cls = RELAYS.get(name, ResendRelay)
    return relay_cls(settings, http)

"""
Mail relay interface for admin booking notifications.
Allows swapping the third-party mail provider without touching the handlers.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


class MailConfigurationError(Exception):
    """Required provider credentials are missing from the environment."""


class MailDeliveryError(Exception):
    """The provider refused the message or could not be reached."""

    def __init__(self, body: str, status_code: int = 0):
        super().__init__(body)
        self.body = body
        self.status_code = status_code


@dataclass(frozen=True)
class MailMessage:
    subject: str
    text: str
    # Raw booking fields, for providers that render their own templates
    fields: dict = field(default_factory=dict)


class MailRelay(ABC):
    """
    Interface for notification mail providers.

    Implementations:
    - ResendRelay: Resend REST API, single API key
    - EmailJSRelay: EmailJS REST API, service/template/public/private keys
    """

    provider: str = ""

    @abstractmethod
    def ensure_configured(self) -> None:
        """
        Raise MailConfigurationError if any required credential is missing.
        Called before every send so configuration errors surface per request.
        """

    @abstractmethod
    async def send(self, message: MailMessage) -> None:
        """
        Deliver one message to the admin address.

        Raises:
            MailDeliveryError: provider returned a non-2xx status or the
                request failed in transport
        """

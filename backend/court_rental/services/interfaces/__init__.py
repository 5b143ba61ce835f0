"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .mail_relay import MailRelay, MailMessage, MailConfigurationError, MailDeliveryError

__all__ = ['MailRelay', 'MailMessage', 'MailConfigurationError', 'MailDeliveryError']

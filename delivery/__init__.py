"""
Email Delivery Module

Submits transactional emails to the delivery API.

Key Components:
- SubscriberEmail validated address value
- EmailClient for the Postmark-compatible HTTP API
- build_email_client() wiring from Settings
"""
from typing import Optional

from core.config import Settings, get_settings
from core.exceptions import ConfigurationError

from .domain import SubscriberEmail
from .email_client import EmailClient, SendEmailRequest


def build_email_client(settings: Optional[Settings] = None) -> EmailClient:
    """Construct an EmailClient from application settings"""
    settings = settings or get_settings()

    if not settings.email_authorization_token:
        raise ConfigurationError(
            "Email authorization token is not configured",
            setting="email_authorization_token",
        )

    return EmailClient(
        base_url=settings.email_base_url,
        sender=settings.sender(),
        authorization_token=settings.email_authorization_token,
        timeout=settings.timeout(),
    )


__all__ = ["SubscriberEmail", "EmailClient", "SendEmailRequest", "build_email_client"]

"""Core utilities and configuration for Mailgate"""
from core.config import get_settings
from core.exceptions import ConfigurationError, EmailDeliveryError, MailgateError, ValidationError
from core.logging import get_logger

__all__ = [
    "get_settings",
    "get_logger",
    "MailgateError",
    "ValidationError",
    "ConfigurationError",
    "EmailDeliveryError",
]

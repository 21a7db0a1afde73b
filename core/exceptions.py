"""
Custom exceptions for Mailgate
Provides structured error handling across all domains
"""
from typing import Any, Dict, Optional


class MailgateError(Exception):
    """Base exception for all Mailgate errors"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for CLI and log output"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(MailgateError):
    """Raised when input validation fails"""

    def __init__(self, message: str, field: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field, **details} if field else details,
        )


class ConfigurationError(MailgateError):
    """Raised when configuration is invalid or missing"""

    def __init__(self, message: str, setting: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details={"setting": setting} if setting else {},
        )


class EmailDeliveryError(MailgateError):
    """
    Raised when an email could not be handed over to the delivery API.

    Unencodable payloads, connection failures, timeouts and non-2xx responses
    all surface as this single error. ``reason`` and ``status_code`` keep the
    finer detail for callers that want it; the underlying exception is chained as ``__cause__``.
    """

    REQUEST = "request"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"
    STATUS = "status"

    def __init__(
        self,
        message: str,
        email: Optional[str] = None,
        reason: Optional[str] = None,
        status_code: Optional[int] = None,
        **details,
    ):
        super().__init__(
            message=message,
            error_code="EMAIL_DELIVERY_ERROR",
            details={"email": email, "reason": reason, "api_status_code": status_code, **details},
        )
        self.email = email
        self.reason = reason
        self.status_code = status_code

"""
Email delivery API client

Submits transactional emails to a Postmark-compatible HTTP API.

- One POST to {base_url}/email per send, no retries
- The whole round trip is bounded by the timeout given at construction
- Unencodable payloads, timeouts, transport errors and non-2xx responses all
  raise EmailDeliveryError
- The server token only ever leaves its SecretStr when the request header is built
"""
import asyncio
from datetime import timedelta
from typing import Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr

from core.exceptions import EmailDeliveryError
from core.logging import get_logger

from .domain import SubscriberEmail

TOKEN_HEADER = "X-Postmark-Server-Token"
EMAIL_PATH = "/email"


class SendEmailRequest(BaseModel):
    """Wire payload for a single email"""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    from_: str = Field(alias="From")
    to: str = Field(alias="To")
    subject: str = Field(alias="Subject")
    html_body: str = Field(alias="HtmlBody")
    text_body: str = Field(alias="TextBody")

    def to_json(self) -> bytes:
        return self.model_dump_json(by_alias=True).encode("utf-8")


class EmailClient:
    """
    Client for the email delivery API

    Build one per process and share it; it keeps no per-call state, so any
    number of coroutines may call send_email concurrently.
    """

    def __init__(
        self,
        base_url: str,
        sender: SubscriberEmail,
        authorization_token: Union[SecretStr, str],
        timeout: timedelta,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not base_url:
            raise ValueError("base_url cannot be empty")
        if timeout.total_seconds() <= 0:
            raise ValueError("timeout must be positive")
        if not isinstance(authorization_token, SecretStr):
            authorization_token = SecretStr(authorization_token)

        self.base_url = base_url.rstrip("/")
        self.sender = sender
        self.timeout = timeout
        self._authorization_token = authorization_token
        self.logger = get_logger(__name__, domain="delivery")

        # HTTP client with every phase capped by the same timeout
        self.http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout.total_seconds()),
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        """Release pooled connections"""
        await self.http_client.aclose()

    def __repr__(self) -> str:
        return (
            f"EmailClient(base_url={self.base_url!r}, sender={self.sender.as_str()!r}, "
            f"authorization_token={self._authorization_token!r}, timeout={self.timeout!r})"
        )

    __str__ = __repr__

    async def send_email(
        self,
        recipient: SubscriberEmail,
        subject: str,
        html_content: str,
        text_content: str,
    ) -> None:
        """
        Submit one email to the delivery API

        Args:
            recipient: Validated destination address
            subject: Subject line
            html_content: HTML body
            text_content: Plain text body

        Raises:
            EmailDeliveryError: On an unencodable payload, timeout, transport failure
                or a non-2xx response
        """
        url = f"{self.base_url}{EMAIL_PATH}"
        request_body = SendEmailRequest(
            from_=self.sender.as_str(),
            to=recipient.as_str(),
            subject=subject,
            html_body=html_content,
            text_body=text_content,
        )
        log = self.logger.with_context(recipient=recipient.as_str())

        try:
            content = request_body.to_json()
        except ValueError as e:
            log.warning(f"Email request could not be encoded: {e.__class__.__name__}")
            raise EmailDeliveryError(
                f"Could not encode email to {recipient} as JSON",
                email=recipient.as_str(),
                reason=EmailDeliveryError.REQUEST,
            ) from e

        log.debug(f"Sending email via {url}")

        try:
            response = await asyncio.wait_for(
                self._post(url, content),
                timeout=self.timeout.total_seconds(),
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            log.warning(f"Email request timed out after {self.timeout.total_seconds():.3f}s")
            raise EmailDeliveryError(
                f"Timed out sending email to {recipient}",
                email=recipient.as_str(),
                reason=EmailDeliveryError.TIMEOUT,
            ) from e
        except httpx.HTTPError as e:
            log.warning(f"Email request failed: {e.__class__.__name__}")
            raise EmailDeliveryError(
                f"Failed to reach email API for {recipient}: {e.__class__.__name__}",
                email=recipient.as_str(),
                reason=EmailDeliveryError.TRANSPORT,
            ) from e

        if not response.is_success:
            log.warning(f"Email API rejected request with HTTP {response.status_code}")
            raise EmailDeliveryError(
                f"Email API returned HTTP {response.status_code} for {recipient}",
                email=recipient.as_str(),
                reason=EmailDeliveryError.STATUS,
                status_code=response.status_code,
            )

        log.debug("Email accepted by API")

    async def _post(self, url: str, content: bytes) -> httpx.Response:
        return await self.http_client.post(
            url,
            content=content,
            headers={
                "Content-Type": "application/json",
                TOKEN_HEADER: self._authorization_token.get_secret_value(),
            },
        )

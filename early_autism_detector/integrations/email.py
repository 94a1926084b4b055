"""
Transactional email through the SendGrid v3 API.
"""

from __future__ import annotations

from typing import Optional

import httpx

from early_autism_detector.core.logging_config import get_logger

logger = get_logger(__name__)

VERIFICATION_SUBJECT = "Verify your Early Autism Detector account"


class EmailDeliveryError(Exception):
    """Raised when an email cannot be handed to the delivery service."""


def verification_email_html(verification_url: str) -> str:
    return f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>Welcome to Early Autism Detector</h2>
  <p>Please verify your email address by clicking the link below:</p>
  <p><a href="{verification_url}">Verify Email Address</a></p>
  <p>If you didn't create an account, you can safely ignore this email.</p>
</div>
""".strip()


class SendGridClient:
    """Minimal SendGrid mail sender."""

    def __init__(
        self,
        api_key: Optional[str],
        from_email: str,
        base_url: str = "https://api.sendgrid.com/v3",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ) -> None:
        self.api_key = api_key
        self.from_email = from_email
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._timeout = timeout

    async def send(self, to: str, subject: str, html: str) -> None:
        """
        Send one HTML email.

        Raises:
            EmailDeliveryError: If not configured or SendGrid rejects the message
        """
        if not self.api_key:
            raise EmailDeliveryError("Email delivery is not configured")

        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.from_email},
            "subject": subject,
            "content": [{"type": "text/html", "value": html}],
        }
        try:
            async with httpx.AsyncClient(transport=self._transport, timeout=self._timeout) as client:
                response = await client.post(
                    f"{self.base_url}/mail/send",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                )
                response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error(f"Email delivery to {to} failed: {e}")
            raise EmailDeliveryError(str(e)) from e
        logger.info(f"Email '{subject}' sent to {to}")

    async def send_verification(self, to: str, verification_url: str) -> None:
        await self.send(to, VERIFICATION_SUBJECT, verification_email_html(verification_url))

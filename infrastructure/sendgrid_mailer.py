"""
SendGrid Mailer

Implements IMailer over the SendGrid v3 mail/send endpoint with httpx.
"""

import logging
from typing import Optional

import httpx

from domain.errors import MailDeliveryError
from domain.notification import IMailer, MailAddress

logger = logging.getLogger(__name__)


class SendGridMailer(IMailer):
    """SendGrid email delivery."""

    BASE_URL = "https://api.sendgrid.com/v3"

    def __init__(
        self,
        api_key: str,
        http_client: Optional[httpx.Client] = None,
        timeout: float = 10.0,
    ):
        """
        Initialize SendGridMailer.

        Args:
            api_key: SendGrid API key
            http_client: Preconfigured client, created if None
            timeout: Request timeout in seconds for the default client
        """
        self.api_key = api_key
        self._http_client = http_client or httpx.Client(timeout=timeout)

    def send(
        self,
        sender: MailAddress,
        recipient: MailAddress,
        subject: str,
        plain_body: str,
        html_body: str,
    ) -> None:
        if not self.api_key:
            raise MailDeliveryError("SendGrid API key not configured")

        payload = {
            "personalizations": [{"to": [recipient.to_dict()]}],
            "from": sender.to_dict(),
            "subject": subject,
            "content": [
                {"type": "text/plain", "value": plain_body},
                {"type": "text/html", "value": html_body},
            ],
        }

        try:
            resp = self._http_client.post(
                f"{self.BASE_URL}/mail/send",
                json=payload,
                headers={"Authorization": f"Bearer {self.api_key}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"SendGrid request failed: {str(e)}")
            raise MailDeliveryError("SendGrid request failed", e)

        if resp.status_code not in (200, 202):
            logger.error(f"SendGrid send failed: {resp.status_code} - {resp.text}")
            raise MailDeliveryError(
                f"SendGrid rejected message: {resp.status_code} - {resp.text}"
            )

        logger.info(f"Mail '{subject}' accepted by SendGrid for {recipient.address}")

    def close(self) -> None:
        self._http_client.close()

"""
Console Mailer

IMailer for development: writes messages to the log instead of sending them.
"""

import logging

from domain.notification import IMailer, MailAddress

logger = logging.getLogger(__name__)


class ConsoleMailer(IMailer):
    """Logs outgoing mail at INFO level."""

    def send(
        self,
        sender: MailAddress,
        recipient: MailAddress,
        subject: str,
        plain_body: str,
        html_body: str,
    ) -> None:
        logger.info(
            f"Mail from {sender} to {recipient}\n"
            f"Subject: {subject}\n\n"
            f"{plain_body}"
        )

"""
Unit tests for the SendGrid and console mailers.
"""

import json
import logging

import httpx
import pytest

from domain.errors import MailDeliveryError
from domain.notification import MailAddress
from infrastructure.console_mailer import ConsoleMailer
from infrastructure.sendgrid_mailer import SendGridMailer

SENDER = MailAddress("admin@drophere.link", "Drophere Bot")
RECIPIENT = MailAddress("user@example.com", "Test User")


def make_mailer(status_code=202, api_key="sg-key", requests=None):
    def handler(request):
        if requests is not None:
            requests.append(request)
        return httpx.Response(status_code, text="" if status_code == 202 else "rejected")

    client = httpx.Client(transport=httpx.MockTransport(handler))
    return SendGridMailer(api_key, http_client=client)


class TestSendGridMailer:
    """Test SendGrid delivery."""

    def test_send_posts_both_bodies(self):
        requests = []
        mailer = make_mailer(requests=requests)

        mailer.send(SENDER, RECIPIENT, "Recover Password", "plain", "<p>html</p>")

        request = requests[0]
        assert str(request.url) == "https://api.sendgrid.com/v3/mail/send"
        assert request.headers["Authorization"] == "Bearer sg-key"
        assert json.loads(request.content) == {
            "personalizations": [{"to": [{"email": "user@example.com", "name": "Test User"}]}],
            "from": {"email": "admin@drophere.link", "name": "Drophere Bot"},
            "subject": "Recover Password",
            "content": [
                {"type": "text/plain", "value": "plain"},
                {"type": "text/html", "value": "<p>html</p>"},
            ],
        }

    def test_send_without_api_key(self):
        requests = []
        mailer = make_mailer(api_key="", requests=requests)

        with pytest.raises(MailDeliveryError):
            mailer.send(SENDER, RECIPIENT, "s", "p", "h")

        assert requests == []

    def test_send_rejected(self):
        mailer = make_mailer(status_code=401)

        with pytest.raises(MailDeliveryError) as exc_info:
            mailer.send(SENDER, RECIPIENT, "s", "p", "h")

        assert "401" in str(exc_info.value)

    def test_send_network_failure(self):
        def fail(request):
            raise httpx.ConnectError("unreachable", request=request)

        mailer = SendGridMailer("sg-key", http_client=httpx.Client(transport=httpx.MockTransport(fail)))

        with pytest.raises(MailDeliveryError):
            mailer.send(SENDER, RECIPIENT, "s", "p", "h")


class TestConsoleMailer:
    """Test the development mailer."""

    def test_send_logs_message(self, caplog):
        with caplog.at_level(logging.INFO, logger="infrastructure.console_mailer"):
            ConsoleMailer().send(SENDER, RECIPIENT, "Recover Password", "body text", "<p/>")

        assert "Drophere Bot <admin@drophere.link>" in caplog.text
        assert "Subject: Recover Password" in caplog.text
        assert "body text" in caplog.text


def test_mail_address_without_name():
    address = MailAddress("user@example.com")

    assert str(address) == "user@example.com"
    assert address.to_dict() == {"email": "user@example.com"}

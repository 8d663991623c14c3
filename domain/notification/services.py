"""
Notification Services

Capability interfaces for mail delivery and message templating.
Infrastructure provides the implementations (SendGrid, console, Jinja2).
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from .value_objects import MailAddress


class IMailer(ABC):
    """Delivers a single email message."""

    @abstractmethod
    def send(
        self,
        sender: MailAddress,
        recipient: MailAddress,
        subject: str,
        plain_body: str,
        html_body: str,
    ) -> None:
        """
        Send a message with plain-text and HTML alternatives.

        Raises:
            MailDeliveryError: If the transport rejects the message
        """
        pass  # pragma: no cover


class ITemplateRenderer(ABC):
    """Renders named message templates."""

    @abstractmethod
    def render(self, name: str, values: Dict[str, Any]) -> str:
        """
        Render a template with the given values.

        Args:
            name: Template name, including its extension
            values: Template variables

        Raises:
            TemplateNotFoundError: If no template has that name
        """
        pass  # pragma: no cover

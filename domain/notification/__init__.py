"""
Notification Domain

Outgoing mail and the templates it is rendered from.
"""

from .services import IMailer, ITemplateRenderer
from .value_objects import MailAddress

__all__ = [
    "IMailer",
    "ITemplateRenderer",
    "MailAddress",
]

"""
Notification Value Objects

Immutable value objects for outgoing mail.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class MailAddress:
    """An email address with an optional display name."""

    address: str
    name: str = ""

    def __str__(self) -> str:
        if self.name:
            return f"{self.name} <{self.address}>"
        return self.address

    def to_dict(self) -> dict:
        data = {"email": self.address}
        if self.name:
            data["name"] = self.name
        return data

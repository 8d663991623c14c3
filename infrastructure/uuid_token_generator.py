"""
UUID Token Generator

Implements ITokenGenerator with random UUIDs.
"""

import uuid

from domain.user_management import ITokenGenerator


class UUIDTokenGenerator(ITokenGenerator):
    """Generates 32-character hex tokens from uuid4."""

    def generate(self) -> str:
        return uuid.uuid4().hex

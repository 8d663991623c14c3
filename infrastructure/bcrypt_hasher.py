"""
Bcrypt Password Hasher

Implements IPasswordHasher with bcrypt.
"""

import bcrypt

from domain.errors import PasswordHashingError
from domain.user_management import IPasswordHasher

# bcrypt only looks at the first 72 bytes of a secret
MAX_SECRET_BYTES = 72


class BcryptPasswordHasher(IPasswordHasher):
    """bcrypt-backed password hasher."""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, plaintext: str) -> str:
        try:
            secret = plaintext.encode("utf-8")
        except UnicodeEncodeError as e:
            raise PasswordHashingError("Password is not valid UTF-8 text", e)
        if len(secret) > MAX_SECRET_BYTES:
            raise PasswordHashingError(
                f"Password longer than {MAX_SECRET_BYTES} bytes cannot be hashed"
            )
        return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=self.rounds)).decode("utf-8")

    def verify(self, hashed: str, plaintext: str) -> bool:
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(plaintext.encode("utf-8"), hashed.encode("utf-8"))
        except ValueError:
            # malformed hash, over-long secret or unencodable text
            return False

"""Password hashing for message secrets.

Learn: bcrypt salts every hash and embeds the cost factor, so the same
plaintext hashes to different bytes each time while checkpw can still
verify it. Comparison happens inside bcrypt, never on plaintext.
"""

import bcrypt

from sealnote.config import settings


def hash_password(password: str, rounds: int | None = None) -> str:
    """Hash a password with bcrypt.

    Passwords are truncated to 72 bytes (bcrypt's limit). Errors from
    bcrypt propagate: a message must never be stored with a half-made hash.
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash.

    A malformed stored hash never matches.
    """
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


class CredentialVerifier:
    """Injectable wrapper around hash_password/verify_password."""

    def __init__(self, rounds: int | None = None):
        self.rounds = rounds

    def hash(self, plain: str) -> str:
        return hash_password(plain, rounds=self.rounds)

    def compare(self, plain: str, password_hash: str) -> bool:
        return verify_password(plain, password_hash)

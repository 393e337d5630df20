"""Gateway token verification.

Learn: the API gateway authenticates the user and forwards a signed JWT
in a configured header. We only verify it; the one place tokens are
minted here is `sealnote issue-token` for local development.

The payload must carry the user's id in a `uuid` claim.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from sealnote.config import settings


class TokenError(Exception):
    """Raised when token creation/verification fails."""


def create_token(
    user_uuid: str,
    secret: Optional[str] = None,
    expires_minutes: Optional[int] = None,
) -> str:
    """Sign a gateway-style token for `user_uuid`."""
    now = datetime.now(timezone.utc)
    payload = {
        "uuid": user_uuid,
        "iat": now,
        "exp": now + timedelta(
            minutes=expires_minutes or settings.token_expire_minutes
        ),
    }
    return jwt.encode(
        payload, secret or settings.auth_secret, algorithm=settings.jwt_algorithm
    )


def verify_token(token: str, secret: str, algorithm: str = "HS256") -> dict:
    """Verify and decode a JWT.

    Returns the payload dict on success.
    Raises TokenError on failure.
    """
    try:
        return jwt.decode(token, secret, algorithms=[algorithm])
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")

"""Session token helpers.

Sign-in happens at the identity provider in front of this API. It hands the
browser a signed session cookie carrying the staff member's id, church and
role; this module mints (for the hand-off and tests) and verifies it.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt

from app.core.config import settings

SESSION_ALGORITHM = "HS256"
SESSION_ISSUER = "church-connect"
REQUIRED_CLAIMS = ["sub", "org_id", "role", "exp", "iss"]


def create_session_token(
    user_id: UUID,
    org_id: UUID,
    role: str,
    token_version: int,
    expires_in: timedelta | None = None,
) -> str:
    """Sign a session token with the current secret."""
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "org_id": str(org_id),
        "role": role,
        "token_version": token_version,
        "iss": SESSION_ISSUER,
        "iat": issued_at,
        "exp": issued_at + (expires_in or timedelta(hours=settings.JWT_EXPIRES_HOURS)),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str) -> dict:
    """
    Verify a session token against the current and previous secrets.

    Raises:
        jwt.InvalidTokenError: expired, malformed, missing claims, or signed
            with an unknown secret
    """
    error: jwt.InvalidTokenError | None = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[SESSION_ALGORITHM],
                issuer=SESSION_ISSUER,
                options={"require": REQUIRED_CLAIMS},
            )
        except jwt.InvalidSignatureError as exc:
            error = exc
        except jwt.InvalidTokenError:
            # Anything but a signature mismatch fails the same way for every secret
            raise
    raise error or jwt.InvalidTokenError("No session secret configured")

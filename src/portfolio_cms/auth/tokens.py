# ABOUTME: Signed session tokens issued on sign-in.
# ABOUTME: HS256 JWTs with fixed issuer and audience plus an expiry claim.

import time
from typing import Any
from uuid import UUID

import jwt
from jwt import InvalidTokenError

from portfolio_cms.auth.exceptions import SessionExpiredError

ISSUER = "portfolio-cms"
AUDIENCE = "portfolio-cms-admin"
ALGORITHM = "HS256"


def encode_session(user_id: UUID, email: str, secret_key: str, ttl_seconds: int) -> str:
    """Encode a session token for a signed-in account."""
    now = int(time.time())
    body: dict[str, Any] = {
        "iss": ISSUER,
        "aud": AUDIENCE,
        "iat": now,
        "exp": now + ttl_seconds,
        "sub": str(user_id),
        "email": email,
    }
    return jwt.encode(body, secret_key, algorithm=ALGORITHM)


def decode_session(token: str, secret_key: str) -> dict[str, Any]:
    """Decode and validate a session token.

    Raises:
        SessionExpiredError: If the token is expired, malformed or has bad claims.
    """
    try:
        payload = jwt.decode(
            token,
            secret_key,
            algorithms=[ALGORITHM],
            audience=AUDIENCE,
            issuer=ISSUER,
            leeway=5,
            options={"require": ["exp", "iat", "iss", "aud", "sub"]},
        )
        UUID(payload["sub"])
    except (InvalidTokenError, ValueError) as e:
        raise SessionExpiredError(f"Invalid session: {e}") from e
    return payload

"""Token Verifier — HS256 bearer token verification with PyJWT.

Invariants:
    - A token is accepted only if its signature, `exp` and `sub` claim are all valid
    - Every rejection raises AuthError (401); the reason is logged, not returned verbatim
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from portfolio_api.core.errors import AuthError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    subject: str
    expires_at: datetime


class TokenVerifier:
    def __init__(self, secret: str, algorithm: str = "HS256", expires_in_seconds: int = 604800):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_in_seconds = expires_in_seconds

    def verify(self, token: str) -> TokenClaims:
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            raise AuthError("Token expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise AuthError("Invalid token")
        return TokenClaims(
            subject=str(payload["sub"]),
            expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
        )

    def issue(self, subject: str) -> str:
        """Sign a token for `subject` (operator tooling and tests)."""
        now = datetime.now(timezone.utc)
        payload = {
            "sub": subject,
            "iat": now,
            "exp": now + timedelta(seconds=self.expires_in_seconds),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

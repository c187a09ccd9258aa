"""
# Token Service

Issues and verifies the signed, time-limited bearer tokens used by every protected
route.

**Token Structure:** an HS256 JWT whose payload is

```json
{"id": "<user _id>", "email": "ada@blogmail.com", "iat": 1700000000, "exp": 1700007200}
```

`exp` is `iat` plus `ACCESS_TOKEN_EXPIRE_MINUTES` (two hours by default).

**Expiry:** the signature is verified by `python-jose`; expiry is checked here against
the service clock so that a token is rejected at exactly `exp` and after it. The clock
is injectable for tests.

There is no revocation list. Logging out is a client-side discard of the token.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional

from jose import JWTError, jwt

from blog_backend.config import Settings
from blog_backend.errors import InvalidToken
from blog_backend.managers.logging_manager import get_logger
from blog_backend.models.auth_models import TokenData

logger = get_logger(prefix="[TokenService]")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """Sign and verify identity tokens with the process-wide secret."""

    def __init__(self, settings: Settings, clock: Optional[Clock] = None):
        self._secret = settings.SECRET_KEY.get_secret_value()
        self._algorithm = settings.ALGORITHM
        self._lifetime = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        self._clock = clock or utc_now

    @property
    def lifetime_seconds(self) -> int:
        return int(self._lifetime.total_seconds())

    def issue(self, user_id: Optional[str], email: str) -> str:
        """Create a token embedding the user's internal id and email."""
        issued_at = int(self._clock().timestamp())
        payload: Dict[str, Any] = {
            "id": user_id,
            "email": email,
            "iat": issued_at,
            "exp": issued_at + self.lifetime_seconds,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenData:
        """
        Verify signature and expiry and return the embedded identity.

        Raises:
            InvalidToken: On a bad signature, a malformed payload, or when the
                current time is at or past `exp`.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"verify_exp": False},
            )
        except JWTError as e:
            logger.debug("Token rejected: %s", e)
            raise InvalidToken() from e

        email = payload.get("email")
        expires_at = payload.get("exp")
        if not isinstance(email, str) or not email or not isinstance(expires_at, (int, float)):
            logger.debug("Token rejected: malformed payload")
            raise InvalidToken()

        if self._clock().timestamp() >= expires_at:
            logger.debug("Token rejected: expired for %s", email)
            raise InvalidToken("Token has expired")

        user_id = payload.get("id")
        return TokenData(id=str(user_id) if user_id is not None else None, email=email)

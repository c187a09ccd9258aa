"""
# Authentication Dependencies

The bearer-token gate in front of every protected endpoint.

## Behaviour

| Request | Outcome |
|---|---|
| No `Authorization` header, or not `Bearer <token>` | `Unauthenticated` -> 401 with `WWW-Authenticate: Bearer` |
| Token with a bad signature, malformed payload or past `exp` | `Forbidden` -> 403 |
| Valid token | the resolved `TokenData` (`id`, `email`) is injected |

The gate only verifies the token. It does not load the user document, so a token
stays usable for its whole lifetime (there is no revocation).

**Usage:**
```python
@router.get("/allposts")
async def all_posts(current_user: TokenData = Depends(get_current_user)):
    ...
```

## Module Attributes

Attributes:
    bearer_scheme (HTTPBearer): Header extractor that leaves the missing-token response to us
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from blog_backend.errors import Unauthenticated
from blog_backend.managers.logging_manager import get_logger
from blog_backend.models.auth_models import TokenData
from blog_backend.routes.dependencies import get_token_service
from blog_backend.services.token_service import TokenService

logger = get_logger(prefix="[Auth Dependencies]")

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenData:
    """
    Resolve the identity carried by the request's bearer token.

    Raises:
        Unauthenticated: If no bearer token was sent.
        InvalidToken: If the token fails verification (rendered as 403).
    """
    if credentials is None or not credentials.credentials:
        raise Unauthenticated()

    current_user = tokens.verify(credentials.credentials)
    logger.debug("Authenticated request for %s", current_user.email)
    return current_user

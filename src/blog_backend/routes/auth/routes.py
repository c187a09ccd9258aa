"""
# Authentication Routes

Account creation, login and logout.

## API Endpoints

- `POST /signup` - Create an account and receive a token
- `GET /login?data={"email": ..., "password": ...}` - Exchange credentials for a token
- `GET /logout` - Acknowledge a logout (bearer required)

Signup and login both answer `{"login": "successful", "token": ..., "email": ...}`.
Unknown email and wrong password share one 401 response so callers cannot tell
which accounts exist.

## Usage Examples

```python
response = await client.post("/signup", json={
    "name": "Ada Writer",
    "phone": "+1 555 0100",
    "email": "ada@blogmail.com",
    "password": "correct horse",
})
token = response.json()["token"]

response = await client.get("/login", params={
    "data": json.dumps({"email": "ada@blogmail.com", "password": "correct horse"})
})
```

Logout is stateless: the server keeps no session, and the client discards its token.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from blog_backend.errors import BlogError
from blog_backend.managers.logging_manager import get_logger
from blog_backend.models.auth_models import AuthResponse, LoginRequest, SignupRequest, TokenData
from blog_backend.models.blog_models import LogoutResponse
from blog_backend.routes.auth.dependencies import get_current_user
from blog_backend.routes.dependencies import get_credential_store, get_token_service
from blog_backend.services.credential_store import CredentialStore
from blog_backend.services.token_service import TokenService

logger = get_logger(prefix="[Auth Routes]")

router = APIRouter(tags=["Authentication"])


@router.post("/signup", response_model=AuthResponse)
async def signup(
    details: SignupRequest,
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Register a new account and log it in.

    Raises:
        HTTPException(401): If the email is already registered.
        HTTPException(500): If the account could not be stored.
    """
    try:
        user = await credentials.create(details)
        token = tokens.issue(user.id, user.email)
        return AuthResponse(token=token, email=user.email)

    except BlogError:
        raise
    except Exception as e:
        logger.error("Signup failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/login", response_model=AuthResponse)
async def login(
    data: str = Query(..., description='JSON object {"email": ..., "password": ...}'),
    credentials: CredentialStore = Depends(get_credential_store),
    tokens: TokenService = Depends(get_token_service),
):
    """
    Exchange an email and password for a bearer token.

    The credentials arrive JSON-encoded in the `data` query parameter.

    Raises:
        HTTPException(422): If `data` is not a JSON object with `email` and `password`.
        HTTPException(401): If the credentials do not match an account.
        HTTPException(500): On unexpected failures.
    """
    try:
        payload = LoginRequest.model_validate_json(data)
    except ValidationError:
        raise HTTPException(
            status_code=422,
            detail="Login data must be a JSON object with email and password",
        )

    try:
        user = await credentials.authenticate(payload.email, payload.password)
        token = tokens.issue(user.id, user.email)
        logger.info("User %s logged in", user.id)
        return AuthResponse(token=token, email=user.email)

    except BlogError:
        raise
    except Exception as e:
        logger.error("Login failed: %s", e, exc_info=True)
        raise HTTPException(status_code=500, detail="Internal Server Error")


@router.get("/logout", response_model=LogoutResponse)
async def logout(current_user: TokenData = Depends(get_current_user)):
    logger.info("Logout acknowledged for %s", current_user.email)
    return LogoutResponse()

from unittest.mock import MagicMock

from fastapi.security import HTTPAuthorizationCredentials
import pytest

from blog_backend.errors import InvalidToken, Unauthenticated
from blog_backend.models.auth_models import TokenData
from blog_backend.routes.auth.dependencies import get_current_user
from blog_backend.services.token_service import TokenService


def _bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


@pytest.mark.asyncio
async def test_missing_credentials_raise_unauthenticated():
    tokens = MagicMock(spec=TokenService)

    with pytest.raises(Unauthenticated) as exc_info:
        await get_current_user(credentials=None, tokens=tokens)

    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}
    tokens.verify.assert_not_called()


@pytest.mark.asyncio
async def test_valid_token_resolves_identity():
    tokens = MagicMock(spec=TokenService)
    tokens.verify.return_value = TokenData(id="user-1", email="ada@blogmail.com")

    user = await get_current_user(credentials=_bearer("signed.token.value"), tokens=tokens)

    tokens.verify.assert_called_once_with("signed.token.value")
    assert user.email == "ada@blogmail.com"


@pytest.mark.asyncio
async def test_rejected_token_raises_forbidden():
    tokens = MagicMock(spec=TokenService)
    tokens.verify.side_effect = InvalidToken()

    with pytest.raises(InvalidToken) as exc_info:
        await get_current_user(credentials=_bearer("bad"), tokens=tokens)

    assert exc_info.value.status_code == 403

"""
# Authentication Models

Request, response and document models for signup, login and token handling.

- **`SignupRequest`**: account creation. The email is validated and normalized by
  `EmailStr`, so addresses without a dotted domain (`dev@localhost`) are refused.
- **`LoginRequest`**: inbound credentials. The email is a plain string and is only
  looked up, so a malformed address fails like any unknown one.
- **`UserInDB`**: the `blog_users` document. `password` holds the bcrypt hash and is
  never returned to clients.
- **`AuthResponse`**: the login/signup success body, `{login, token, email}`.
- **`TokenData`**: the identity carried inside a verified bearer token.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

# bcrypt only hashes the first 72 bytes of a password
MAX_PASSWORD_BYTES = 72


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SignupRequest(BaseModel):
    """Account creation payload."""

    name: Optional[str] = Field(None, max_length=100, description="Display name", examples=["Ada Writer"])
    phone: Optional[str] = Field(None, max_length=32, description="Contact phone number", examples=["+1 555 0100"])
    email: EmailStr = Field(..., description="Unique account email", examples=["ada@blogmail.com"])
    password: str = Field(..., min_length=1, description="Plaintext password, hashed before storage")

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    # Not EmailStr: any unknown email, well-formed or not, fails as InvalidCredentials
    email: str
    password: str


class UserInDB(BaseModel):
    """
    User document stored in `blog_users`.

    `id` is the string form of the document `_id`; it is filled in after insertion
    or when loading from the database and is not persisted as a field.
    """

    id: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    email: str
    password: str = Field(..., description="bcrypt hash of the user's password")
    date: datetime = Field(default_factory=_utcnow, description="UTC time when the user was created")


class AuthResponse(BaseModel):
    """Body returned by a successful login or signup."""

    login: str = Field(default="successful", examples=["successful"])
    token: str = Field(..., description="JWT bearer token, valid for 2 hours")
    email: str


class TokenData(BaseModel):
    """Identity resolved from a verified bearer token."""

    id: Optional[str] = None
    email: str

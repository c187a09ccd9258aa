"""
Credential store: user accounts in `blog_users`.

Passwords are hashed with bcrypt (salted, cost from `BCRYPT_ROUNDS`) before they are
persisted and verified with `bcrypt.checkpw`. Hashing runs in a worker thread so it
does not block the event loop.
"""

import asyncio
from typing import Any, Dict

import bcrypt
from pymongo.errors import DuplicateKeyError

from blog_backend.config import Settings
from blog_backend.database import DatabaseManager
from blog_backend.errors import DuplicateEmail, InvalidCredentials
from blog_backend.managers.logging_manager import get_logger
from blog_backend.models.auth_models import MAX_PASSWORD_BYTES, SignupRequest, UserInDB

logger = get_logger(prefix="[CredentialStore]")


def hash_password(password: str, rounds: int) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    encoded = password.encode("utf-8")
    if len(encoded) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


class CredentialStore:
    """Create and authenticate user accounts."""

    def __init__(self, db_manager: DatabaseManager, settings: Settings):
        self._db = db_manager
        self.collection_name = settings.USERS_COLLECTION
        self._rounds = settings.BCRYPT_ROUNDS

    async def create(self, details: SignupRequest) -> UserInDB:
        """
        Persist a new account with a hashed password.

        Raises:
            DuplicateEmail: If an account with this email already exists.
        """
        users = self._db.get_collection(self.collection_name)
        email = str(details.email)

        if await users.find_one({"email": email}, {"_id": 1}) is not None:
            raise DuplicateEmail()

        hashed = await asyncio.to_thread(hash_password, details.password, self._rounds)
        user = UserInDB(name=details.name, phone=details.phone, email=email, password=hashed)

        try:
            result = await users.insert_one(user.model_dump(exclude={"id"}))
        except DuplicateKeyError as e:
            # Lost a race against a concurrent signup for the same email
            raise DuplicateEmail() from e

        user.id = str(result.inserted_id)
        logger.info("Created user %s", user.id)
        return user

    async def authenticate(self, email: str, password: str) -> UserInDB:
        """
        Return the account matching the credentials.

        Raises:
            InvalidCredentials: For an unknown email or a wrong password alike.
        """
        users = self._db.get_collection(self.collection_name)
        doc = await users.find_one({"email": email})
        if doc is None:
            raise InvalidCredentials()

        matches = await asyncio.to_thread(verify_password, password, doc.get("password") or "")
        if not matches:
            raise InvalidCredentials()

        return _to_user(doc)


def _to_user(doc: Dict[str, Any]) -> UserInDB:
    data = dict(doc)
    data["id"] = str(data.pop("_id"))
    return UserInDB(**data)

"""Shared helpers for API and service tests."""

from datetime import datetime, timedelta

TEST_SECRET = "test-signing-key-for-blog-backend"


class FrozenClock:
    """Manually advanced clock for token issuance and expiry."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


def signup(client, email="a@x.com", password="pw", **extra):
    body = {"name": "Ada Writer", "phone": "+1 555 0100", "email": email, "password": password}
    body.update(extra)
    return client.post("/signup", json=body)


def auth_headers(token: str):
    return {"Authorization": f"Bearer {token}"}

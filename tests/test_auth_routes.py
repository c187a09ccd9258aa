import json

from jose import jwt

from tests.support.helpers import TEST_SECRET, auth_headers, signup


def _login(client, email, password):
    return client.get("/login", params={"data": json.dumps({"email": email, "password": password})})


def test_signup_returns_token_for_new_email(client, database, settings):
    response = signup(client, email="a@x.com", password="pw")

    assert response.status_code == 200
    body = response.json()
    assert body["login"] == "successful"
    assert body["email"] == "a@x.com"
    claims = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"], options={"verify_exp": False})
    assert claims["email"] == "a@x.com"
    assert claims["id"] == str(database[settings.USERS_COLLECTION].docs[0]["_id"])


def test_signup_with_existing_email_fails_without_token(client):
    signup(client, email="a@x.com")

    response = signup(client, email="a@x.com", password="other")

    assert response.status_code == 401
    assert response.json() == {"success": False, "message": "Already a user with this email"}


def test_signup_validates_payload(client):
    response = client.post("/signup", json={"email": "not-an-email", "password": "pw"})

    assert response.status_code == 422
    body = response.json()
    assert body["success"] is False
    assert body["errors"]
    assert client.post("/signup", json={"email": "dev@localhost", "password": "pw"}).status_code == 422


def test_login_returns_token_matching_account(client):
    signup(client, email="a@x.com", password="pw")

    response = _login(client, "a@x.com", "pw")

    assert response.status_code == 200
    body = response.json()
    assert body["login"] == "successful"
    assert body["email"] == "a@x.com"
    claims = jwt.decode(body["token"], TEST_SECRET, algorithms=["HS256"], options={"verify_exp": False})
    assert claims["email"] == "a@x.com"


def test_wrong_password_and_unknown_email_share_response(client):
    signup(client, email="a@x.com", password="pw")

    wrong_password = _login(client, "a@x.com", "nope")
    unknown_email = _login(client, "b@x.com", "pw")
    not_an_address = _login(client, "nobody", "pw")

    assert wrong_password.status_code == unknown_email.status_code == not_an_address.status_code == 401
    assert wrong_password.json() == unknown_email.json() == not_an_address.json() == {
        "success": False,
        "message": "Invalid email or password",
    }


def test_login_rejects_malformed_data(client):
    assert client.get("/login", params={"data": "not json"}).status_code == 422
    assert client.get("/login", params={"data": json.dumps({"email": "a@x.com"})}).status_code == 422
    assert client.get("/login").status_code == 422


def test_logout_requires_token(client):
    response = client.get("/logout")

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
    assert response.json() == {"success": False, "message": "No token provided"}


def test_logout_acknowledges(client):
    token = signup(client).json()["token"]

    response = client.get("/logout", headers=auth_headers(token))

    assert response.status_code == 200
    assert response.json() == {"status": "successful"}


def test_token_still_valid_after_logout(client):
    token = signup(client).json()["token"]
    client.get("/logout", headers=auth_headers(token))

    assert client.get("/allposts", headers=auth_headers(token)).status_code == 200


def test_bad_token_is_forbidden(client):
    response = client.get("/allposts", headers=auth_headers("not-a-jwt"))

    assert response.status_code == 403
    assert response.json()["success"] is False


def test_non_bearer_scheme_is_unauthenticated(client):
    response = client.get("/allposts", headers={"Authorization": "Basic YTpi"})

    assert response.status_code == 401


def test_token_expires_after_two_hours(client, clock):
    token = signup(client).json()["token"]

    clock.advance(hours=1, minutes=59, seconds=59)
    assert client.get("/allposts", headers=auth_headers(token)).status_code == 200

    clock.advance(seconds=1)
    assert client.get("/allposts", headers=auth_headers(token)).status_code == 403


def test_health_reports_database_state(client, mongo):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": "connected"}

    mongo.admin.available = False
    assert client.get("/health").status_code == 503


def test_cors_allows_any_origin_without_credentials(client):
    response = client.get("/health", headers={"Origin": "https://blog.app"})

    assert response.headers["access-control-allow-origin"] == "*"
    assert "access-control-allow-credentials" not in response.headers

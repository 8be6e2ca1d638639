import time
from datetime import timedelta

from jose import jwt

from conftest import auth_header, register
from visit_tracker.application.services.auth_service import create_access_token, decode_access_token


def test_register_normalizes_email_and_returns_token(client):
    body = register(client, "Jane Rep", "JANE@X.com", password="secret1", role="rep")

    assert body["user"]["email"] == "jane@x.com"
    assert body["user"]["role"] == "rep"
    assert "password_hash" not in body["user"]
    assert decode_access_token(body["token"])["sub"] == body["user"]["id"]


def test_login_returns_token_for_same_user(client, jane):
    res = client.post("/auth/login", json={"email": "jane@x.com", "password": "secret1"})

    assert res.status_code == 200, res.text
    body = res.json()
    assert body["user"]["id"] == jane["user"]["id"]
    assert decode_access_token(body["token"])["sub"] == jane["user"]["id"]


def test_login_is_case_insensitive_on_email(client, jane):
    res = client.post("/auth/login", json={"email": "  Jane@X.COM ", "password": "secret1"})
    assert res.status_code == 200


def test_register_defaults_role_to_rep(client):
    res = client.post("/auth/register", json={"name": "Ann", "email": "ann@x.com", "password": "pw"})
    assert res.status_code == 201
    assert res.json()["user"]["role"] == "rep"


def test_duplicate_email_is_rejected_case_insensitively(client, jane, admin_token):
    res = client.post(
        "/auth/register",
        json={"name": "Other Jane", "email": "Jane@x.COM", "password": "another"},
    )

    assert res.status_code == 400
    assert res.json() == {"error": "Email already registered"}

    users = client.get("/users", headers=auth_header(admin_token)).json()
    assert [u["email"] for u in users].count("jane@x.com") == 1


def test_register_requires_name_email_and_password(client):
    res = client.post("/auth/register", json={"email": "x@x.com"})

    assert res.status_code == 400
    assert "name" in res.json()["error"]
    assert "password" in res.json()["error"]


def test_register_rejects_unknown_role(client):
    res = client.post(
        "/auth/register",
        json={"name": "Eve", "email": "eve@x.com", "password": "pw", "role": "superuser"},
    )
    assert res.status_code == 400
    assert "error" in res.json()


def test_login_failures_do_not_reveal_which_field_was_wrong(client, jane):
    wrong_password = client.post("/auth/login", json={"email": "jane@x.com", "password": "nope"})
    unknown_email = client.post("/auth/login", json={"email": "ghost@x.com", "password": "secret1"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}


def test_me_returns_current_user(client, jane):
    res = client.get("/auth/me", headers=auth_header(jane["token"]))

    assert res.status_code == 200
    assert res.json()["id"] == jane["user"]["id"]
    assert res.json()["name"] == "Jane Rep"


def test_me_requires_token(client):
    res = client.get("/auth/me")
    assert res.status_code == 401
    assert "error" in res.json()


def test_me_rejects_malformed_token(client):
    res = client.get("/auth/me", headers=auth_header("not-a-jwt"))
    assert res.status_code == 401


def test_me_rejects_non_bearer_scheme(client, jane):
    res = client.get("/auth/me", headers={"Authorization": f"Basic {jane['token']}"})
    assert res.status_code == 401


def test_me_rejects_expired_token(client, jane):
    expired = create_access_token(jane["user"]["id"], expires_delta=timedelta(seconds=-10))
    res = client.get("/auth/me", headers=auth_header(expired))
    assert res.status_code == 401


def test_me_rejects_token_signed_with_another_key(client, jane):
    forged = jwt.encode({"sub": jane["user"]["id"]}, "some-other-key", algorithm="HS256")
    res = client.get("/auth/me", headers=auth_header(forged))
    assert res.status_code == 401


def test_token_for_deleted_user_fails_authentication(client, jane, admin_token):
    res = client.delete(f"/users/{jane['user']['id']}", headers=auth_header(admin_token))
    assert res.status_code == 200

    res = client.get("/auth/me", headers=auth_header(jane["token"]))
    assert res.status_code == 401


def test_token_expires_after_seven_days(settings):
    token = create_access_token("user-1")
    payload = jwt.get_unverified_claims(token)
    assert settings.JWT_EXPIRATION_MINUTES == 7 * 24 * 60
    assert payload["sub"] == "user-1"
    assert abs(payload["exp"] - time.time() - 7 * 24 * 3600) < 60


def test_register_rejects_password_bcrypt_cannot_hash(client, admin_token):
    res = client.post("/auth/register", json={"name": "N", "email": "n@x.com", "password": "a\u0000b"})

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid password"}

    res = client.post(
        "/users",
        headers=auth_header(admin_token),
        json={"name": "N", "email": "n@x.com", "password": "a\u0000b"},
    )
    assert res.status_code == 400


def test_login_with_unknown_email_still_checks_a_hash(client, jane, monkeypatch):
    from visit_tracker.infrastructure.repositories.user_repository import pwd_context

    calls = []
    monkeypatch.setattr(pwd_context, "dummy_verify", lambda *a, **kw: calls.append(1))

    res = client.post("/auth/login", json={"email": "ghost@x.com", "password": "secret1"})

    assert res.status_code == 401
    assert calls == [1]

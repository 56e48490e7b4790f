"""
Authentication tests.

Verifies:
- Login issues a bearer token and never exposes the password hash
- Unknown username and wrong password fail with the same body
- Disabled accounts cannot log in even with the right password
- Missing token is 401; bad, expired or orphaned tokens are 403
"""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt
import pytest

from tooladmin.extensions import db
from tooladmin.models import User, UserRole

from conftest import DEFAULT_PASSWORD, auth_headers, get_auth_token


class TestLogin:

    def test_login_returns_token_and_user(self, client, make_user):
        make_user(UserRole.PRODUCT_MANAGER, "pm")

        resp = client.post("/api/auth/login", json={"username": "pm", "password": DEFAULT_PASSWORD})

        assert resp.status_code == 200
        body = resp.json
        assert body["token"]
        assert body["expiresAt"].endswith("Z")
        assert body["user"]["username"] == "pm"
        assert body["user"]["role"] == "product_manager"
        assert "passwordHash" not in body["user"]
        assert "password_hash" not in body["user"]

    def test_login_stamps_last_login(self, client, make_user):
        user = make_user(UserRole.CUSTOMER_SERVICE, "cs")
        user_id = user.id

        get_auth_token(client, "cs", DEFAULT_PASSWORD)

        assert db.session.get(User, user_id).last_login_at is not None

    def test_wrong_password_and_unknown_user_are_indistinguishable(self, client, make_user):
        make_user(UserRole.SALES_REPRESENTATIVE, "sales")

        wrong_password = client.post("/api/auth/login", json={"username": "sales", "password": "Nope123!!"})
        unknown_user = client.post("/api/auth/login", json={"username": "ghost", "password": "Nope123!!"})

        assert wrong_password.status_code == 401
        assert unknown_user.status_code == 401
        assert wrong_password.json == unknown_user.json
        assert wrong_password.json["message"] == "Invalid credentials"

    def test_unknown_user_is_checked_against_hash_of_same_cost(self, app, client, make_user, monkeypatch):
        app.config["BCRYPT_ROUNDS"] = 5
        make_user(UserRole.SALES_REPRESENTATIVE, "sales")
        checked = []
        real_checkpw = bcrypt.checkpw

        def spy(password, hashed):
            checked.append(hashed.decode("utf-8"))
            return real_checkpw(password, hashed)

        monkeypatch.setattr(bcrypt, "checkpw", spy)

        client.post("/api/auth/login", json={"username": "sales", "password": "Nope123!!"})
        client.post("/api/auth/login", json={"username": "ghost", "password": "Nope123!!"})

        assert len(checked) == 2
        assert [h[:7] for h in checked] == ["$2b$05$", "$2b$05$"]

    def test_disabled_account_cannot_login(self, client, make_user):
        make_user(UserRole.WAREHOUSE_MANAGER, "wh", is_active=False)

        resp = client.post("/api/auth/login", json={"username": "wh", "password": DEFAULT_PASSWORD})

        assert resp.status_code == 401
        assert resp.json["message"] == "Account is disabled"

    def test_disabled_account_with_wrong_password_gets_generic_message(self, client, make_user):
        make_user(UserRole.WAREHOUSE_MANAGER, "wh", is_active=False)

        resp = client.post("/api/auth/login", json={"username": "wh", "password": "Wrong123!!"})

        assert resp.status_code == 401
        assert resp.json["message"] == "Invalid credentials"

    @pytest.mark.parametrize("payload", [
        {},
        {"username": "admin"},
        {"password": "x"},
        {"username": 5, "password": "x"},
    ])
    def test_missing_fields_is_400(self, client, payload):
        resp = client.post("/api/auth/login", json=payload)
        assert resp.status_code == 400
        assert "message" in resp.json


class TestBearerToken:

    def test_me_returns_profile(self, client, make_user):
        make_user(UserRole.TECHNICAL_SUPPORT, "tech")
        token = get_auth_token(client, "tech", DEFAULT_PASSWORD)

        resp = client.get("/api/auth/me", headers=auth_headers(token))

        assert resp.status_code == 200
        assert resp.json["username"] == "tech"
        assert resp.json["role"] == "technical_support"
        assert "user" not in resp.json
        assert "passwordHash" not in resp.json

    def test_missing_token_is_401(self, client):
        resp = client.get("/api/auth/me")
        assert resp.status_code == 401
        assert resp.json["message"] == "Access token required"

    def test_non_bearer_header_is_401(self, client):
        resp = client.get("/api/auth/me", headers={"Authorization": "Basic abc"})
        assert resp.status_code == 401

    def test_garbage_token_is_403(self, client):
        resp = client.get("/api/auth/me", headers=auth_headers("not-a-jwt"))
        assert resp.status_code == 403

    def test_token_signed_with_other_secret_is_403(self, client, make_user):
        user = make_user(UserRole.SUPER_ADMIN, "root")
        now = datetime.now(timezone.utc)
        forged = jwt.encode(
            {"sub": user.id, "iat": now, "exp": now + timedelta(hours=1)},
            "some-other-secret",
            algorithm="HS256",
        )

        resp = client.get("/api/auth/me", headers=auth_headers(forged))
        assert resp.status_code == 403

    def test_expired_token_is_403(self, app, client, make_user):
        user = make_user(UserRole.SUPER_ADMIN, "root")
        issued = datetime.now(timezone.utc) - timedelta(hours=48)
        expired = jwt.encode(
            {"sub": user.id, "iat": issued, "exp": issued + timedelta(hours=24)},
            app.config["JWT_SECRET_KEY"],
            algorithm=app.config["JWT_ALGORITHM"],
        )

        resp = client.get("/api/auth/me", headers=auth_headers(expired))
        assert resp.status_code == 403
        assert resp.json["message"] == "Token expired"

    def test_token_for_deleted_user_is_403(self, client, make_user):
        user = make_user(UserRole.CUSTOMER_SERVICE, "temp")
        token = get_auth_token(client, "temp", DEFAULT_PASSWORD)

        db.session.delete(user)
        db.session.commit()

        resp = client.get("/api/auth/me", headers=auth_headers(token))
        assert resp.status_code == 403

    def test_token_for_deactivated_user_is_403(self, client, make_user, admin_headers):
        user = make_user(UserRole.CUSTOMER_SERVICE, "leaver")
        token = get_auth_token(client, "leaver", DEFAULT_PASSWORD)

        resp = client.put(f"/api/users/{user.id}", json={"isActive": False}, headers=admin_headers)
        assert resp.status_code == 200

        resp = client.get("/api/auth/me", headers=auth_headers(token))
        assert resp.status_code == 403

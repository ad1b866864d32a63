"""Tests for admin login and bearer token verification."""

import uuid
from datetime import timedelta

import jwt as pyjwt
from flask_jwt_extended import create_access_token, decode_token

from paperfair.extensions import db
from paperfair.models import User
from tests.conftest import ADMIN_LOGIN, user_count


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


class TestLogin:
    def test_wrong_password(self, client, app):
        resp = client.post("/api/admin/login", json={"email": ADMIN_LOGIN["email"], "password": "nope"})
        body = resp.get_json()
        assert resp.status_code == 401
        assert body["error"]["code"] == "INVALID_CREDENTIALS"
        assert "token" not in body
        assert user_count() == 0

    def test_wrong_email(self, client, app):
        resp = client.post("/api/admin/login", json={"email": "root", "password": ADMIN_LOGIN["password"]})
        assert resp.status_code == 401

    def test_missing_fields(self, client, app):
        resp = client.post("/api/admin/login", json={"email": ADMIN_LOGIN["email"]})
        assert resp.status_code == 400

    def test_success_issues_admin_token(self, client, app):
        resp = client.post("/api/admin/login", json=ADMIN_LOGIN)
        body = resp.get_json()
        assert resp.status_code == 200
        assert body["user"]["isAdmin"] is True
        assert body["user"]["email"] == "admin@admin.local"

        claims = decode_token(body["token"])
        assert claims["sub"] == body["user"]["id"]
        assert claims["is_admin"] is True
        assert claims["email"] == "admin@admin.local"
        assert claims["exp"] - claims["iat"] == 24 * 3600

    def test_repeated_login_reuses_admin_user(self, client, app):
        first = client.post("/api/admin/login", json=ADMIN_LOGIN).get_json()
        second = client.post("/api/admin/login", json=ADMIN_LOGIN).get_json()
        assert first["user"]["id"] == second["user"]["id"]
        assert user_count() == 1


class TestVerify:
    def test_valid_token(self, client, admin_headers):
        resp = client.get("/api/admin/verify", headers=admin_headers)
        assert resp.status_code == 200
        assert resp.get_json()["valid"] is True
        assert resp.get_json()["user"]["isAdmin"] is True

    def test_missing_header(self, client, app):
        resp = client.get("/api/admin/verify")
        assert resp.status_code == 401
        assert resp.get_json()["error"]["code"] == "UNAUTHENTICATED"

    def test_wrong_scheme(self, client, admin_token):
        resp = client.get("/api/admin/verify", headers={"Authorization": f"Token {admin_token}"})
        assert resp.status_code == 401

    def test_malformed_token(self, client, app):
        assert client.get("/api/admin/verify", headers=bearer("not-a-jwt")).status_code == 401

    def test_bad_signature(self, client, admin_token):
        claims = decode_token(admin_token)
        forged = pyjwt.encode(claims, "some-other-secret-that-is-long-enough", algorithm="HS256")
        assert client.get("/api/admin/verify", headers=bearer(forged)).status_code == 401

    def test_expired_token(self, client, admin_token):
        subject = decode_token(admin_token)["sub"]
        expired = create_access_token(identity=subject, expires_delta=timedelta(seconds=-10))
        assert client.get("/api/admin/verify", headers=bearer(expired)).status_code == 401

    def test_unknown_subject(self, client, app):
        token = create_access_token(identity=str(uuid.uuid4()), additional_claims={"is_admin": True})
        resp = client.get("/api/admin/verify", headers=bearer(token))
        assert resp.status_code == 401

    def test_non_admin_user_forbidden(self, client, app):
        user = User(email="voter@x.edu", name="Voter", student_id="V1")
        db.session.add(user)
        db.session.commit()
        # Claims are not trusted; the stored flag decides
        token = create_access_token(identity=str(user.id), additional_claims={"is_admin": True})
        resp = client.get("/api/admin/verify", headers=bearer(token))
        assert resp.status_code == 403
        assert resp.get_json()["error"]["code"] == "FORBIDDEN"

    def test_every_admin_route_is_gated(self, client, app):
        some_id = uuid.uuid4()
        routes = [
            ("get", "/api/admin/stats"),
            ("get", "/api/admin/submissions"),
            ("post", "/api/admin/submissions"),
            ("put", f"/api/admin/submissions/{some_id}"),
            ("delete", f"/api/admin/submissions/{some_id}"),
            ("get", "/api/admin/users"),
            ("put", f"/api/admin/users/{some_id}"),
            ("put", f"/api/admin/users/{some_id}/toggle-admin"),
            ("delete", f"/api/admin/users/{some_id}"),
            ("get", "/api/admin/votes"),
            ("delete", "/api/admin/votes"),
            ("delete", f"/api/admin/votes/{some_id}"),
            ("get", "/api/admin/votes/stats"),
        ]
        for method, path in routes:
            resp = getattr(client, method)(path, json={})
            assert resp.status_code == 401, (method, path)


class TestAuthGate:
    def test_result_carries_error_instead_of_raising(self, services, app):
        result = services.auth.authenticate_admin(None)
        assert not result.ok
        assert result.user is None
        assert result.error.status == 401

    def test_result_carries_user(self, services, app):
        token, user = services.auth.login(ADMIN_LOGIN["email"], ADMIN_LOGIN["password"])
        result = services.auth.authenticate_admin(token)
        assert result.ok
        assert result.user.id == user.id

    def test_login_restores_demoted_bootstrap_account(self, services, app):
        _, user = services.auth.login(ADMIN_LOGIN["email"], ADMIN_LOGIN["password"])
        user.is_admin = False
        db.session.commit()
        _, again = services.auth.login(ADMIN_LOGIN["email"], ADMIN_LOGIN["password"])
        assert again.id == user.id
        assert again.is_admin is True

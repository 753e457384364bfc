"""
Admin sign-in, session cookie, API gate and page gate.
"""

from datetime import timedelta

import pytest

from storefront.extensions import db
from storefront.models import SessionToken
from storefront.services import auth_service, session_service
from storefront.time_utils import utcnow

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, login

COOKIE = "sf-admin-session"


class TestLoginApi:

    def test_login_sets_http_only_cookie(self, client, admin_user):
        resp = login(client, ADMIN_EMAIL)
        assert resp.status_code == 200
        assert resp.json["is_admin"] is True
        assert "token" not in resp.json

        set_cookie = resp.headers.get("Set-Cookie")
        assert set_cookie.startswith(f"{COOKIE}=")
        assert "HttpOnly" in set_cookie

    def test_bad_credentials(self, client, admin_user):
        assert login(client, ADMIN_EMAIL, "WrongPass123!").status_code == 401
        assert login(client, "nadie@tienda.co").status_code == 401

    def test_missing_fields(self, client, db_session):
        assert client.post("/api/auth/login", json={"email": ADMIN_EMAIL}).status_code == 400

    @pytest.mark.parametrize(
        "payload",
        [
            {"email": 123, "password": "x"},
            {"email": ADMIN_EMAIL, "password": ["Password123!"]},
        ],
    )
    def test_non_string_credentials(self, client, db_session, payload):
        assert client.post("/api/auth/login", json=payload).status_code == 400

    def test_email_is_case_insensitive(self, client, admin_user):
        assert login(client, ADMIN_EMAIL.upper()).status_code == 200

    def test_session_endpoint(self, admin_client):
        resp = admin_client.get("/api/auth/session")
        assert resp.status_code == 200
        assert resp.json["user"]["email"] == ADMIN_EMAIL
        assert resp.json["is_admin"] is True

    def test_session_endpoint_without_cookie(self, client, db_session):
        assert client.get("/api/auth/session").status_code == 401

    def test_signout_revokes(self, admin_client):
        resp = admin_client.post("/api/auth/signout")
        assert resp.status_code == 200
        assert admin_client.get("/api/auth/session").status_code == 401
        assert db.session.query(SessionToken).filter_by(is_revoked=True).count() == 1


class TestRequireAdmin:

    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/api/orders"),
            ("GET", "/api/orders/1"),
            ("PATCH", "/api/orders?id=1"),
            ("POST", "/api/products"),
            ("PATCH", "/api/products/1"),
            ("DELETE", "/api/products/1"),
            ("POST", "/api/categories"),
            ("PATCH", "/api/categories/1"),
            ("DELETE", "/api/categories/1"),
            ("GET", "/api/admin/uploads/config"),
        ],
    )
    def test_requires_session(self, client, db_session, method, path):
        resp = getattr(client, method.lower())(path)
        assert resp.status_code == 401, f"{method} {path} returned {resp.status_code}"

    def test_non_admin_gets_403_and_session_revoked(self, client, plain_user):
        login(client, plain_user.email)
        resp = client.get("/api/orders")
        assert resp.status_code == 403

        token = db.session.query(SessionToken).filter_by(user_id=plain_user.id).one()
        assert token.is_revoked is True
        assert token.revoked_reason == "Not an authorized admin"

        # The revoked session no longer authenticates at all
        assert client.get("/api/orders").status_code == 401

    def test_revoked_admin_loses_access_on_next_request(self, admin_client):
        assert admin_client.get("/api/orders").status_code == 200
        auth_service.revoke_admin(ADMIN_EMAIL)
        assert admin_client.get("/api/orders").status_code == 403

    def test_idle_session_rejected(self, admin_client):
        token = db.session.query(SessionToken).one()
        token.last_used_at = utcnow() - timedelta(hours=3)
        db.session.commit()
        assert admin_client.get("/api/orders").status_code == 401

    def test_expired_session_rejected(self, admin_client):
        token = db.session.query(SessionToken).one()
        token.expires_at = utcnow() - timedelta(minutes=1)
        db.session.commit()
        assert admin_client.get("/api/orders").status_code == 401


class TestPageGate:

    def test_login_page_is_public(self, client, db_session):
        resp = client.get("/admin/login")
        assert resp.status_code == 200
        assert b"<form" in resp.data

    @pytest.mark.parametrize("path", ["/admin", "/admin/orders", "/admin/products", "/admin/categories"])
    def test_redirects_without_session(self, client, db_session, path):
        resp = client.get(path)
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/admin/login")

    def test_non_admin_redirected_with_error(self, client, plain_user):
        login(client, plain_user.email)
        resp = client.get("/admin")
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/admin/login?error=not_authorized")
        assert f"{COOKIE}=;" in resp.headers.get("Set-Cookie", "")

    def test_form_login_then_dashboard(self, client, admin_user, product):
        resp = client.post("/admin/login", data={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
        assert resp.status_code == 302
        assert resp.headers["Location"].endswith("/admin")

        resp = client.get("/admin")
        assert resp.status_code == 200
        assert "Productos activos".encode() in resp.data

    def test_form_login_bad_password(self, client, admin_user):
        resp = client.post("/admin/login", data={"email": ADMIN_EMAIL, "password": "nope"})
        assert resp.status_code == 401

    @pytest.mark.parametrize("path", ["/admin/orders", "/admin/orders?status=pending", "/admin/products", "/admin/categories"])
    def test_pages_render_for_admin(self, admin_client, product, path):
        assert admin_client.get(path).status_code == 200

    def test_logout(self, admin_client):
        resp = admin_client.post("/admin/logout")
        assert resp.status_code == 302
        assert admin_client.get("/admin").status_code == 302


class TestSessionService:

    def test_token_stored_hashed(self, admin_user):
        session, token = session_service.create_session(admin_user.id)
        assert session.token_hash == session_service.hash_token(token)
        assert token not in session.token_hash

    def test_cleanup_removes_old_revoked_sessions(self, admin_user):
        session, token = session_service.create_session(admin_user.id)
        session_service.revoke_session(token)
        session.created_at = utcnow() - timedelta(days=31)
        db.session.commit()

        session_service.create_session(admin_user.id)

        assert session_service.cleanup_expired_sessions() == 1
        assert db.session.query(SessionToken).count() == 1


class TestPasswords:

    @pytest.mark.parametrize("password", ["short1!", "alllowercase1!", "ALLUPPER1!", "NoDigits!!", "NoSpecial123"])
    def test_weak_passwords_rejected(self, db_session, password):
        with pytest.raises(auth_service.PasswordValidationError):
            auth_service.create_user("weak@tienda.co", password)

    def test_duplicate_user(self, admin_user):
        with pytest.raises(ValueError):
            auth_service.create_user(ADMIN_EMAIL, ADMIN_PASSWORD)

# Overview: Flask API routes for admin sign-in; parses input and returns JSON responses.

# backend/storefront/routes/auth.py
"""
Authentication API routes

The session token travels only in an HttpOnly cookie (ADMIN_SESSION_COOKIE);
it is never returned in a response body.
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import clear_session_cookie, current_session_token
from ..services import auth_service
from ..services import session_service
from ..services.session_service import SESSION_ABSOLUTE_TIMEOUT


auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def set_session_cookie(response, token: str):
    response.set_cookie(
        current_app.config["ADMIN_SESSION_COOKIE"],
        token,
        max_age=int(SESSION_ABSOLUTE_TIMEOUT.total_seconds()),
        httponly=True,
        secure=current_app.config["SESSION_COOKIE_SECURE"],
        samesite="Lax",
        path="/",
    )
    return response


def sign_in(email: str, password: str):
    """Authenticate and open a session. Returns (user, token) or (None, None)."""
    user = auth_service.authenticate(email, password)
    if not user:
        return None, None

    _, token = session_service.create_session(
        user_id=user.id,
        user_agent=request.headers.get("User-Agent"),
        ip_address=request.remote_addr,
    )
    return user, token


@auth_bp.post("/login")
def login_route():
    """
    Authenticate user and set the session cookie.

    Signing in does not check the admin list; the admin gate does that on
    every protected request.
    """
    try:
        data = request.get_json(silent=True) or {}
        email = data.get("email")
        password = data.get("password")

        if not all([email, password]):
            return jsonify({"error": "email and password required"}), 400
        if not isinstance(email, str) or not isinstance(password, str):
            return jsonify({"error": "email and password must be strings"}), 400

        user, token = sign_in(email, password)
        if not user:
            return jsonify({"error": "Invalid credentials"}), 401

        response = jsonify({
            "user": user.to_dict(),
            "is_admin": auth_service.is_authorized_admin(user.email),
            "message": "Login successful",
        })
        return set_session_cookie(response, token), 200

    except Exception:
        current_app.logger.exception("Failed to login user")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.post("/signout")
def signout_route():
    """Revoke the current session (if any) and clear the cookie."""
    try:
        session_service.revoke_session(current_session_token())
        response = jsonify({"message": "Signed out"})
        return clear_session_cookie(response), 200
    except Exception:
        current_app.logger.exception("Failed to sign out")
        return jsonify({"error": "Internal server error"}), 500


@auth_bp.get("/session")
def session_route():
    context = session_service.validate_session(current_session_token())
    if not context:
        return jsonify({"error": "Not signed in"}), 401

    return jsonify({
        "user": context.user.to_dict(),
        "session": context.session.to_dict(),
        "is_admin": auth_service.is_authorized_admin(context.user.email),
    }), 200

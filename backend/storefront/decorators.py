# Overview: Admin session decorators for API routes.

from functools import wraps
from flask import current_app, g, jsonify, request

from .services import auth_service, session_service


def current_session_token() -> str | None:
    return request.cookies.get(current_app.config["ADMIN_SESSION_COOKIE"])


def resolve_admin():
    """
    Look up the request's session and admin status.

    Returns (context, error) where error is one of None, "unauthenticated" or
    "not_authorized". A valid session whose user is not on the admin list is
    revoked before returning.
    """
    context = session_service.validate_session(current_session_token())
    if not context:
        return None, "unauthenticated"

    if not auth_service.is_authorized_admin(context.user.email):
        session_service.revoke_session_record(context.session, "Not an authorized admin")
        return context, "not_authorized"

    return context, None


def clear_session_cookie(response):
    response.delete_cookie(current_app.config["ADMIN_SESSION_COOKIE"], path="/")
    return response


def require_admin(f):
    """
    Require an admin session cookie.

    Sets the following Flask g attributes:
    - g.current_user: The authenticated User object
    - g.session_context: The full SessionContext object

    SECURITY: Returns 401 if the cookie is missing or the session is invalid,
    expired or revoked. Returns 403 (and revokes the session) if the user is
    not an authorized admin.
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        context, error = resolve_admin()

        if error == "unauthenticated":
            return jsonify({"error": "Authentication required"}), 401

        if error == "not_authorized":
            current_app.logger.warning("Rejected non-admin session for %s", context.user.email)
            response = jsonify({"error": "Not authorized"})
            return clear_session_cookie(response), 403

        g.current_user = context.user
        g.session_context = context

        return f(*args, **kwargs)

    return decorated_function

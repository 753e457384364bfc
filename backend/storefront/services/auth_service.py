# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Sign-in accounts (User) and the authorized-admin list (AdminUser) are kept
apart: authenticating proves who someone is, AdminUser decides whether they
may use the back-office.

SECURITY NOTES:
- Passwords hashed with bcrypt (cost factor from BCRYPT_ROUNDS, default 12)
- Minimum 8 characters, upper, lower, digit and special char required
- Session tokens managed separately (see session_service.py)
"""

import re

import bcrypt
from flask import current_app, has_app_context

from ..extensions import db
from ..models import AdminUser, User
from storefront.time_utils import utcnow


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def validate_password_strength(password: str) -> None:
    """
    Validate password meets strength requirements.

    Raises PasswordValidationError if requirements not met.
    """
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Z]', password):
        raise PasswordValidationError("Password must contain at least one uppercase letter")

    if not re.search(r'[a-z]', password):
        raise PasswordValidationError("Password must contain at least one lowercase letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")

    if not re.search(r"[!@#$%^&*(),.'\":{}|<>]", password):
        raise PasswordValidationError("Password must contain at least one special character")


def hash_password(password: str) -> str:
    """Validate strength, then hash with bcrypt."""
    validate_password_strength(password)
    rounds = current_app.config.get("BCRYPT_ROUNDS", 12) if has_app_context() else 12
    hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt(rounds=rounds))
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """Timing-safe bcrypt check; malformed hashes never match."""
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def create_user(email: str, password: str) -> User:
    """
    Create a sign-in account.

    Raises:
        ValueError: If the email is missing or already registered
        PasswordValidationError: If password doesn't meet requirements
    """
    email = normalize_email(email)
    if not email:
        raise ValueError("email is required")

    if db.session.query(User).filter_by(email=email).first():
        raise ValueError(f"User {email} already exists")

    user = User(email=email, password_hash=hash_password(password), is_active=True)
    db.session.add(user)
    db.session.commit()
    return user


def authenticate(email: str, password: str) -> User | None:
    """Return the active user for valid credentials, else None."""
    user = db.session.query(User).filter_by(email=normalize_email(email)).first()
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None

    user.last_login_at = utcnow()
    db.session.commit()
    return user


def is_authorized_admin(email: str) -> bool:
    return (
        db.session.query(AdminUser.id)
        .filter_by(email=normalize_email(email))
        .first()
        is not None
    )


def grant_admin(email: str) -> AdminUser:
    email = normalize_email(email)
    admin = db.session.query(AdminUser).filter_by(email=email).first()
    if admin:
        return admin
    admin = AdminUser(email=email)
    db.session.add(admin)
    db.session.commit()
    return admin


def revoke_admin(email: str) -> bool:
    admin = db.session.query(AdminUser).filter_by(email=normalize_email(email)).first()
    if not admin:
        return False
    db.session.delete(admin)
    db.session.commit()
    return True

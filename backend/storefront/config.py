# backend/storefront/config.py
from __future__ import annotations
import os


def _env_bool(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).strip().lower() in {"1", "true", "yes", "on"}


class Config:
    # Optional "SECRET_KEY", with default dev key
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev-secret-key-change-me")

    # SQLite DB stored in backend/instance/storefront.sqlite3
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        "DATABASE_URL", #optional alternative location
        "sqlite:///storefront.sqlite3", #default local location
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Checkout hand-off
    WHATSAPP_NUMBER = os.environ.get("WHATSAPP_NUMBER", "573001234567")
    SHIPPING_COST = int(os.environ.get("SHIPPING_COST", "0"))
    SITE_URL = os.environ.get("SITE_URL", "http://localhost:5000")

    # Order notification emails (Resend HTTP API)
    EMAILS_ENABLED = _env_bool("EMAILS_ENABLED")
    RESEND_API_KEY = os.environ.get("RESEND_API_KEY", "")
    EMAIL_API_URL = os.environ.get("EMAIL_API_URL", "https://api.resend.com/emails")
    EMAIL_FROM = os.environ.get("EMAIL_FROM", "onboarding@resend.dev")
    ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "")
    EMAIL_DISPATCH_WORKERS = int(os.environ.get("EMAIL_DISPATCH_WORKERS", "2"))

    # Department/city lookup for the checkout form
    GEO_API_BASE = os.environ.get("GEO_API_BASE", "https://api-colombia.com/api/v1")
    GEO_API_TIMEOUT = float(os.environ.get("GEO_API_TIMEOUT", "10"))

    # Image CDN (uploads go straight from the browser using an unsigned preset)
    CLOUDINARY_CLOUD_NAME = os.environ.get("CLOUDINARY_CLOUD_NAME", "")
    CLOUDINARY_UPLOAD_PRESET = os.environ.get("CLOUDINARY_UPLOAD_PRESET", "")

    # Cookies
    CART_SESSION_KEY = "storefront-cart"
    ADMIN_SESSION_COOKIE = os.environ.get("ADMIN_SESSION_COOKIE", "sf-admin-session")
    SESSION_COOKIE_SECURE = _env_bool("SESSION_COOKIE_SECURE")

    BCRYPT_ROUNDS = int(os.environ.get("BCRYPT_ROUNDS", "12"))

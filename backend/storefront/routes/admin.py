# Overview: Server-rendered back-office pages behind the admin session gate.

# backend/storefront/routes/admin.py
"""
Admin pages.

Every request under /admin except the login page passes through
admin_gate(): one session lookup and one admin-list lookup, no caching.
Pages are read-only views; writes go through the JSON endpoints.
"""

from flask import Blueprint, current_app, g, redirect, render_template, request, url_for

from ..decorators import clear_session_cookie, current_session_token, resolve_admin
from ..extensions import db
from ..models import Category, Product
from ..models.orders import ORDER_STATUSES, STATUS_LABELS
from ..services import categories_service, order_service, products_service, session_service
from ..services.order_service import OrderError
from .auth import set_session_cookie, sign_in


admin_bp = Blueprint("admin", __name__, url_prefix="/admin")

PUBLIC_ENDPOINTS = {"admin.login_page", "admin.login_submit"}


@admin_bp.before_request
def admin_gate():
    if request.endpoint in PUBLIC_ENDPOINTS:
        return None

    context, error = resolve_admin()

    if error == "unauthenticated":
        return redirect(url_for("admin.login_page"))

    if error == "not_authorized":
        current_app.logger.warning("Non-admin %s tried to open %s", context.user.email, request.path)
        response = redirect(url_for("admin.login_page", error="not_authorized"))
        return clear_session_cookie(response)

    g.current_user = context.user
    g.session_context = context
    return None


@admin_bp.get("/login")
def login_page():
    return render_template("admin/login.html", error=request.args.get("error"))


@admin_bp.post("/login")
def login_submit():
    email = (request.form.get("email") or "").strip()
    password = request.form.get("password") or ""

    if not email or not password:
        return render_template("admin/login.html", error="missing_credentials"), 400

    user, token = sign_in(email, password)
    if not user:
        return render_template("admin/login.html", error="invalid_credentials", email=email), 401

    return set_session_cookie(redirect(url_for("admin.dashboard")), token)


@admin_bp.post("/logout")
def logout():
    session_service.revoke_session(current_session_token())
    return clear_session_cookie(redirect(url_for("admin.login_page")))


@admin_bp.get("")
def dashboard():
    stats = order_service.order_stats()
    stats["active_products"] = db.session.query(Product).filter(Product.active.is_(True)).count()
    stats["categories"] = db.session.query(Category).count()

    return render_template(
        "admin/dashboard.html",
        stats=stats,
        recent_orders=order_service.list_orders(limit=5),
        status_labels=STATUS_LABELS,
    )


@admin_bp.get("/orders")
def orders_page():
    status = request.args.get("status") or None
    try:
        orders = order_service.list_orders(status=status, q=request.args.get("q") or None)
    except OrderError:
        return redirect(url_for("admin.orders_page"))

    return render_template(
        "admin/orders.html",
        orders=orders,
        current_status=status,
        statuses=ORDER_STATUSES,
        status_labels=STATUS_LABELS,
    )


@admin_bp.get("/products")
def products_page():
    return render_template(
        "admin/products.html",
        products=products_service.list_products(include_inactive=True),
    )


@admin_bp.get("/categories")
def categories_page():
    return render_template(
        "admin/categories.html",
        categories=categories_service.list_categories(include_inactive=True),
    )

# Overview: Order notification emails sent through the Resend HTTP API.

"""
Order emails.

Both senders return a result dict instead of raising: email is a
non-critical side effect of checkout and callers only log the outcome.
With EMAILS_ENABLED off nothing leaves the process.
"""

from __future__ import annotations

import httpx
from flask import current_app, render_template


def _post_email(*, to: str, subject: str, html: str, sender: str, client: httpx.Client | None = None) -> dict:
    cfg = current_app.config
    headers = {"Authorization": f"Bearer {cfg['RESEND_API_KEY']}"}
    payload = {"from": sender, "to": [to], "subject": subject, "html": html}

    if client is None:
        with httpx.Client(timeout=15.0) as own_client:
            response = own_client.post(cfg["EMAIL_API_URL"], json=payload, headers=headers)
    else:
        response = client.post(cfg["EMAIL_API_URL"], json=payload, headers=headers)

    response.raise_for_status()
    return response.json()


def _send(kind: str, *, to: str | None, subject: str, html: str, sender: str, client: httpx.Client | None) -> dict:
    if not to:
        current_app.logger.warning("No recipient for %s email, skipping", kind)
        return {"success": False, "error": "No recipient"}

    try:
        data = _post_email(to=to, subject=subject, html=html, sender=sender, client=client)
    except (httpx.HTTPError, ValueError) as exc:
        current_app.logger.error("Failed to send %s email: %s", kind, exc)
        return {"success": False, "error": str(exc)}

    current_app.logger.info("Sent %s email to %s", kind, to)
    return {"success": True, "data": data}


def send_order_confirmation_to_customer(order: dict, client: httpx.Client | None = None) -> dict:
    cfg = current_app.config
    if not cfg["EMAILS_ENABLED"]:
        current_app.logger.info("Emails disabled; customer email for order #%s skipped", order["order_number"])
        return {"success": True, "skipped": True}

    return _send(
        "customer",
        to=order.get("customer_email") or cfg["ADMIN_EMAIL"],
        subject=f"Confirmación de pedido #{order['order_number']}",
        html=render_template("emails/order_customer.html", order=order, site_url=cfg["SITE_URL"]),
        sender=f"Tienda <{cfg['EMAIL_FROM']}>",
        client=client,
    )


def send_order_notification_to_admin(order: dict, client: httpx.Client | None = None) -> dict:
    cfg = current_app.config
    if not cfg["EMAILS_ENABLED"]:
        current_app.logger.info("Emails disabled; admin email for order #%s skipped", order["order_number"])
        return {"success": True, "skipped": True}

    return _send(
        "admin",
        to=cfg["ADMIN_EMAIL"],
        subject=f"Nuevo Pedido #{order['order_number']}",
        html=render_template("emails/order_admin.html", order=order, site_url=cfg["SITE_URL"]),
        sender=f"Notificaciones <{cfg['EMAIL_FROM']}>",
        client=client,
    )

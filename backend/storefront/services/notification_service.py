# Overview: Background dispatch of order notification emails.

from __future__ import annotations

from concurrent.futures import Future, ThreadPoolExecutor

from flask import Flask, current_app

from . import email_service


class EmailDispatcher:
    """
    Runs order emails off the request path.

    The request handler only waits for the order commit; dispatch returns a
    Future immediately. Failures are logged inside the worker and never reach
    the caller. There is no retry.
    """

    def __init__(self, app: Flask | None = None):
        self.app: Flask | None = None
        self._executor: ThreadPoolExecutor | None = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        self.app = app
        self._executor = ThreadPoolExecutor(
            max_workers=app.config.get("EMAIL_DISPATCH_WORKERS", 2),
            thread_name_prefix="order-email",
        )
        app.extensions["email_dispatcher"] = self

    def dispatch_order_emails(self, order: dict) -> Future:
        """order must be a plain dict; ORM rows do not cross threads."""
        return self._executor.submit(self._send_all, self.app, order)

    @staticmethod
    def _send_all(app: Flask, order: dict) -> list[dict]:
        with app.app_context():
            try:
                results = [
                    email_service.send_order_confirmation_to_customer(order),
                    email_service.send_order_notification_to_admin(order),
                ]
            except Exception:
                app.logger.exception("Order email dispatch failed (order #%s)", order.get("order_number"))
                return []
            app.logger.info("Order #%s emails processed: %s", order.get("order_number"), results)
            return results

    def shutdown(self, wait: bool = True) -> None:
        if self._executor is not None:
            self._executor.shutdown(wait=wait)


def get_email_dispatcher() -> EmailDispatcher:
    return current_app.extensions["email_dispatcher"]

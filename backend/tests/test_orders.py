"""
Checkout order creation and admin order reads.
"""

from urllib.parse import quote, unquote

import pytest

from storefront.extensions import db
from storefront.models import Order
from storefront.models.orders import STATUS_CANCELLED, STATUS_PENDING
from storefront.services import order_service
from storefront.validation import ValidationError

from conftest import order_payload


class TestCreateOrderEndpoint:

    def test_valid_order(self, client, db_session):
        resp = client.post("/api/orders", json=order_payload())
        assert resp.status_code == 200

        body = resp.json
        assert body["success"] is True
        assert body["orderNumber"] == 1

        order = db.session.get(Order, body["orderId"])
        assert order.status == STATUS_PENDING
        assert order.subtotal == 200000
        assert order.shipping_cost == 0
        assert order.total == 200000
        assert order.customer_email == "maria@example.com"

    def test_whatsapp_link_carries_summary(self, client, db_session):
        link = client.post("/api/orders", json=order_payload()).json["whatsappLink"]
        assert link.startswith("https://wa.me/573001234567?text=")

        message = unquote(link.split("?text=", 1)[1])
        assert quote("María Pérez", safe="") in link
        assert "*Nuevo Pedido #1*" in message
        assert "1. Body de encaje x2 - $ 200.000" in message
        assert "*TOTAL: $ 200.000*" in message

    def test_order_numbers_increase(self, client, db_session):
        numbers = [client.post("/api/orders", json=order_payload()).json["orderNumber"] for _ in range(3)]
        assert numbers == [1, 2, 3]

    def test_empty_email_is_accepted(self, client, db_session):
        resp = client.post("/api/orders", json=order_payload(customer_email=""))
        assert resp.status_code == 200
        assert db.session.get(Order, resp.json["orderId"]).customer_email is None

    @pytest.mark.parametrize(
        "overrides,field",
        [
            ({"customer_name": "Al"}, "customer_name"),
            ({"customer_phone": "300123456"}, "customer_phone"),
            ({"customer_phone": "30012345678"}, "customer_phone"),
            ({"customer_phone": "300-123-456"}, "customer_phone"),
            ({"customer_email": "no-es-email"}, "customer_email"),
            ({"customer_department": ""}, "customer_department"),
            ({"customer_city": ""}, "customer_city"),
            ({"customer_address": "Calle 1"}, "customer_address"),
            ({"items": []}, "items"),
            ({"total": 0}, "total"),
        ],
    )
    def test_invalid_payload_persists_nothing(self, client, db_session, overrides, field):
        resp = client.post("/api/orders", json=order_payload(**overrides))
        assert resp.status_code == 400
        assert resp.json["success"] is False
        assert field in [e["field"] for e in resp.json["errors"]]
        assert db.session.query(Order).count() == 0

    def test_all_errors_reported_together(self, client, db_session):
        resp = client.post("/api/orders", json=order_payload(customer_name="", customer_phone="1"))
        fields = {e["field"] for e in resp.json["errors"]}
        assert {"customer_name", "customer_phone"} <= fields

    def test_invalid_item_fields(self, client, db_session):
        items = [{"productId": 1, "name": "", "quantity": 0, "price": -5}]
        resp = client.post("/api/orders", json=order_payload(items=items))
        fields = {e["field"] for e in resp.json["errors"]}
        assert {"items.0.name", "items.0.quantity", "items.0.price"} <= fields

    def test_non_json_body(self, client, db_session):
        resp = client.post("/api/orders", data="nope", content_type="text/plain")
        assert resp.status_code == 400

    def test_shipping_cost_added_to_total(self, app, db_session):
        app.config["SHIPPING_COST"] = 12000
        try:
            order, _ = order_service.create_order(order_payload())
        finally:
            app.config["SHIPPING_COST"] = 0
        assert order.subtotal == 200000
        assert order.shipping_cost == 12000
        assert order.total == 212000

    def test_email_failure_does_not_affect_order(self, client, db_session, monkeypatch):
        from storefront.services import email_service

        def explode(order, client=None):
            raise RuntimeError("smtp down")

        monkeypatch.setattr(email_service, "send_order_confirmation_to_customer", explode)

        resp = client.post("/api/orders", json=order_payload())
        assert resp.status_code == 200
        assert db.session.query(Order).count() == 1


    def test_dispatch_failure_does_not_affect_order(self, app, client, db_session, monkeypatch, caplog):
        def refuse(order):
            raise RuntimeError("cannot schedule new futures after shutdown")

        monkeypatch.setattr(app.extensions["email_dispatcher"], "dispatch_order_emails", refuse)

        resp = client.post("/api/orders", json=order_payload())
        assert resp.status_code == 200
        assert resp.json["success"] is True
        assert db.session.query(Order).count() == 1
        assert "Failed to queue emails" in caplog.text


class TestCreateOrderService:

    def test_validation_error_raised_before_db(self, db_session):
        with pytest.raises(ValidationError) as excinfo:
            order_service.create_order({"items": []})
        assert excinfo.value.errors
        assert db_session.query(Order).count() == 0


class TestOrderReads:

    def test_list_requires_admin(self, client, db_session):
        assert client.get("/api/orders").status_code == 401

    def test_list_newest_first(self, admin_client, db_session):
        for name in ("Ana Gómez", "Beto Ruiz"):
            admin_client.post("/api/orders", json=order_payload(customer_name=name))

        resp = admin_client.get("/api/orders")
        assert resp.status_code == 200
        assert [o["order_number"] for o in resp.json["orders"]] == [2, 1]

    def test_filter_by_status(self, admin_client, db_session):
        first = admin_client.post("/api/orders", json=order_payload()).json["orderId"]
        admin_client.post("/api/orders", json=order_payload())
        admin_client.patch(f"/api/orders?id={first}", json={"status": STATUS_CANCELLED})

        resp = admin_client.get("/api/orders?status=cancelled")
        assert [o["id"] for o in resp.json["orders"]] == [first]

    def test_unknown_status_filter(self, admin_client, db_session):
        assert admin_client.get("/api/orders?status=lost").status_code == 400

    def test_search_by_name_phone_and_number(self, admin_client, db_session):
        admin_client.post("/api/orders", json=order_payload(customer_name="Ana Gómez", customer_phone="3110000000"))
        admin_client.post("/api/orders", json=order_payload(customer_name="Beto Ruiz", customer_phone="3220000000"))

        assert [o["customer_name"] for o in admin_client.get("/api/orders?q=beto").json["orders"]] == ["Beto Ruiz"]
        assert [o["customer_name"] for o in admin_client.get("/api/orders?q=3110").json["orders"]] == ["Ana Gómez"]
        assert [o["order_number"] for o in admin_client.get("/api/orders?q=2").json["orders"]] == [2]

    def test_detail(self, admin_client, db_session):
        order_id = admin_client.post("/api/orders", json=order_payload()).json["orderId"]
        resp = admin_client.get(f"/api/orders/{order_id}")
        assert resp.status_code == 200
        assert resp.json["order"]["items"][0]["name"] == "Body de encaje"

        assert admin_client.get("/api/orders/9999").status_code == 404


class TestOrderStats:

    def test_sales_total_excludes_cancelled(self, db_session):
        kept, _ = order_service.create_order(order_payload())
        dropped, _ = order_service.create_order(order_payload(total=50000))
        order_service.update_order(dropped.id, {"status": STATUS_CANCELLED})

        stats = order_service.order_stats()
        assert stats == {"total_orders": 2, "pending_orders": 1, "sales_total": kept.total}

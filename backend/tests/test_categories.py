"""
Category endpoints and ordering rules.
"""

from storefront.extensions import db
from storefront.models import Category


class TestCategoryReads:

    def test_display_order(self, client, db_session):
        db.session.add_all([
            Category(label="Zapatos", slug="zapatos", order_position=0),
            Category(label="Accesorios", slug="accesorios", order_position=0),
            Category(label="Aceites", slug="aceites", order_position=1),
            Category(label="Oculta", slug="oculta", order_position=0, active=False),
        ])
        db.session.commit()

        labels = [c["label"] for c in client.get("/api/categories").json["categories"]]
        assert labels == ["Accesorios", "Zapatos", "Aceites"]


class TestCategoryWrites:

    def test_requires_admin(self, client, db_session):
        assert client.post("/api/categories", json={"label": "Nueva"}).status_code == 401

    def test_create_defaults(self, admin_client, db_session):
        first = admin_client.post("/api/categories", json={"label": "Lencería Fina"})
        assert first.status_code == 201
        assert first.json["category"]["slug"] == "lenceria-fina"
        assert first.json["category"]["order_position"] == 0

        second = admin_client.post("/api/categories", json={"label": "Juguetes"})
        assert second.json["category"]["order_position"] == 1

    def test_create_validation(self, admin_client, db_session):
        assert admin_client.post("/api/categories", json={"label": "A"}).status_code == 400
        assert admin_client.post("/api/categories", json={"label": "Ok", "order_position": -1}).status_code == 400
        assert admin_client.post("/api/categories", json={}).status_code == 400

    def test_duplicate_slug(self, admin_client, category):
        assert admin_client.post("/api/categories", json={"label": "Lencería"}).status_code == 409

    def test_rename_updates_slug(self, admin_client, category):
        resp = admin_client.patch(f"/api/categories/{category.id}", json={"label": "Ropa Interior"})
        assert resp.status_code == 200
        assert resp.json["category"]["slug"] == "ropa-interior"

    def test_explicit_slug_kept(self, admin_client, category):
        resp = admin_client.patch(f"/api/categories/{category.id}", json={"label": "Ropa", "slug": "lenceria"})
        assert resp.json["category"]["slug"] == "lenceria"

    def test_update_unknown(self, admin_client, db_session):
        assert admin_client.patch("/api/categories/9999", json={"label": "Nada"}).status_code == 404

    def test_delete_blocked_while_products_exist(self, admin_client, product):
        resp = admin_client.delete(f"/api/categories/{product.category_id}")
        assert resp.status_code == 400
        assert "1 product" in resp.json["error"]

    def test_delete_empty_category(self, admin_client, category):
        assert admin_client.delete(f"/api/categories/{category.id}").status_code == 200
        assert db.session.query(Category).count() == 0

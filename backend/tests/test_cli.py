"""
Flask CLI commands.
"""

from storefront.extensions import db
from storefront.models import AdminUser, User
from storefront.services import order_service

from conftest import order_payload


class TestAdminCommands:

    def test_create_admin(self, app, db_session):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["admins", "create", "--email", "Nuevo@Tienda.co", "--password", "Password123!"])

        assert "PASS Created admin: nuevo@tienda.co" in result.output
        assert db.session.query(User).filter_by(email="nuevo@tienda.co").count() == 1
        assert db.session.query(AdminUser).filter_by(email="nuevo@tienda.co").count() == 1

    def test_create_admin_weak_password(self, app, db_session):
        runner = app.test_cli_runner()
        result = runner.invoke(args=["admins", "create", "--email", "a@tienda.co", "--password", "weak"])

        assert "FAIL Password validation failed" in result.output
        assert db.session.query(User).count() == 0

    def test_grant_list_revoke(self, app, db_session):
        runner = app.test_cli_runner()

        assert "PASS" in runner.invoke(args=["admins", "grant", "--email", "ops@tienda.co"]).output
        assert "ops@tienda.co" in runner.invoke(args=["admins", "list"]).output
        assert "PASS" in runner.invoke(args=["admins", "revoke", "--email", "ops@tienda.co"]).output
        assert "FAIL" in runner.invoke(args=["admins", "revoke", "--email", "ops@tienda.co"]).output
        assert "No admins found." in runner.invoke(args=["admins", "list"]).output


class TestMaintenanceCommands:

    def test_sessions_cleanup(self, app, db_session):
        result = app.test_cli_runner().invoke(args=["sessions", "cleanup"])
        assert "PASS Deleted 0 session(s)" in result.output

    def test_orders_list(self, app, db_session):
        runner = app.test_cli_runner()
        assert "No orders found." in runner.invoke(args=["orders", "list"]).output

        order_service.create_order(order_payload())
        result = runner.invoke(args=["orders", "list", "--status", "pending"])
        assert "María Pérez" in result.output
        assert "$ 200.000" in result.output
        assert "Pendiente" in result.output

"""
Pytest fixtures for storefront backend tests.

Provides test database setup, catalog/admin fixtures, and test client.
"""

import pytest
from storefront import create_app
from storefront.extensions import db
from storefront.models import Category, Product
from storefront.services import auth_service


TEST_CONFIG = {
    'TESTING': True,
    'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
    'SQLALCHEMY_TRACK_MODIFICATIONS': False,
    'SECRET_KEY': 'test-secret',
    'BCRYPT_ROUNDS': 4,
    'EMAILS_ENABLED': False,
    'ADMIN_EMAIL': 'pedidos@tienda.co',
    'WHATSAPP_NUMBER': '573001234567',
    'SHIPPING_COST': 0,
    'SITE_URL': 'http://localhost:5000',
    'CLOUDINARY_CLOUD_NAME': 'demo-cloud',
    'CLOUDINARY_UPLOAD_PRESET': 'storefront-unsigned',
    'GEO_API_BASE': 'https://geo.test/api/v1',
}

ADMIN_EMAIL = "admin@tienda.co"
ADMIN_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app(TEST_CONFIG)

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()
        app.extensions["email_dispatcher"].shutdown()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def category(db_session):
    category = Category(label="Lencería", slug="lenceria", order_position=0, active=True)
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture(scope='function')
def product(db_session, category):
    product = Product(
        name="Body de encaje",
        slug="body-de-encaje",
        description="Encaje **francés**",
        category_id=category.id,
        price=125000,
        discount_pct=20,
        final_price=100000,
        image="https://res.cloudinary.com/demo-cloud/image/upload/body.jpg",
        images=[],
        featured=True,
        active=True,
    )
    db_session.add(product)
    db_session.commit()
    return product


@pytest.fixture(scope='function')
def admin_user(db_session):
    """Sign-in account that is also on the admin list."""
    user = auth_service.create_user(ADMIN_EMAIL, ADMIN_PASSWORD)
    auth_service.grant_admin(ADMIN_EMAIL)
    return user


@pytest.fixture(scope='function')
def plain_user(db_session):
    """Sign-in account that is NOT an admin."""
    return auth_service.create_user("cliente@tienda.co", ADMIN_PASSWORD)


def login(client, email: str, password: str = ADMIN_PASSWORD):
    """Helper: sign in through the API; the session cookie stays on the client."""
    return client.post('/api/auth/login', json={
        'email': email,
        'password': password
    })


@pytest.fixture(scope='function')
def admin_client(client, admin_user):
    response = login(client, ADMIN_EMAIL)
    assert response.status_code == 200
    return client


def order_payload(**overrides) -> dict:
    """A valid checkout submission."""
    payload = {
        "customer_name": "María Pérez",
        "customer_phone": "3001234567",
        "customer_email": "maria@example.com",
        "customer_department": "Antioquia",
        "customer_city": "Medellín",
        "customer_address": "Calle 10 # 43-12, El Poblado",
        "notes": "Entregar en portería",
        "items": [
            {"productId": 1, "name": "Body de encaje", "quantity": 2, "price": 100000},
        ],
        "total": 200000,
    }
    payload.update(overrides)
    return payload

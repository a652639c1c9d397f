"""
Pytest fixtures for outletstock backend tests.

Provides an app bound to an in-memory database, the default outlets, users
and products, and logged-in headers for each role.
"""

from types import SimpleNamespace

import bcrypt
import pytest

from outletstock import create_app
from outletstock.extensions import db
from outletstock.models import Outlet, Product, User
from outletstock.services import catalog_service


PASSWORD = "Password123!"

# Low-cost hash so fixtures stay fast; verify_password accepts any cost factor
PASSWORD_HASH = bcrypt.hashpw(PASSWORD.encode("utf-8"), bcrypt.gensalt(rounds=4)).decode("utf-8")


@pytest.fixture(scope='function')
def app(tmp_path):
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'JWT_SECRET_KEY': 'test-jwt-secret-key-with-enough-length',
        'SECRET_KEY': 'test-secret-key',
        'UPLOAD_FOLDER': str(tmp_path / 'uploads'),
        'ORG_TIMEZONE': 'UTC',
    })

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def seed(app):
    """
    Default outlets, users and products.

    Returns plain ids so tests never hold ORM objects across app contexts.
    """
    with app.app_context():
        catalog_service.seed_defaults(PASSWORD_HASH)

        outlets = {o.type: o.id for o in db.session.query(Outlet).all()}
        users = {u.role: u.id for u in db.session.query(User).all()}
        products = {p.name: p.id for p in db.session.query(Product).all()}

    return SimpleNamespace(
        cafe=outlets["CAFE"],
        restaurant=outlets["RESTAURANT"],
        mini_market=outlets["MINI_MARKET"],
        users=users,
        coffee=products["Coffee Beans"],
        sugar=products["Sugar"],
        bread=products["Bread"],
        water=products["Bottled Water"],
    )


def get_auth_token(client, email: str, password: str = PASSWORD) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'email': email,
        'password': password,
    })
    if response.status_code == 200:
        return response.json['data']['token']
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def owner_headers(client, seed):
    return auth_headers(get_auth_token(client, "owner@inventory.com"))


@pytest.fixture(scope='function')
def purchasing_headers(client, seed):
    return auth_headers(get_auth_token(client, "purchasing@inventory.com"))


@pytest.fixture(scope='function')
def cafe_headers(client, seed):
    return auth_headers(get_auth_token(client, "cafe@inventory.com"))


@pytest.fixture(scope='function')
def restaurant_headers(client, seed):
    return auth_headers(get_auth_token(client, "restaurant@inventory.com"))

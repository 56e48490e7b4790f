"""
Pytest fixtures for tooladmin backend tests.

Each test gets its own app on a fresh in-memory SQLite database, with the
app context pushed for the duration of the test (requests made through the
test client share it, so models created here are visible to the routes).
"""

from datetime import timedelta
from decimal import Decimal

import pytest

from tooladmin import create_app
from tooladmin.config import TestingConfig
from tooladmin.extensions import db
from tooladmin.models import (
    Category,
    Customer,
    CustomerType,
    Product,
    User,
    UserRole,
    Warranty,
    WarrantyStatus,
)
from tooladmin.services.auth_service import hash_password
from tooladmin.services.token_service import issue_token
from tooladmin.time_utils import utcnow


DEFAULT_PASSWORD = "Password123!"


@pytest.fixture(scope='function')
def app():
    """Create application for testing."""
    app = create_app(TestingConfig)

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    return db.session


@pytest.fixture(scope='function')
def make_user(db_session):
    """Factory: make_user(role, username=None, is_active=True) -> User"""
    def _make(role: UserRole, username: str | None = None, is_active: bool = True) -> User:
        username = username or role.value
        user = User(
            username=username,
            email=f"{username}@toolstech.test",
            password_hash=hash_password(DEFAULT_PASSWORD),
            first_name=username.title(),
            last_name="Tester",
            role=role,
            is_active=is_active,
        )
        db_session.add(user)
        db_session.commit()
        return user
    return _make


@pytest.fixture(scope='function')
def headers_for(make_user):
    """Factory: headers_for(role, username=None) -> Authorization headers for a fresh user with that role."""
    def _headers(role: UserRole, username: str | None = None) -> dict:
        user = make_user(role, username)
        token, _ = issue_token(user)
        return auth_headers(token)
    return _headers


@pytest.fixture(scope='function')
def admin_headers(headers_for):
    return headers_for(UserRole.SUPER_ADMIN)


@pytest.fixture(scope='function')
def customer(db_session):
    customer = Customer(
        contact_first_name="Dana",
        contact_last_name="Builder",
        company_name="Builder Bros LLC",
        email="dana@builderbros.test",
        customer_type=CustomerType.PROFESSIONAL_CONTRACTOR,
    )
    db_session.add(customer)
    db_session.commit()
    return customer


@pytest.fixture(scope='function')
def category(db_session):
    category = Category(name="Power Tools", slug="power-tools", sort_order=1)
    db_session.add(category)
    db_session.commit()
    return category


@pytest.fixture(scope='function')
def make_product(db_session):
    """Factory: make_product(sku, categories, **overrides) -> Product"""
    def _make(sku: str, categories: list, **overrides) -> Product:
        fields = dict(
            sku=sku,
            name=f"Product {sku}",
            description="A useful tool",
            detailed_specifications="18V, brushless",
            brand="Torque",
            cost_price=Decimal("80.00"),
            selling_price=Decimal("129.99"),
        )
        fields.update(overrides)
        product = Product(**fields)
        product.categories = list(categories)
        db_session.add(product)
        db_session.commit()
        return product
    return _make


@pytest.fixture(scope='function')
def product(make_product, category):
    return make_product("DRL-001", [category])


@pytest.fixture(scope='function')
def make_warranty(db_session):
    """Factory: make_warranty(customer, product, end_in_days, status=ACTIVE) -> Warranty"""
    def _make(customer, product, end_in_days: int, status: WarrantyStatus = WarrantyStatus.ACTIVE, **extra) -> Warranty:
        now = utcnow()
        end = now + timedelta(days=end_in_days)
        start = min(now - timedelta(days=365), end)
        warranty = Warranty(
            customer_id=customer.id,
            product_id=product.id if product is not None else None,
            purchase_date=start,
            warranty_start_date=start,
            warranty_end_date=end,
            status=status,
            **extra,
        )
        db_session.add(warranty)
        db_session.commit()
        return warranty
    return _make


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}

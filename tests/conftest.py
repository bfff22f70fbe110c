"""
Shared test fixtures.

Sets up an isolated SQLite database so tests never touch the
real one. Tables are created before and dropped after every
test, so each test starts empty.
"""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from back_office.main import app
from back_office.models import User, UserRole
from back_office.models.base import Base, get_db
from back_office.schemas.catalog import CustomerCreate, ProductCreate, PaymentTypeCreate
from back_office.services.catalog_service import CatalogService


TEST_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
)

TestSessionLocal = sessionmaker(
    bind=engine,
    autocommit=False,
    autoflush=False,
)


@pytest.fixture(autouse=True)
def setup_database():
    """Create all tables before each test, drop them after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db_session():
    """Provide a database session for direct service testing."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


def make_user(db_session, role: UserRole, email: str) -> User:
    user = User(name=role.value.title(), email=email, role=role)
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def admin_user(db_session):
    return make_user(db_session, UserRole.ADMIN, "admin@example.com")


@pytest.fixture
def staff_user(db_session):
    return make_user(db_session, UserRole.STAFF, "staff@example.com")


@pytest.fixture
def customer(db_session):
    """An active customer with nothing owed."""
    return CatalogService(db_session).create_customer(
        CustomerCreate(name="Rahim Traders", phone="01700000000")
    )


@pytest.fixture
def product(db_session):
    """An active product with 100 pieces on hand, 10 per bundle."""
    return CatalogService(db_session).create_product(
        ProductCreate(
            name="GI Pipe",
            size="1/2 inch",
            pieces_per_bundle=10,
            rate_per_kg=Decimal("95.00"),
            opening_stock=100,
            min_stock_alert=20,
        )
    )


@pytest.fixture
def payment_type(db_session):
    return CatalogService(db_session).create_payment_type(
        PaymentTypeCreate(name="Cash")
    )


@pytest.fixture
def client(db_session, admin_user):
    """
    Provide a test client bound to the test session.

    get_db is overridden so the app uses our session, and every
    request acts as the seeded admin unless a test says otherwise.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    test_client = TestClient(app)
    test_client.headers.update({"X-User-Id": str(admin_user.id)})
    yield test_client
    app.dependency_overrides.clear()

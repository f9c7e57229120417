import os

# Must be set before the application modules read their settings
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("CACHE_ENABLED", "false")

import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.main import app
from storefront.database import Base, get_db


# Create test database (SQLite in-memory for testing)
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    """Override database dependency for testing."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# Override the dependency
app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def confirmation_task():
    """Keep order confirmation e-mails off the broker during tests."""
    with patch("storefront.api.orders.send_order_confirmation.delay") as delay:
        yield delay


@pytest.fixture(scope="function")
def client():
    """Create test client with fresh database for each test."""
    # Create tables
    Base.metadata.create_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client

    # Drop tables after test
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session():
    """Create database session for direct database access in tests."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()

    yield session

    session.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def create_user(client):
    """Factory creating a user through the API; returns the response JSON."""
    counter = {"n": 0}

    def _create(receive_email: bool = False, **overrides):
        counter["n"] += 1
        payload = {
            "email": f"shopper{counter['n']}@storefront.io",
            "firstName": "Jane",
            "lastName": "Doe",
            "address": "1 Market Street",
            "userPreference": {"receiveEmail": receive_email},
        }
        payload.update(overrides)
        response = client.post("/users", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture
def create_product(client):
    """Factory creating a product through the API; returns the response JSON."""

    def _create(name: str = "Test Product", price: float = 10.0, stock: int = 10,
                category: str = "ELECTRONICS", **overrides):
        payload = {
            "name": name,
            "description": f"{name} description",
            "category": category,
            "price": price,
            "stock": stock,
        }
        payload.update(overrides)
        response = client.post("/products", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _create
